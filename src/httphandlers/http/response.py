"""
=============================================================================
HTTP RESPONSE
=============================================================================

A finished HTTP/1.1 response: what a ResponseRecorder holds once a
handler has returned, and what the WSGI bridge hands to the server.

=============================================================================
HTTP RESPONSE ANATOMY
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │  HTTP/1.1 405 Method Not Allowed\r\n          ← status line         │
    │  Allow: GET, POST\r\n                         ← headers             │
    │  Content-Type: text/plain; charset=utf-8\r\n                        │
    │  Content-Length: 19\r\n                       ← auto-added          │
    │  Date: Thu, 26 May 1983 01:30:45 GMT\r\n      ← auto-added          │
    │  Server: httphandlers/1.0\r\n                 ← auto-added          │
    │  \r\n                                         ← separator           │
    │  Method not allowed\n                         ← body                │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict

from .status_codes import HTTPStatus, reason_phrase


# Month and weekday names for HTTP and log dates. Spelled out instead of
# using strftime("%b"), which follows the process locale.
MONTHS = ["Jan", "Feb", "Mar", "Apr", "May", "Jun",
          "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]
WEEKDAYS = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]


@dataclass
class HTTPResponse:
    """
    Represents a complete HTTP response.

    ``status`` is a plain int so that non-standard codes survive the
    trip from a handler to the wire.
    """

    status: int = HTTPStatus.OK
    headers: Dict[str, str] = field(default_factory=dict)
    body: bytes = b""
    version: str = "HTTP/1.1"

    @property
    def status_line(self) -> str:
        """
        Get the HTTP status line.

        Format: HTTP-VERSION SP STATUS-CODE SP REASON-PHRASE
        Example: "HTTP/1.1 200 OK"
        """
        return f"{self.version} {int(self.status)} {reason_phrase(self.status)}"

    def get_header(self, name: str, default: str = "") -> str:
        """Get a header value (case-insensitive lookup)."""
        wanted = name.lower()
        for key, value in self.headers.items():
            if key.lower() == wanted:
                return value
        return default

    def to_bytes(self, server_name: str = "httphandlers/1.0") -> bytes:
        """
        Serialize the response for sending over a socket.

        Content-Length, Date and Server are added when the handler did
        not set them. The headers dict itself is left untouched.
        """
        response_headers = dict(self.headers)
        present = {name.lower() for name in response_headers}

        # Content-Length: without it the client cannot tell where the
        # body ends on a keep-alive connection.
        if "content-length" not in present:
            response_headers["Content-Length"] = str(len(self.body))

        if "date" not in present:
            response_headers["Date"] = format_http_date(datetime.now(timezone.utc))

        if "server" not in present:
            response_headers["Server"] = server_name

        lines = [self.status_line]
        for name, value in response_headers.items():
            lines.append(f"{name}: {value}")
        lines.append("")

        header_bytes = "\r\n".join(lines).encode("utf-8") + b"\r\n"
        return header_bytes + self.body


def format_http_date(dt: datetime) -> str:
    """
    Format a datetime as an HTTP-date (RFC 9110).

    Format: Day, DD Mon YYYY HH:MM:SS GMT
    Example: Thu, 26 May 1983 01:30:45 GMT

    HTTP dates are always GMT; aware datetimes are converted first.
    """
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc)

    return (
        f"{WEEKDAYS[dt.weekday()]}, "
        f"{dt.day:02d} {MONTHS[dt.month - 1]} {dt.year} "
        f"{dt.hour:02d}:{dt.minute:02d}:{dt.second:02d} GMT"
    )
