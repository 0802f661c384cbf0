"""
=============================================================================
ACCESS LOGGING MIDDLEWARE
=============================================================================

Writes one access-log line per request, in the formats understood by
standard log analysis tools (GoAccess, AWStats, any Apache log parser).

=============================================================================
LOG FORMATS
=============================================================================

    COMMON LOG FORMAT ("common", the default):
    ┌─────────────────────────────────────────────────────────────────────┐
    │ 192.168.100.5 - kamil [26/May/1983:03:30:45 +0200] "GET / HTTP/1.1" │
    │ 401 500                                                             │
    │ ──────────────────────────────────────────────────────────────────  │
    │ host  ident user  [timestamp]  "method uri protocol"  status  size  │
    └─────────────────────────────────────────────────────────────────────┘

    COMBINED LOG FORMAT ("combined"):
        common line + ' "<referer>" "<user-agent>"'

    JSON ("json"):
        one JSON object per line, for log aggregators

Details that matter for byte-exact output:

    host        remote address, port stripped ("10.0.0.1:8080" → "10.0.0.1")
    ident       always "-"
    user        userinfo name from the request URL, else "-"
    timestamp   time the request was RECEIVED, with its UTC offset;
                month names are English regardless of locale
    uri         the raw request-target, may be empty
    quotes      nothing is escaped: the format is positional
    size        body bytes actually written, 0 if none

=============================================================================
HOW STATUS AND SIZE ARE CAPTURED
=============================================================================

The handler writes through a ResponseWriter. The middleware slips its
own writer in front of the real one:

    ┌──────────────┐   write_header / write   ┌──────────────────────┐
    │   handler    │ ───────────────────────► │ _LoggingResponseWriter│
    └──────────────┘                          │  first status: 401    │
                                              │  bytes so far: 500    │
                                              └──────────┬───────────┘
                                                         │ forwards
                                                         ▼
                                              ┌──────────────────────┐
                                              │  real ResponseWriter │
                                              └──────────────────────┘

A body write without an explicit status counts as 200, which is what
the real writer commits in that case.

=============================================================================
OUTPUT AND CONCURRENCY
=============================================================================

Lines go either to a stream (``out``) or, when no stream is given, to
the ``httphandlers.access`` logger. Stream writes are serialized with a
lock so concurrent requests never interleave two lines; the logging
module serializes its own handlers.

A failing stream (disk full, closed pipe) is reported on the package
logger. The client already has its response, so the failure is never
turned into an HTTP error.

=============================================================================
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, Iterable, Mapping, Optional, Union
import io
import json
import logging
import threading

from .base import Middleware, NextHandler
from ..config import AccessLogConfig, LOG_FORMATS, parse_log_level
from ..errors import ConfigError
from ..http.request import HTTPRequest
from ..http.response import MONTHS
from ..http.status_codes import HTTPStatus
from ..http.writer import Handler, ResponseWriter


# Package diagnostics (sink failures, handler errors) go here; access
# lines go to the "httphandlers.access" logger or the configured stream.
logger = logging.getLogger(__name__)

ACCESS_LOGGER_NAME = "httphandlers.access"


# =============================================================================
# LOG RECORD
# =============================================================================

def format_log_timestamp(ts: datetime) -> str:
    """
    Format a timestamp the way Apache does in access logs.

        26/May/1983:03:30:45 +0200

    Naive datetimes are taken to be local time.
    """
    if ts.tzinfo is None:
        ts = ts.astimezone()

    offset = ts.utcoffset()
    minutes = int(offset.total_seconds() // 60) if offset is not None else 0
    sign = "-" if minutes < 0 else "+"
    hours, minutes = divmod(abs(minutes), 60)

    return (
        f"{ts.day:02d}/{MONTHS[ts.month - 1]}/{ts.year:04d}:"
        f"{ts.hour:02d}:{ts.minute:02d}:{ts.second:02d} "
        f"{sign}{hours:02d}{minutes:02d}"
    )


@dataclass
class AccessLogRecord:
    """
    Everything one access-log line is made of.

    Built after the handler returns, rendered once, then thrown away.
    Rendering is pure: the same record always gives the same line.
    """

    host: str
    user: str
    timestamp: datetime
    method: str
    uri: str
    protocol: str
    status: int
    size: int
    referer: str = ""
    user_agent: str = ""

    @classmethod
    def from_request(
        cls,
        request: HTTPRequest,
        timestamp: datetime,
        status: int,
        size: int,
    ) -> "AccessLogRecord":
        return cls(
            host=request.client_host,
            user=request.user or "-",
            timestamp=timestamp,
            method=request.method,
            uri=request.request_uri,
            protocol=request.version,
            status=int(status),
            size=size,
            referer=request.referer,
            user_agent=request.user_agent,
        )

    @property
    def request_line(self) -> str:
        return f"{self.method} {self.uri} {self.protocol}"

    def to_common(self) -> str:
        """Common Log Format line, without the trailing newline."""
        return (
            f"{self.host} - {self.user} [{format_log_timestamp(self.timestamp)}] "
            f'"{self.request_line}" {self.status} {self.size}'
        )

    def to_combined(self) -> str:
        """Combined Log Format line, without the trailing newline."""
        return f'{self.to_common()} "{self.referer}" "{self.user_agent}"'

    def to_dict(self) -> Dict[str, Any]:
        """Dictionary form for JSON output."""
        return {
            "host": self.host,
            "user": self.user,
            "timestamp": self.timestamp.isoformat(),
            "method": self.method,
            "uri": self.uri,
            "protocol": self.protocol,
            "status": self.status,
            "size": self.size,
            "referer": self.referer,
            "user_agent": self.user_agent,
        }

    def render(self, log_format: str) -> str:
        if log_format == "json":
            return json.dumps(self.to_dict())
        if log_format == "combined":
            return self.to_combined()
        return self.to_common()


# =============================================================================
# OUTPUT STREAMS
# =============================================================================

class SynchronizedStream:
    """
    A stream that writes whole lines under a lock.

    Text streams receive str and binary streams receive UTF-8 bytes.
    A stream counts as text if it derives from io.TextIOBase or has a
    ``mode`` without "b" (e.g. SpooledTemporaryFile(mode="w")). Any
    other stream is tried with bytes first; if it rejects them with a
    TypeError it is switched to str for good.

    Share one instance between several loggers writing to the same file
    so that they also share the lock:

        access = SynchronizedStream(open("access.log", "ab"))
        api = LoggingHandler(access, api_handler)
        admin = LoggingHandler(access, admin_handler)
    """

    def __init__(self, stream):
        if stream is None:
            raise TypeError("SynchronizedStream needs a stream, got None")
        self.stream = stream
        self._text = _is_text_stream(stream)
        self._lock = threading.Lock()

    def write_line(self, line: str) -> None:
        with self._lock:
            if self._text:
                self.stream.write(line)
            else:
                try:
                    self.stream.write(line.encode("utf-8"))
                except TypeError:
                    self.stream.write(line)
                    self._text = True
            flush = getattr(self.stream, "flush", None)
            if flush is not None:
                flush()


def _is_text_stream(stream) -> bool:
    if isinstance(stream, io.TextIOBase):
        return True
    mode = getattr(stream, "mode", None)
    return isinstance(mode, str) and "b" not in mode


def synchronized(out) -> SynchronizedStream:
    """Wrap ``out`` in a SynchronizedStream unless it already is one."""
    if isinstance(out, SynchronizedStream):
        return out
    return SynchronizedStream(out)


def write_log(out, request: HTTPRequest, ts: datetime, status: int, size: int) -> None:
    """
    Write one Common Log Format line to ``out``.

    Example:
        write_log(sys.stdout, request, ts, 200, 100)
        # 192.168.100.5 - - [26/May/1983:03:30:45 +0200] "GET  HTTP/1.1" 200 100
    """
    record = AccessLogRecord.from_request(request, ts, status, size)
    synchronized(out).write_line(record.to_common() + "\n")


def write_combined_log(out, request: HTTPRequest, ts: datetime, status: int, size: int) -> None:
    """Write one Combined Log Format line to ``out``."""
    record = AccessLogRecord.from_request(request, ts, status, size)
    synchronized(out).write_line(record.to_combined() + "\n")


# =============================================================================
# INTERPOSED WRITER
# =============================================================================

class _LoggingResponseWriter(ResponseWriter):
    """
    Forwards everything to the real writer, remembering the first status
    and counting body bytes.

    The real writer enforces the write-once rules; this class only
    observes, so a HeadersSentError from the real writer surfaces to the
    handler exactly as it would without logging.
    """

    def __init__(self, writer: ResponseWriter):
        self._writer = writer
        self._status: Optional[int] = None
        self.size = 0

    @property
    def status(self) -> int:
        return self._status if self._status is not None else HTTPStatus.OK

    @property
    def headers(self) -> Mapping[str, str]:
        return self._writer.headers

    @property
    def headers_sent(self) -> bool:
        return self._writer.headers_sent

    def set_header(self, name: str, value: str) -> None:
        self._writer.set_header(name, value)

    def del_header(self, name: str) -> None:
        self._writer.del_header(name)

    def write_header(self, status: int) -> None:
        self._writer.write_header(status)
        if self._status is None:
            self._status = int(status)

    def write(self, data: Union[bytes, str]) -> int:
        written = self._writer.write(data)
        if self._status is None:
            self._status = HTTPStatus.OK
        self.size += written
        return written


# =============================================================================
# MIDDLEWARE
# =============================================================================

class AccessLogMiddleware(Middleware):
    """
    Access-log middleware.

    Put it first in the pipeline so it sees every request, including
    those answered by inner middleware:

        pipeline.add(AccessLogMiddleware(out=sys.stdout))   # FIRST
        pipeline.add(...)

    Usage:
        # Common format to stdout
        AccessLogMiddleware(out=sys.stdout)

        # Combined format through the logging module
        AccessLogMiddleware(log_format="combined")

        # JSON, skipping noisy health checks
        AccessLogMiddleware(log_format="json", skip_paths=["/health"])
    """

    def __init__(
        self,
        out=None,
        log_format: str = "common",
        log_level: Union[int, str] = logging.INFO,
        logger_name: str = ACCESS_LOGGER_NAME,
        skip_paths: Optional[Iterable[str]] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """
        Args:
            out: Stream to write lines to. None sends them to the
                 ``logger_name`` logger instead.
            log_format: "common", "combined" or "json"
            log_level: Level for lines sent to the logger
            logger_name: Logger used when ``out`` is None
            skip_paths: Request paths that are served but not logged
            clock: Returns the request timestamp; defaults to local now

        Raises:
            ConfigError: If log_format or log_level is invalid
        """
        if log_format not in LOG_FORMATS:
            raise ConfigError(
                f"Unknown log format {log_format!r}, expected one of {', '.join(LOG_FORMATS)}"
            )

        self.log_format = log_format
        self.log_level = parse_log_level(log_level)
        self.skip_paths = frozenset(skip_paths or ())
        self._out = synchronized(out) if out is not None else None
        self._access_logger = logging.getLogger(logger_name)
        self._clock = clock or (lambda: datetime.now().astimezone())

    @classmethod
    def from_config(cls, config: AccessLogConfig, out=None) -> "AccessLogMiddleware":
        """Build the middleware from a validated AccessLogConfig."""
        config.validate()
        return cls(
            out=out,
            log_format=config.log_format,
            log_level=config.level,
            logger_name=config.logger_name,
            skip_paths=config.skip_paths,
        )

    def __call__(self, writer: ResponseWriter, request: HTTPRequest, next: NextHandler) -> None:
        # Timestamp of receipt, taken before the handler runs.
        received = self._clock()
        logged = _LoggingResponseWriter(writer)

        try:
            next(logged, request)
        except Exception as e:
            logger.error(
                f"Request failed: {request.method} {request.url} "
                f"- {type(e).__name__}: {e}"
            )
            raise
        finally:
            self._log_request(request, received, logged)

    def _log_request(
        self,
        request: HTTPRequest,
        received: datetime,
        logged: "_LoggingResponseWriter",
    ) -> None:
        # Must not raise; this runs in the finally block of __call__.
        try:
            if request.path in self.skip_paths:
                return
            record = AccessLogRecord.from_request(request, received, logged.status, logged.size)
            self._emit(record)
        except Exception as e:
            logger.warning(f"Failed to write access log line: {type(e).__name__}: {e}")

    def _emit(self, record: AccessLogRecord) -> None:
        line = record.render(self.log_format)

        if self._out is None:
            self._access_logger.log(self.log_level, line)
        else:
            self._out.write_line(line + "\n")


# =============================================================================
# HANDLER DECORATORS
# =============================================================================

class LoggingHandler:
    """
    Wraps a handler, writing a Common Log Format line per request.

        app = LoggingHandler(sys.stdout, MethodHandler(GET=show))
    """

    log_format = "common"

    def __init__(self, out, handler: Handler):
        if not callable(handler):
            raise TypeError(f"{type(self).__name__} cannot wrap {handler!r}: not callable")
        self.handler = handler
        self.middleware = AccessLogMiddleware(out=out, log_format=self.log_format)

    def __call__(self, writer: ResponseWriter, request: HTTPRequest) -> None:
        self.middleware(writer, request, self.handler)


class CombinedLoggingHandler(LoggingHandler):
    """Like LoggingHandler, in Combined Log Format (adds referer and user agent)."""

    log_format = "combined"
