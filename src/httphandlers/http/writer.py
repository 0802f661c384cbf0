"""
=============================================================================
RESPONSE WRITERS
=============================================================================

A handler does not return a response object; it writes one through a
ResponseWriter. This lets decorators such as the access logger sit in
front of the real writer and watch what goes through it.

=============================================================================
WRITE-ONCE SEMANTICS
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                     │
    │   set_header() ... set_header()     headers are mutable             │
    │          │                                                          │
    │          ▼                                                          │
    │   write_header(status)  ─┐                                          │
    │          or              ├──►  COMMIT: status + headers are final   │
    │   first write(data)     ─┘     (write() commits status 200)         │
    │          │                                                          │
    │          ▼                                                          │
    │   write(data) ... write(data)       body bytes only                 │
    │                                                                     │
    │   set_header() after commit    → HeadersSentError                   │
    │   write_header() after commit  → ignored, warning logged            │
    │                                                                     │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
HANDLER SIGNATURE
=============================================================================

    def handler(writer: ResponseWriter, request: HTTPRequest) -> None:
        writer.set_header("Content-Type", "text/plain; charset=utf-8")
        writer.write(b"ok\\n")

Any callable with this signature is a Handler: functions, bound methods,
or instances defining __call__ (MethodHandler, LoggingHandler, ...).

=============================================================================
"""

from abc import ABC, abstractmethod
from types import MappingProxyType
from typing import Callable, Dict, Mapping, Optional, Union
import logging

from ..errors import HeadersSentError
from .request import HTTPRequest
from .response import HTTPResponse
from .status_codes import HTTPStatus


logger = logging.getLogger(__name__)


def canonical_header_key(name: str) -> str:
    """
    Canonical form of a header name.

        "content-type" → "Content-Type"
        "x-request-id" → "X-Request-Id"
    """
    return "-".join(part.capitalize() for part in name.split("-"))


class ResponseWriter(ABC):
    """
    The response sink a handler writes to.

    Subclasses either produce the response themselves (ResponseRecorder)
    or forward to another writer while observing the calls (the access
    logger's interposed writer).
    """

    @property
    @abstractmethod
    def headers(self) -> Mapping[str, str]:
        """Read-only view of the response headers, canonical names."""

    @property
    @abstractmethod
    def headers_sent(self) -> bool:
        """True once the status and headers have been committed."""

    @abstractmethod
    def set_header(self, name: str, value: str) -> None:
        """Set a header, replacing any previous value."""

    @abstractmethod
    def del_header(self, name: str) -> None:
        """Remove a header if present."""

    @abstractmethod
    def write_header(self, status: int) -> None:
        """Commit the status code and headers."""

    @abstractmethod
    def write(self, data: Union[bytes, str]) -> int:
        """
        Write body bytes, committing status 200 first if needed.

        Strings are encoded as UTF-8. Returns the number of bytes written.
        """

    def get_header(self, name: str, default: str = "") -> str:
        return self.headers.get(canonical_header_key(name), default)


class ResponseRecorder(ResponseWriter):
    """
    In-memory ResponseWriter.

    Records the status, a snapshot of the headers taken at commit time,
    and the body. Used by tests and by the WSGI bridge, which runs a
    handler to completion before handing the result to the server.

    Usage:
        recorder = ResponseRecorder()
        handler(recorder, request)

        recorder.status      # 405
        recorder.headers     # {"Allow": "GET, POST", ...}
        recorder.body        # b"Method not allowed\\n"
        recorder.result()    # HTTPResponse
    """

    def __init__(self):
        self._headers: Dict[str, str] = {}
        self._sent_headers: Optional[Dict[str, str]] = None
        self._status: Optional[int] = None
        self._body = bytearray()

    @property
    def headers(self) -> Mapping[str, str]:
        if self._sent_headers is not None:
            return MappingProxyType(self._sent_headers)
        return MappingProxyType(self._headers)

    @property
    def headers_sent(self) -> bool:
        return self._status is not None

    @property
    def status(self) -> int:
        """
        The committed status, or 200 if the handler never committed one.

        A handler that returns without writing anything still produces
        a 200 response once the server finishes it.
        """
        return self._status if self._status is not None else HTTPStatus.OK

    @property
    def body(self) -> bytes:
        return bytes(self._body)

    def set_header(self, name: str, value: str) -> None:
        if self.headers_sent:
            raise HeadersSentError(name)
        self._headers[canonical_header_key(name)] = str(value)

    def del_header(self, name: str) -> None:
        if self.headers_sent:
            raise HeadersSentError(name)
        self._headers.pop(canonical_header_key(name), None)

    def write_header(self, status: int) -> None:
        if self.headers_sent:
            logger.warning(
                f"Superfluous write_header({status}) call; "
                f"status {self._status} already sent"
            )
            return

        if not 100 <= status <= 999:
            raise ValueError(f"Invalid HTTP status code: {status}")

        self._status = int(status)
        self._sent_headers = dict(self._headers)

    def write(self, data: Union[bytes, str]) -> int:
        if isinstance(data, str):
            data = data.encode("utf-8")

        if not self.headers_sent:
            self.write_header(HTTPStatus.OK)

        self._body.extend(data)
        return len(data)

    def result(self) -> HTTPResponse:
        """Build the finished HTTPResponse."""
        headers = self._sent_headers if self._sent_headers is not None else self._headers
        return HTTPResponse(status=self.status, headers=dict(headers), body=self.body)


# A Handler writes a response for one request.
Handler = Callable[[ResponseWriter, HTTPRequest], None]


def serve(handler: Handler, request: HTTPRequest) -> HTTPResponse:
    """
    Run a handler against an in-memory recorder and return the response.

    Exceptions raised by the handler propagate.
    """
    recorder = ResponseRecorder()
    handler(recorder, request)
    return recorder.result()
