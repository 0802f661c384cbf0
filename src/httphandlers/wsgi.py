"""
=============================================================================
WSGI BRIDGE
=============================================================================

Runs any handler as a PEP 3333 application, so the decorators in this
package can sit behind wsgiref, gunicorn, uWSGI or any other WSGI server.

    from wsgiref.simple_server import make_server

    users = MethodHandler(GET=list_users, POST=create_user)
    app = WSGIAdapter(LoggingHandler(sys.stdout, users))

    make_server("127.0.0.1", 8080, app).serve_forever()

=============================================================================
ENVIRON → HTTPRequest
=============================================================================

    REQUEST_METHOD                  → method
    wsgi.url_scheme, HTTP_HOST,
    SCRIPT_NAME, PATH_INFO,
    QUERY_STRING                    → url (absolute)
    REMOTE_USER                     → userinfo of url (logged user)
    RAW_URI / REQUEST_URI           → request_uri (raw request-target)
    SERVER_PROTOCOL                 → version
    REMOTE_ADDR [+ REMOTE_PORT]     → remote_addr
    HTTP_*, CONTENT_TYPE,
    CONTENT_LENGTH                  → headers
    wsgi.input                      → body

The handler runs to completion against a ResponseRecorder; the recorded
status and headers are then passed to start_response and the body is
returned as a single chunk.

=============================================================================
"""

from typing import Any, Callable, Dict, Iterable, List, Tuple
from urllib.parse import quote
from wsgiref.util import request_uri as wsgi_request_uri
import logging

from .http.request import HTTPRequest
from .http.status_codes import reason_phrase
from .http.writer import Handler, ResponseRecorder


logger = logging.getLogger(__name__)

StartResponse = Callable[[str, List[Tuple[str, str]]], Any]


def request_from_environ(environ: Dict[str, Any]) -> HTTPRequest:
    """Build an HTTPRequest from a WSGI environ dict."""
    headers: Dict[str, str] = {}
    for key, value in environ.items():
        if key.startswith("HTTP_"):
            headers[key[5:].replace("_", "-").lower()] = value
    if environ.get("CONTENT_TYPE"):
        headers["content-type"] = environ["CONTENT_TYPE"]
    if environ.get("CONTENT_LENGTH"):
        headers["content-length"] = environ["CONTENT_LENGTH"]

    url = wsgi_request_uri(environ, include_query=True)
    remote_user = environ.get("REMOTE_USER")
    if remote_user:
        scheme, sep, rest = url.partition("://")
        url = f"{scheme}{sep}{quote(remote_user, safe='')}@{rest}"

    raw_uri = environ.get("RAW_URI") or environ.get("REQUEST_URI")
    if not raw_uri:
        raw_uri = quote(environ.get("SCRIPT_NAME", "") + environ.get("PATH_INFO", ""))
        if environ.get("QUERY_STRING"):
            raw_uri += "?" + environ["QUERY_STRING"]

    remote_addr = environ.get("REMOTE_ADDR", "")
    if remote_addr and environ.get("REMOTE_PORT"):
        host = f"[{remote_addr}]" if ":" in remote_addr else remote_addr
        remote_addr = f"{host}:{environ['REMOTE_PORT']}"

    return HTTPRequest(
        method=environ.get("REQUEST_METHOD", "GET"),
        url=url,
        version=environ.get("SERVER_PROTOCOL", "HTTP/1.0"),
        headers=headers,
        body=_read_body(environ),
        remote_addr=remote_addr,
        request_uri=raw_uri,
    )


def _read_body(environ: Dict[str, Any]) -> bytes:
    try:
        length = int(environ.get("CONTENT_LENGTH") or 0)
    except ValueError:
        length = 0

    stream = environ.get("wsgi.input")
    if length <= 0 or stream is None:
        return b""
    return stream.read(length)


class WSGIAdapter:
    """Exposes a handler as a WSGI application."""

    def __init__(self, handler: Handler):
        if not callable(handler):
            raise TypeError(f"WSGIAdapter cannot wrap {handler!r}: not callable")
        self.handler = handler

    def __call__(self, environ: Dict[str, Any], start_response: StartResponse) -> Iterable[bytes]:
        request = request_from_environ(environ)
        recorder = ResponseRecorder()

        self.handler(recorder, request)

        response = recorder.result()
        status = f"{int(response.status)} {reason_phrase(response.status)}"
        headers = list(response.headers.items())
        if response.get_header("Content-Length") == "":
            headers.append(("Content-Length", str(len(response.body))))

        logger.debug(f"{request.method} {request.path} → {status}")
        start_response(status, headers)
        return [response.body]
