"""
=============================================================================
HTTPHANDLERS - Composable HTTP Handler Decorators
=============================================================================

Two small decorators around the "handle one HTTP request" capability:

    MethodHandler
        Routes an already-matched request to one of several handlers by
        HTTP method, answering OPTIONS and 405 Method Not Allowed itself.

    LoggingHandler / CombinedLoggingHandler / AccessLogMiddleware
        Writes one Apache-style access-log line per request, with the
        status code and body size observed on the way out.

=============================================================================
QUICK START
=============================================================================

    import sys
    from httphandlers import MethodHandler, LoggingHandler, serve, HTTPRequest

    def show(writer, request):
        writer.set_header("Content-Type", "text/plain; charset=utf-8")
        writer.write(b"ok\\n")

    app = LoggingHandler(sys.stdout, MethodHandler(GET=show))

    serve(app, HTTPRequest("DELETE", "/items/1", remote_addr="10.0.0.1:5123"))
    # 10.0.0.1 - - [17/Oct/2026:12:00:00 +0200] "DELETE  HTTP/1.1" 405 19

Behind a real server, wrap the handler with WSGIAdapter.

=============================================================================
PACKAGE STRUCTURE
=============================================================================

    httphandlers/
    ├── __init__.py          # This file - package exports
    ├── config.py            # AccessLogConfig, setup_logging()
    ├── errors.py            # Exception hierarchy
    ├── wsgi.py              # WSGIAdapter
    ├── http/
    │   ├── request.py       # HTTPRequest
    │   ├── response.py      # HTTPResponse
    │   ├── status_codes.py  # HTTPStatus
    │   └── writer.py        # ResponseWriter, ResponseRecorder, serve()
    ├── handlers/
    │   └── methods.py       # MethodHandler
    └── middleware/
        ├── base.py          # Middleware, MiddlewarePipeline
        └── logging.py       # AccessLogMiddleware, LoggingHandler, ...

=============================================================================
"""

__version__ = "1.0.0"

from .config import AccessLogConfig, setup_logging
from .errors import HandlersError, HeadersSentError, ConfigError
from .handlers import MethodHandler
from .http import (
    Handler,
    HTTPRequest,
    HTTPResponse,
    HTTPStatus,
    ResponseRecorder,
    ResponseWriter,
    serve,
)
from .middleware import (
    AccessLogMiddleware,
    CombinedLoggingHandler,
    LoggingHandler,
    MiddlewarePipeline,
    write_log,
    write_combined_log,
)
from .wsgi import WSGIAdapter

__all__ = [
    "__version__",

    # Handlers and decorators
    "MethodHandler",
    "LoggingHandler",
    "CombinedLoggingHandler",
    "AccessLogMiddleware",
    "MiddlewarePipeline",
    "write_log",
    "write_combined_log",

    # HTTP primitives
    "Handler",
    "HTTPRequest",
    "HTTPResponse",
    "HTTPStatus",
    "ResponseRecorder",
    "ResponseWriter",
    "serve",
    "WSGIAdapter",

    # Configuration
    "AccessLogConfig",
    "setup_logging",

    # Errors
    "HandlersError",
    "HeadersSentError",
    "ConfigError",
]
