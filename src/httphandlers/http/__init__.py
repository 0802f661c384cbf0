"""
=============================================================================
HTTP PRIMITIVES
=============================================================================

The request, response and response-writer types shared by the handlers
and middleware in this package.

    ┌─────────────────────────────────────────────────────────────────────┐
    │ REQUEST (request.py)                                                │
    │   HTTPRequest: method, url, version, headers, remote_addr, ...      │
    │   strip_port(): "10.0.0.1:8080" → "10.0.0.1"                        │
    └─────────────────────────────────────────────────────────────────────┘

    ┌─────────────────────────────────────────────────────────────────────┐
    │ RESPONSE WRITERS (writer.py)                                        │
    │   ResponseWriter: the write-once sink handlers write to             │
    │   ResponseRecorder: in-memory writer                                │
    │   serve(handler, request) → HTTPResponse                            │
    └─────────────────────────────────────────────────────────────────────┘

    ┌─────────────────────────────────────────────────────────────────────┐
    │ RESPONSE (response.py)                                              │
    │   HTTPResponse: finished response, to_bytes() for the wire          │
    └─────────────────────────────────────────────────────────────────────┘

    ┌─────────────────────────────────────────────────────────────────────┐
    │ STATUS CODES (status_codes.py)                                      │
    │   HTTPStatus enum, reason_phrase()                                  │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
"""

from .request import HTTPRequest, strip_port
from .response import HTTPResponse, format_http_date
from .status_codes import HTTPStatus, reason_phrase
from .writer import (
    Handler,
    ResponseWriter,
    ResponseRecorder,
    canonical_header_key,
    serve,
)

__all__ = [
    # Request
    "HTTPRequest",
    "strip_port",

    # Response
    "HTTPResponse",
    "format_http_date",

    # Writers
    "Handler",
    "ResponseWriter",
    "ResponseRecorder",
    "canonical_header_key",
    "serve",

    # Status codes
    "HTTPStatus",
    "reason_phrase",
]
