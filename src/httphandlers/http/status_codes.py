"""
=============================================================================
HTTP STATUS CODES (RFC 9110)
=============================================================================

Status codes and reason phrases used by the response writers and the
access logger.

=============================================================================
STATUS CODE CATEGORIES
=============================================================================

    ┌────────┬───────────────────────────────────────────────────────────┐
    │  1xx   │ INFORMATIONAL: request received, continuing               │
    ├────────┼───────────────────────────────────────────────────────────┤
    │  2xx   │ SUCCESS: 200 is what a handler gets when it writes a body │
    │        │ without ever calling write_header()                       │
    ├────────┼───────────────────────────────────────────────────────────┤
    │  3xx   │ REDIRECTION                                               │
    ├────────┼───────────────────────────────────────────────────────────┤
    │  4xx   │ CLIENT ERROR: 405 is produced by MethodHandler when no    │
    │        │ handler is registered for the request method              │
    ├────────┼───────────────────────────────────────────────────────────┤
    │  5xx   │ SERVER ERROR                                              │
    └────────┴───────────────────────────────────────────────────────────┘

Handlers are free to send codes that are not members of the enum (e.g.
299 or 599). Everything that accepts a status therefore takes a plain
``int`` and uses ``reason_phrase()`` for the text.

=============================================================================
"""

from enum import IntEnum


class HTTPStatus(IntEnum):
    """
    HTTP status codes, each carrying its reason phrase.

    IntEnum members compare equal to their integer value:

        >>> HTTPStatus.METHOD_NOT_ALLOWED == 405
        True
        >>> HTTPStatus.METHOD_NOT_ALLOWED.phrase
        'Method Not Allowed'
    """

    def __new__(cls, code: int, phrase: str):
        member = int.__new__(cls, code)
        member._value_ = code
        member.phrase = phrase
        return member

    CONTINUE = 100, "Continue"
    SWITCHING_PROTOCOLS = 101, "Switching Protocols"

    OK = 200, "OK"
    CREATED = 201, "Created"
    ACCEPTED = 202, "Accepted"
    NO_CONTENT = 204, "No Content"
    PARTIAL_CONTENT = 206, "Partial Content"

    MOVED_PERMANENTLY = 301, "Moved Permanently"
    FOUND = 302, "Found"
    SEE_OTHER = 303, "See Other"
    NOT_MODIFIED = 304, "Not Modified"
    TEMPORARY_REDIRECT = 307, "Temporary Redirect"
    PERMANENT_REDIRECT = 308, "Permanent Redirect"

    BAD_REQUEST = 400, "Bad Request"
    UNAUTHORIZED = 401, "Unauthorized"
    FORBIDDEN = 403, "Forbidden"
    NOT_FOUND = 404, "Not Found"
    METHOD_NOT_ALLOWED = 405, "Method Not Allowed"    # MethodHandler fallback
    NOT_ACCEPTABLE = 406, "Not Acceptable"
    CONFLICT = 409, "Conflict"
    GONE = 410, "Gone"
    PAYLOAD_TOO_LARGE = 413, "Payload Too Large"
    UNSUPPORTED_MEDIA_TYPE = 415, "Unsupported Media Type"
    UNPROCESSABLE_ENTITY = 422, "Unprocessable Entity"
    TOO_MANY_REQUESTS = 429, "Too Many Requests"

    INTERNAL_SERVER_ERROR = 500, "Internal Server Error"
    NOT_IMPLEMENTED = 501, "Not Implemented"
    BAD_GATEWAY = 502, "Bad Gateway"
    SERVICE_UNAVAILABLE = 503, "Service Unavailable"
    GATEWAY_TIMEOUT = 504, "Gateway Timeout"


def reason_phrase(code: int) -> str:
    """
    Reason phrase for any integer status code.

    Codes outside the enum get "Unknown" instead of raising, since a
    handler may legitimately send a non-standard code.
    """
    try:
        return HTTPStatus(code).phrase
    except ValueError:
        return "Unknown"
