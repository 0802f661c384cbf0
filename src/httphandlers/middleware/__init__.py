"""
=============================================================================
MIDDLEWARE
=============================================================================

Middleware wraps a handler with behavior that applies to every request:

    ┌─────────────────────────────────────────────────────────────────────┐
    │   Incoming Request                                                  │
    │        │                                                            │
    │        ▼                                                            │
    │   ┌──────────────────────┐                                          │
    │   │ AccessLogMiddleware  │ ──► one log line per request             │
    │   └──────────┬───────────┘                                          │
    │              ▼                                                      │
    │   ┌──────────────────────┐                                          │
    │   │ MethodHandler        │ ──► GET/POST/... or OPTIONS/405          │
    │   └──────────┬───────────┘                                          │
    │              ▼                                                      │
    │   ┌──────────────────────┐                                          │
    │   │ Your Handler         │ ──► writes the response                  │
    │   └──────────────────────┘                                          │
    └─────────────────────────────────────────────────────────────────────┘

AVAILABLE MIDDLEWARE

AccessLogMiddleware:
    Common, combined or JSON access lines to a stream or a logger.

LoggingHandler / CombinedLoggingHandler:
    The same, as one-call handler decorators.

=============================================================================
"""

from .base import (
    Middleware,
    MiddlewarePipeline,
    FunctionMiddleware,
    function_middleware,
    NextHandler,
)
from .logging import (
    AccessLogMiddleware,
    AccessLogRecord,
    LoggingHandler,
    CombinedLoggingHandler,
    SynchronizedStream,
    format_log_timestamp,
    synchronized,
    write_log,
    write_combined_log,
)

__all__ = [
    # Base classes
    "Middleware",
    "MiddlewarePipeline",
    "FunctionMiddleware",
    "function_middleware",
    "NextHandler",

    # Access logging
    "AccessLogMiddleware",
    "AccessLogRecord",
    "LoggingHandler",
    "CombinedLoggingHandler",
    "SynchronizedStream",
    "format_log_timestamp",
    "synchronized",
    "write_log",
    "write_combined_log",
]
