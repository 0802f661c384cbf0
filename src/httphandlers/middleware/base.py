"""
=============================================================================
BASE MIDDLEWARE INTERFACE
=============================================================================

Defines the middleware protocol and the pipeline for chaining middleware
around a handler (Chain of Responsibility).

=============================================================================
REQUEST FLOW
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                     │
    │   Request ───────────────────────────────────────────►              │
    │                                                                     │
    │   ┌────────────┐    ┌────────────────┐    ┌──────────────┐          │
    │   │ AccessLog  │───►│ MethodHandler  │───►│ user handler │          │
    │   │ Middleware │    │                │    │              │          │
    │   └─────┬──────┘    └────────────────┘    └──────┬───────┘          │
    │         │                                        │                  │
    │   [before]                                   writes through         │
    │   timestamp,                                 the interposed         │
    │   interpose writer                           writer                 │
    │         │                                        │                  │
    │   [after]  ◄─────────── status, size ────────────┘                  │
    │   emit one log line                                                 │
    │                                                                     │
    └─────────────────────────────────────────────────────────────────────┘

A middleware may interpose its own ResponseWriter before calling next.
That is how the access logger sees the status and byte count without
the inner handler knowing about it.

=============================================================================
"""

from abc import ABC, abstractmethod
from typing import Callable, Iterator, List
import logging

from ..http.request import HTTPRequest
from ..http.writer import Handler, ResponseWriter


logger = logging.getLogger(__name__)


# NextHandler is the rest of the chain: the next middleware or the final
# handler. Each middleware receives it and calls it to continue.
NextHandler = Handler


class Middleware(ABC):
    """
    Abstract base class for middleware.

    =========================================================================
    MIDDLEWARE ANATOMY
    =========================================================================

        class MyMiddleware(Middleware):
            def __call__(self, writer, request, next):
                # PRE-PROCESSING
                # - inspect the request
                # - set response headers
                # - SHORT-CIRCUIT: write a response and return without
                #   calling next()

                next(writer, request)

                # POST-PROCESSING
                # - headers may already be sent here; only observe

    =========================================================================
    """

    @abstractmethod
    def __call__(self, writer: ResponseWriter, request: HTTPRequest, next: NextHandler) -> None:
        """
        Process the request.

        Args:
            writer: Response sink for this request
            request: The incoming HTTP request
            next: The rest of the chain (call this to continue)
        """

    @property
    def name(self) -> str:
        """Get the middleware name for logging."""
        return self.__class__.__name__

    def wrap(self, handler: Handler) -> Handler:
        """
        Wrap a single handler with this middleware.

            logged = AccessLogMiddleware(out=sys.stdout).wrap(users)
            logged(writer, request)
        """
        if not callable(handler):
            raise TypeError(f"{self.name} cannot wrap {handler!r}: not callable")

        def wrapped(writer: ResponseWriter, request: HTTPRequest) -> None:
            self(writer, request, handler)

        wrapped.__name__ = f"{self.name}({getattr(handler, '__name__', type(handler).__name__)})"
        return wrapped


class MiddlewarePipeline:
    """
    Chains multiple middleware together around a final handler.

    Middleware runs in the order added: the first added is the outermost
    layer and sees the request first and the finished response last.

        pipeline = MiddlewarePipeline()
        pipeline.add(AccessLogMiddleware(out=sys.stdout))   # outermost
        pipeline.add(request_id)    # a @function_middleware

        app = pipeline.wrap(MethodHandler(GET=show, PUT=update))
    """

    def __init__(self):
        self._middleware: List[Middleware] = []

    def add(self, middleware: Middleware) -> "MiddlewarePipeline":
        """
        Add middleware to the pipeline.

        Returns:
            Self for method chaining
        """
        self._middleware.append(middleware)
        logger.debug(f"Added middleware: {middleware.name}")
        return self

    def use(self, *middleware: Middleware) -> "MiddlewarePipeline":
        """Add several middleware at once, in order."""
        for mw in middleware:
            self.add(mw)
        return self

    def wrap(self, handler: Handler) -> Handler:
        """
        Wrap a handler with all middleware in the pipeline.

        Given [MW1, MW2, MW3] and handler, wrapping goes inside out:

            current = handler
            current = MW3.wrap(current)
            current = MW2.wrap(current)
            current = MW1.wrap(current)

        which leaves MW1 → MW2 → MW3 → handler.
        """
        current = handler
        for middleware in reversed(self._middleware):
            current = middleware.wrap(current)
        return current

    def __len__(self) -> int:
        return len(self._middleware)

    def __iter__(self) -> Iterator[Middleware]:
        return iter(self._middleware)


class FunctionMiddleware(Middleware):
    """
    Wraps a plain function as middleware.

        @function_middleware
        def request_id(writer, request, next):
            writer.set_header("X-Request-Id", new_id())
            next(writer, request)
    """

    def __init__(
        self,
        func: Callable[[ResponseWriter, HTTPRequest, NextHandler], None],
        name: str = "",
    ):
        self._func = func
        self._name = name or func.__name__

    def __call__(self, writer: ResponseWriter, request: HTTPRequest, next: NextHandler) -> None:
        self._func(writer, request, next)

    @property
    def name(self) -> str:
        return self._name


def function_middleware(
    func: Callable[[ResponseWriter, HTTPRequest, NextHandler], None]
) -> FunctionMiddleware:
    """Decorator turning a (writer, request, next) function into middleware."""
    return FunctionMiddleware(func)
