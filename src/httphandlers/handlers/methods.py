"""
=============================================================================
METHOD DISPATCH
=============================================================================

MethodHandler picks one of several handlers by HTTP method. It runs
after routing: the request has already been matched to a resource, and
the only question left is what that resource does for this method.

=============================================================================
DISPATCH RULES
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                     │
    │   request.method in map? ──yes──► call that handler, done           │
    │          │                        (an explicit "OPTIONS" entry      │
    │          no                        wins over the built-in reply)    │
    │          │                                                          │
    │          ▼                                                          │
    │   method == "OPTIONS"? ──yes──► 200, Allow: <methods>, no body      │
    │          │                                                          │
    │          no                                                         │
    │          │                                                          │
    │          ▼                                                          │
    │   405 Method Not Allowed, Allow: <methods>,                         │
    │   body "Method not allowed\\n"                                      │
    │                                                                     │
    └─────────────────────────────────────────────────────────────────────┘

The Allow header lists the registered methods sorted lexicographically,
joined by ", ". With no methods registered the header is left out.

Method names are case-sensitive, as they are on the wire: "get" and
"GET" are different methods.

=============================================================================
USAGE
=============================================================================

    # From a mapping
    users = MethodHandler({"GET": list_users, "POST": create_user})

    # Or with decorators
    users = MethodHandler()

    @users.get
    def list_users(writer, request):
        writer.write(b"[]")

    @users.handle("PURGE")
    def purge(writer, request):
        writer.write_header(204)

Registration is meant to happen while the application is being set up.
Serving only reads the map, so one MethodHandler can serve any number of
concurrent requests.

=============================================================================
"""

from typing import Callable, Dict, Iterator, List, Mapping, Optional
import logging

from ..http.request import HTTPRequest
from ..http.status_codes import HTTPStatus
from ..http.writer import Handler, ResponseWriter


logger = logging.getLogger(__name__)

METHOD_NOT_ALLOWED_BODY = b"Method not allowed\n"


class MethodHandler:
    """
    Dispatches a request to a handler chosen by its HTTP method.

    The registered methods can be inspected like a dict: ``"GET" in
    users``, ``users["GET"]``, ``len(users)`` and iteration all work.
    ``get`` is the GET-registration decorator, not ``dict.get``.
    """

    def __init__(self, handlers: Optional[Mapping[str, Handler]] = None, **by_method: Handler):
        """
        Args:
            handlers: Method name → handler
            **by_method: More handlers as keyword arguments, e.g. GET=h
        """
        self._handlers: Dict[str, Handler] = {}
        for method, handler in {**(handlers or {}), **by_method}.items():
            self.add(method, handler)

    # =========================================================================
    # DICT-LIKE ACCESS
    # =========================================================================

    def __getitem__(self, method: str) -> Handler:
        return self._handlers[method]

    def __contains__(self, method: object) -> bool:
        return method in self._handlers

    def __iter__(self) -> Iterator[str]:
        return iter(self._handlers)

    def __len__(self) -> int:
        return len(self._handlers)

    def __repr__(self) -> str:
        return f"MethodHandler({self.allowed_methods()!r})"

    # =========================================================================
    # REGISTRATION
    # =========================================================================

    def add(self, method: str, handler: Handler) -> None:
        """
        Register a handler for a method, replacing any previous one.

        Raises:
            TypeError: If handler is not callable
        """
        if not callable(handler):
            raise TypeError(f"Handler for {method} must be callable, got {handler!r}")
        self._handlers[method] = handler
        logger.debug(f"Registered {method} handler: {getattr(handler, '__name__', handler)!r}")

    def handle(self, method: str) -> Callable[[Handler], Handler]:
        """
        Decorator registering the decorated function for ``method``.

        Returns the function unchanged so decorators can be stacked:

            @users.handle("GET")
            @users.handle("HEAD")
            def show(writer, request):
                ...
        """
        def decorator(handler: Handler) -> Handler:
            self.add(method, handler)
            return handler
        return decorator

    def get(self, handler: Handler) -> Handler:
        """Register a GET handler."""
        return self.handle("GET")(handler)

    def head(self, handler: Handler) -> Handler:
        """Register a HEAD handler."""
        return self.handle("HEAD")(handler)

    def post(self, handler: Handler) -> Handler:
        """Register a POST handler."""
        return self.handle("POST")(handler)

    def put(self, handler: Handler) -> Handler:
        """Register a PUT handler."""
        return self.handle("PUT")(handler)

    def patch(self, handler: Handler) -> Handler:
        """Register a PATCH handler."""
        return self.handle("PATCH")(handler)

    def delete(self, handler: Handler) -> Handler:
        """Register a DELETE handler."""
        return self.handle("DELETE")(handler)

    def options(self, handler: Handler) -> Handler:
        """Register an OPTIONS handler, replacing the built-in reply."""
        return self.handle("OPTIONS")(handler)

    # =========================================================================
    # DISPATCH
    # =========================================================================

    def allowed_methods(self) -> List[str]:
        """Registered methods in Allow-header order (lexicographic)."""
        return sorted(self._handlers)

    def __call__(self, writer: ResponseWriter, request: HTTPRequest) -> None:
        handler = self._handlers.get(request.method)
        if handler is not None:
            # Exceptions from the handler are not ours to handle.
            handler(writer, request)
            return

        allowed = self.allowed_methods()
        if allowed:
            writer.set_header("Allow", ", ".join(allowed))

        if request.method == "OPTIONS":
            logger.debug(f"OPTIONS {request.path}: allow {allowed}")
            writer.write_header(HTTPStatus.OK)
            return

        logger.debug(f"{request.method} {request.path}: method not allowed, allow {allowed}")
        writer.set_header("Content-Type", "text/plain; charset=utf-8")
        writer.set_header("X-Content-Type-Options", "nosniff")
        writer.write_header(HTTPStatus.METHOD_NOT_ALLOWED)
        writer.write(METHOD_NOT_ALLOWED_BODY)
