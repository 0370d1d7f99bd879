"""Router with first-match dispatch over compiled route templates.

Registration and dispatch may run concurrently. One lock guards the
route table, middleware list, fallback handler, and strict flag; it is
held only while state is copied or changed, never while a middleware,
matcher, or handler runs.
"""

import logging
import threading
from http import HTTPMethod
from typing import TYPE_CHECKING, Any, TypeAlias

from switchback.config import RouterConfig
from switchback.http.request import Request
from switchback.http.response import ResponseWriter
from switchback.middleware.protocol import Handler, Middleware
from switchback.routing.methods import SUPPORTED_METHODS, parse_method
from switchback.routing.route import Route, RouteMatch

if TYPE_CHECKING:
    from switchback._internal.asgi import Receive, Scope, Send

logger = logging.getLogger("switchback.routing")

_Entry: TypeAlias = tuple[Route, Handler]


def not_found_handler(body: str = "Not Found") -> Handler:
    """Build the default fallback: a plain-text 404."""

    def not_found(response: ResponseWriter, request: Request) -> None:
        response.set_status(404)
        response.set_header("Content-Type", "text/plain; charset=utf-8")
        response.write(body)

    return not_found


class Router:
    """Method-bucketed route table with a middleware chain and a fallback.

    Usage::

        router = Router()
        router.get("/posts/:id/:format?", show_post)

        @router.post("/posts")
        def create_post(response, request):
            ...

        router.dispatch(ResponseWriter(), Request.create("GET", "/posts/42"))

    Within a method, routes are tried in registration order and the
    first whose template matches wins, so overlapping templates resolve
    to whichever was added first.
    """

    __slots__ = ("_lock", "_middleware", "_not_found", "_strict", "_table", "config")

    def __init__(self, config: RouterConfig | None = None) -> None:
        self.config: RouterConfig = config or RouterConfig()
        self._lock = threading.Lock()
        self._table: dict[HTTPMethod, list[_Entry]] = {method: [] for method in SUPPORTED_METHODS}
        self._middleware: list[Middleware] = []
        self._not_found: Handler = not_found_handler(self.config.not_found_body)
        self._strict: bool = self.config.strict

        if self.config.static_dir is not None:
            from switchback.middleware.static import PublicFiles

            self._middleware.append(PublicFiles(self.config.static_dir))

    # ------------------------------------------------------------------
    # Settings
    # ------------------------------------------------------------------

    @property
    def strict(self) -> bool:
        """Whether newly added routes reject an unexpected trailing slash."""
        with self._lock:
            return self._strict

    @strict.setter
    def strict(self, value: bool) -> None:
        with self._lock:
            self._strict = value

    def restrict_matching(self) -> "Router":
        """Routes added from now on fail to match a trailing ``/``."""
        self.strict = True
        return self

    def unrestrict_matching(self) -> "Router":
        """Routes added from now on tolerate one trailing ``/`` (the default)."""
        self.strict = False
        return self

    def set_not_found(self, handler: Handler) -> Handler:
        """Replace the handler used when nothing else serves a request."""
        with self._lock:
            self._not_found = handler
        return handler

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def add(self, method: str | HTTPMethod, path: str, handler: Handler) -> Route | None:
        """Register *handler* for *path* under *method*.

        Unrecognized methods are ignored and ``None`` is returned.
        Raises ``PatternError`` if *path* does not compile; nothing is
        registered in that case.
        """
        resolved = parse_method(method)
        if resolved is None:
            logger.debug("Ignoring route %r for unsupported method %r", path, method)
            return None
        return self._insert((resolved,), path, handler)

    def _insert(self, methods: tuple[HTTPMethod, ...], path: str, handler: Handler) -> Route:
        strict = self.strict
        # One independently compiled Route per method
        compiled = [(method, Route.compile(path, strict)) for method in methods]
        with self._lock:
            for method, route in compiled:
                self._table[method].append((route, handler))
        for method, _ in compiled:
            logger.debug("Registered %s %s (strict=%s)", method, path, strict)
        return compiled[-1][1]

    def _register(
        self, methods: tuple[HTTPMethod, ...], path: str, handler: Handler | None
    ) -> Any:
        if handler is not None:
            self._insert(methods, path, handler)
            return handler

        def decorator(func: Handler) -> Handler:
            self._insert(methods, path, func)
            return func

        return decorator

    def get(self, path: str, handler: Handler | None = None) -> Any:
        """Register a GET route. Without *handler*, returns a decorator."""
        return self._register((HTTPMethod.GET,), path, handler)

    def put(self, path: str, handler: Handler | None = None) -> Any:
        """Register a PUT route. Without *handler*, returns a decorator."""
        return self._register((HTTPMethod.PUT,), path, handler)

    def post(self, path: str, handler: Handler | None = None) -> Any:
        """Register a POST route. Without *handler*, returns a decorator."""
        return self._register((HTTPMethod.POST,), path, handler)

    def delete(self, path: str, handler: Handler | None = None) -> Any:
        """Register a DELETE route. Without *handler*, returns a decorator."""
        return self._register((HTTPMethod.DELETE,), path, handler)

    def options(self, path: str, handler: Handler | None = None) -> Any:
        return self._register((HTTPMethod.OPTIONS,), path, handler)

    def head(self, path: str, handler: Handler | None = None) -> Any:
        return self._register((HTTPMethod.HEAD,), path, handler)

    def trace(self, path: str, handler: Handler | None = None) -> Any:
        return self._register((HTTPMethod.TRACE,), path, handler)

    def connect(self, path: str, handler: Handler | None = None) -> Any:
        return self._register((HTTPMethod.CONNECT,), path, handler)

    def patch(self, path: str, handler: Handler | None = None) -> Any:
        return self._register((HTTPMethod.PATCH,), path, handler)

    def match_all(self, path: str, handler: Handler | None = None) -> Any:
        """Register *path* under every supported method."""
        return self._register(SUPPORTED_METHODS, path, handler)

    def add_middleware(self, middleware: Middleware) -> Middleware:
        """Append *middleware* to the chain. Usable as a decorator.

        Middleware run in registration order before any route is tried.
        Adding the same callable twice runs it twice.
        """
        with self._lock:
            self._middleware.append(middleware)
        return middleware

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def routes(self, method: str | HTTPMethod | None = None) -> list[Route]:
        """Registered routes in registration order.

        With *method*, only that bucket; otherwise every bucket in
        ``SUPPORTED_METHODS`` order.
        """
        with self._lock:
            if method is None:
                return [route for bucket in self._table.values() for route, _ in bucket]
            resolved = parse_method(method)
            if resolved is None:
                return []
            return [route for route, _ in self._table[resolved]]

    def find(self, method: str | HTTPMethod, path: str) -> RouteMatch | None:
        """Return the first route under *method* whose template matches *path*."""
        resolved = parse_method(method)
        if resolved is None:
            return None

        with self._lock:
            bucket = tuple(self._table[resolved])

        for route, handler in bucket:
            params = route.match(path)
            if params is not None:
                return RouteMatch(route=route, handler=handler, path_params=params)
        return None

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def dispatch(self, response: ResponseWriter, request: Request) -> None:
        """Serve one request: middleware, then the matching route, then the fallback.

        A middleware returning ``True`` ends dispatch. Exceptions raised
        by middleware or handlers propagate to the caller.
        """
        with self._lock:
            middleware = tuple(self._middleware)
            not_found = self._not_found

        for mw in middleware:
            if mw(response, request):
                return

        match = self.find(request.method, request.path)
        if match is not None:
            match.handler(response, request.with_path_params(match.path_params))
            return

        logger.debug("No route for %s %s", request.method, request.path)
        not_found(response, request)

    # ------------------------------------------------------------------
    # ASGI
    # ------------------------------------------------------------------

    async def __call__(self, scope: "Scope", receive: "Receive", send: "Send") -> None:
        """ASGI entry point. See ``switchback.server.handler``."""
        from switchback.server.handler import handle_lifespan, handle_request

        if scope["type"] == "lifespan":
            await handle_lifespan(receive, send)
            return
        await handle_request(scope, receive, send, router=self, debug=self.config.debug)

