"""Switchback — path-template routing with first-match dispatch.

Compiles route templates such as ``/posts/:id/:format?`` or
``/assets/*`` into anchored matchers, and dispatches each request
through a middleware chain, the first matching route for its method,
and finally a fallback handler.

Basic usage::

    from switchback import Router

    router = Router()

    @router.get("/posts/:id.:format?")
    def show_post(response, request):
        response.write(f"post {request.path_params['id']}")

Any ASGI server can host the router directly (``router`` is an ASGI app).
"""

__version__ = "0.1.0"
__all__ = [
    "ConfigurationError",
    "Handler",
    "Middleware",
    "PatternError",
    "PublicFiles",
    "Request",
    "ResponseWriter",
    "Route",
    "RouteMatch",
    "Router",
    "RouterConfig",
    "SwitchbackError",
    "compile_pattern",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import switchback`` fast while providing a clean top-level API.
    """
    if name == "Router":
        from switchback.routing.router import Router

        return Router

    if name == "RouterConfig":
        from switchback.config import RouterConfig

        return RouterConfig

    if name in ("Route", "RouteMatch"):
        from switchback.routing import route as _route

        return getattr(_route, name)

    if name == "compile_pattern":
        from switchback.routing.pattern import compile_pattern

        return compile_pattern

    if name == "Request":
        from switchback.http.request import Request

        return Request

    if name == "ResponseWriter":
        from switchback.http.response import ResponseWriter

        return ResponseWriter

    if name in ("Handler", "Middleware", "PublicFiles"):
        from switchback import middleware as _mw

        return getattr(_mw, name)

    if name in ("ConfigurationError", "PatternError", "SwitchbackError"):
        from switchback import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
