"""Handler and Middleware protocols.

Two capability shapes, both called with the same pair::

    def handler(response: ResponseWriter, request: Request) -> None: ...
    def middleware(response: ResponseWriter, request: Request) -> bool: ...

A handler only produces side effects on the response. A middleware
additionally reports whether it fully handled the request: ``True``
stops dispatch, ``False`` lets the next middleware (and eventually the
routes) run.

No base class required. The router checks the shape, not the lineage.
"""

from typing import Protocol

from switchback.http.request import Request
from switchback.http.response import ResponseWriter


class Handler(Protocol):
    """Protocol for route and fallback handlers.

    Accepts both functions and callable objects::

        def show_post(response: ResponseWriter, request: Request) -> None:
            response.write(f"post {request.path_params['id']}")
    """

    def __call__(self, response: ResponseWriter, request: Request) -> None: ...


class Middleware(Protocol):
    """Protocol for switchback middleware.

    Accepts both functions and callable objects::

        # Function middleware
        def maintenance(response: ResponseWriter, request: Request) -> bool:
            if not MAINTENANCE:
                return False
            response.set_status(503)
            response.write("Back soon")
            return True

        # Class middleware
        class Blocklist:
            def __call__(self, response: ResponseWriter, request: Request) -> bool:
                ...
    """

    def __call__(self, response: ResponseWriter, request: Request) -> bool: ...
