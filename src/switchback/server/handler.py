"""ASGI handler — translates ASGI scope/messages to switchback types.

The only component that touches raw ASGI directly. Reads the request
body, builds a ``Request``, runs the synchronous ``Router.dispatch`` in
a worker thread so many requests dispatch concurrently, and sends the
``ResponseWriter`` back through ASGI ``send()``.
"""

import logging
import traceback
from typing import TYPE_CHECKING

import anyio.to_thread

from switchback._internal.asgi import Receive, Scope, Send
from switchback.http.request import Request
from switchback.http.response import ResponseWriter
from switchback.server.sender import send_response

if TYPE_CHECKING:
    from switchback.routing.router import Router

logger = logging.getLogger("switchback.server")


async def read_body(receive: Receive) -> bytes:
    """Drain ``http.request`` messages into one bytes object."""
    chunks: list[bytes] = []
    while True:
        message = await receive()
        if message["type"] == "http.disconnect":
            break
        chunks.append(message.get("body", b""))
        if not message.get("more_body", False):
            break
    return b"".join(chunks)


def internal_error(exc: BaseException, *, debug: bool) -> ResponseWriter:
    """Build the 500 response sent when dispatch raises."""
    response = ResponseWriter()
    response.set_status(500)
    response.set_header("Content-Type", "text/plain; charset=utf-8")
    response.write("Internal Server Error")
    if debug:
        response.write("\n\n")
        response.write("".join(traceback.format_exception(exc)))
    return response


async def handle_request(
    scope: Scope,
    receive: Receive,
    send: Send,
    *,
    router: "Router",
    debug: bool = False,
) -> None:
    """Process a single HTTP request through the router."""
    if scope["type"] != "http":
        return

    body = await read_body(receive)
    request = Request.from_asgi(scope, body)
    response = ResponseWriter()

    try:
        await anyio.to_thread.run_sync(router.dispatch, response, request)
    except Exception as exc:
        logger.exception("Unhandled error serving %s %s", request.method, request.path)
        response = internal_error(exc, debug=debug)

    await send_response(response, send)


async def handle_lifespan(receive: Receive, send: Send) -> None:
    """Acknowledge ASGI lifespan startup and shutdown.

    A Router holds no resources, so both phases complete immediately.
    """
    while True:
        message = await receive()
        if message["type"] == "lifespan.startup":
            await send({"type": "lifespan.startup.complete"})
        elif message["type"] == "lifespan.shutdown":
            await send({"type": "lifespan.shutdown.complete"})
            return
