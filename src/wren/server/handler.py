"""ASGI handler — translates ASGI scope/messages to wren types.

The only component that touches raw ASGI directly. Converts the scope
to a typed Request, dispatches through the router, and sends the
Response back through ASGI send().
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from wren._internal.asgi import Receive, Scope, Send
from wren.errors import HTTPError
from wren.http.request import Request
from wren.http.response import Response
from wren.server.errors import http_error_response, internal_error_response
from wren.server.sender import send_response

if TYPE_CHECKING:
    from wren.routing.router import Router


async def handle_request(
    scope: Scope,
    receive: Receive,
    send: Send,
    *,
    router: Router,
    debug: bool = False,
) -> None:
    """Process a single HTTP request through the router."""
    if scope["type"] != "http":
        return

    request = Request.from_asgi(scope, receive)

    response: Response
    try:
        response = await router.serve(request)
    except HTTPError as exc:
        response = http_error_response(exc)
    except Exception as exc:
        response = internal_error_response(exc, request, debug=debug)

    await send_response(response, send, head=request.method == "HEAD")
