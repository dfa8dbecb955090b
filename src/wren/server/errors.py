"""Error responses for the ASGI adapter.

The router lets handler exceptions propagate. This is the boundary that
turns them into responses: ``HTTPError`` maps to its status, anything
else is logged and answered with a 500.
"""

import logging
import traceback

from wren.errors import HTTPError
from wren.http.request import Request
from wren.http.response import Response

logger = logging.getLogger("wren.server")


def http_error_response(exc: HTTPError) -> Response:
    """Build the response for an ``HTTPError`` raised by a handler."""
    response = Response(
        body=exc.detail or str(exc.status),
        status=exc.status,
        content_type="text/plain; charset=utf-8",
    )
    if exc.headers:
        response = response.with_headers(dict(exc.headers))
    return response


def internal_error_response(exc: Exception, request: Request, *, debug: bool) -> Response:
    """Log *exc* and build a 500 response.

    In debug mode the body carries the traceback.
    """
    logger.error(
        "Unhandled %s while serving %s %s",
        type(exc).__name__,
        request.method,
        request.path,
        exc_info=exc,
    )
    if debug:
        body = "".join(traceback.format_exception(exc))
    else:
        body = "Internal Server Error"
    return Response(body=body, status=500, content_type="text/plain; charset=utf-8")
