"""Before/after middleware — the stateful object variant.

Subclass and override either half::

    class FilterUser(BeforeAfterMiddleware):
        def after_request(self, request, response):
            if request.query.get("user_id") == "10000":
                return Response("", status=401)
            return response

The instance is a regular ``Middleware``, so it can be passed anywhere
a function middleware is accepted.
"""

from wren._internal.invoke import invoke
from wren.http.request import Request
from wren.http.response import Response
from wren.middleware.protocol import Next


class BeforeAfterMiddleware:
    """Base middleware with separate before and after callbacks.

    ``before_request`` may return a ``Response`` to skip the rest of the
    chain (the handler included); ``after_request`` is then still called
    with that response. Both callbacks may be sync or async.
    """

    def before_request(self, request: Request) -> Response | None:
        """Called before the handler. Return a Response to short-circuit."""
        return None

    def after_request(self, request: Request, response: Response) -> Response:
        """Called with the handler's response. Return the response to send."""
        return response

    async def __call__(self, request: Request, next: Next) -> Response:
        early = await invoke(self.before_request, request)
        response = early if early is not None else await next(request)
        return await invoke(self.after_request, request, response)
