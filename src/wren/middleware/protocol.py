"""Middleware and hook protocols.

A middleware is any callable matching::

    async def my_mw(request: Request, next: Next) -> Response: ...

A hook is any callable matching::

    def my_hook(request: Request, response: Response | None) -> Response | None: ...

No base class required for either. Functions and callable objects are
both accepted; the router checks the shape, not the lineage.
"""

from collections.abc import Awaitable, Callable
from enum import StrEnum
from typing import Protocol, TypeAlias

from wren.http.request import Request
from wren.http.response import Response

# The rest of the chain: later middleware, then the route handler
Next: TypeAlias = Callable[[Request], Awaitable[Response]]


class Middleware(Protocol):
    """Per-route middleware.

    Middleware run in registration order around the handler. Code before
    ``await next(request)`` runs before the handler; code after it sees
    the handler's response and may replace it. Returning without calling
    ``next`` short-circuits the rest of the chain::

        # Function middleware
        async def timing(request: Request, next: Next) -> Response:
            start = time.monotonic()
            response = await next(request)
            elapsed = time.monotonic() - start
            return response.with_header("X-Time", f"{elapsed:.3f}")

        # Class middleware
        class RequireToken:
            async def __call__(self, request: Request, next: Next) -> Response:
                ...
    """

    async def __call__(self, request: Request, next: Next) -> Response: ...


class Hook(Protocol):
    """Router-wide lifecycle hook. Sync or async.

    ``response`` is ``None`` in the before-stages. After-stage hooks may
    return a ``Response`` to replace the outgoing one; returning ``None``
    keeps it. Return values from before-stage hooks are ignored.
    """

    def __call__(
        self, request: Request, response: Response | None
    ) -> Response | None | Awaitable[Response | None]: ...


class HookStage(StrEnum):
    """Points in ``Router.serve`` where hooks run."""

    # Every request, before any route is tried
    BEFORE_ROUTING = "before_routing"
    # Every request, on every exit path (success, redirect, not-found, error)
    AFTER_ROUTING = "after_routing"
    # A route matched (handler or redirect), before it runs
    BEFORE_DISPATCH = "before_dispatch"
    # A route handler returned; not run for redirects or not-found
    AFTER_DISPATCH = "after_dispatch"

    @property
    def is_after(self) -> bool:
        return self in (HookStage.AFTER_ROUTING, HookStage.AFTER_DISPATCH)
