"""Middleware and hooks — Protocol-based, no inheritance required.

A middleware is any callable matching:
    async def mw(request: Request, next: Next) -> Response

A hook is any callable matching:
    def hook(request: Request, response: Response | None) -> Response | None

Helpers:
    BeforeAfterMiddleware -- object middleware with before/after callbacks
"""

from wren.middleware.before_after import BeforeAfterMiddleware
from wren.middleware.protocol import Hook, HookStage, Middleware, Next

__all__ = [
    "BeforeAfterMiddleware",
    "Hook",
    "HookStage",
    "Middleware",
    "Next",
]
