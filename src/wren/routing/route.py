"""Route and MatchResult.

A Route is configured during setup through chainable setters, compiles
its pattern exactly once, and is frozen from its first match onward.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from wren._internal.types import Handler
from wren.http.request import Request
from wren.http.response import Response, redirect_response
from wren.middleware.protocol import Middleware, Next
from wren.routing.pattern import CompiledPattern, build_url, compile_pattern, normalize_pattern
from wren.server.invocation import call_handler

DEFAULT_METHOD = "GET"


class CompileState(Enum):
    """Pattern lifecycle of a Route. Moves PENDING -> COMPILED once."""

    PENDING = "pending"
    COMPILED = "compiled"


@dataclass(frozen=True, slots=True)
class RedirectHandler:
    """Pseudo-handler produced by a trailing-slash mismatch."""

    location: str
    status: int = 301

    def __call__(self, request: Request) -> Response:
        return redirect_response(self.location, self.status)


@dataclass(frozen=True, slots=True)
class MatchResult:
    """Outcome of matching one request against one route.

    Truthy only when the route matched. A redirect result carries a
    ``RedirectHandler`` and no params.
    """

    matched: bool
    route: Route | None = None
    handler: Handler | None = None
    params: Mapping[str, str] = field(default_factory=dict)

    @property
    def is_redirect(self) -> bool:
        return isinstance(self.handler, RedirectHandler)

    @property
    def redirect_to(self) -> str | None:
        if isinstance(self.handler, RedirectHandler):
            return self.handler.location
        return None

    def __bool__(self) -> bool:
        return self.matched


NO_MATCH = MatchResult(matched=False)


class Route:
    """One registered endpoint: pattern, handler, methods, middleware.

    Usage::

        route = Route("/users/<int:id>/", show_user).allow("get", "post").named("user")
        result = route.match("/users/42/", "GET")
        result.params  # {'id': '42'}

    A route with no methods configured answers ``GET`` only.
    """

    __slots__ = (
        "_compiled",
        "_frozen",
        "_handler",
        "_methods",
        "_middleware",
        "_name",
        "_on_rename",
        "_pattern",
        "_state",
        "_strict_slash",
    )

    def __init__(
        self,
        pattern: str,
        handler: Handler,
        *,
        methods: Iterable[str] = (),
        name: str | None = None,
        strict_slash: bool = False,
        middleware: Iterable[Middleware] = (),
        on_rename: Callable[[], None] | None = None,
    ) -> None:
        self._pattern = normalize_pattern(pattern)
        self._handler = handler
        self._methods: frozenset[str] = frozenset(m.upper() for m in methods)
        self._name = name
        self._strict_slash = strict_slash
        self._middleware: tuple[Middleware, ...] = tuple(middleware)
        self._state = CompileState.PENDING
        self._compiled: CompiledPattern | None = None
        self._frozen = False
        # Supplied by the owning Router so renames invalidate its name index
        self._on_rename = on_rename

    def __repr__(self) -> str:
        methods = ",".join(sorted(self._methods)) or DEFAULT_METHOD
        return f"Route({self._pattern!r}, methods={methods}, name={self._name!r})"

    # -- Read-only attributes --

    @property
    def pattern(self) -> str:
        return self._pattern

    @property
    def handler(self) -> Handler:
        return self._handler

    @property
    def name(self) -> str | None:
        return self._name

    @property
    def methods(self) -> frozenset[str]:
        """Configured methods. Empty means ``GET`` only."""
        return self._methods

    @property
    def strict_slash(self) -> bool:
        return self._strict_slash

    @property
    def middleware(self) -> tuple[Middleware, ...]:
        return self._middleware

    @property
    def state(self) -> CompileState:
        return self._state

    @property
    def frozen(self) -> bool:
        return self._frozen

    # -- Chainable configuration --

    def allow(self, *methods: str) -> Route:
        """Add allowed HTTP methods (case-insensitive)."""
        self._check_not_frozen()
        self._methods = self._methods | {m.upper() for m in methods}
        return self

    def named(self, name: str) -> Route:
        """Set the symbolic name used by ``Router.url_for``."""
        self._check_not_frozen()
        self._name = name
        if self._on_rename is not None:
            self._on_rename()
        return self

    def strict(self, strict_slash: bool = True) -> Route:
        """Redirect (301) when the request's trailing slash disagrees with the pattern."""
        self._check_not_frozen()
        self._strict_slash = strict_slash
        return self

    def use(self, *middleware: Middleware) -> Route:
        """Append middleware, run in order around the handler."""
        self._check_not_frozen()
        self._middleware = (*self._middleware, *middleware)
        return self

    def _check_not_frozen(self) -> None:
        if self._frozen:
            msg = (
                f"Cannot modify route {self._pattern!r} after it has started matching. "
                "Configure routes before serving requests."
            )
            raise RuntimeError(msg)

    # -- Compilation --

    def compile(self) -> CompiledPattern:
        """Compile the pattern on first call; return the cached result after.

        Raises ``InvalidPatternError`` if the pattern is malformed, in
        which case the route stays PENDING.
        """
        if self._state is CompileState.COMPILED:
            assert self._compiled is not None
            return self._compiled
        self._compiled = compile_pattern(self._pattern)
        self._state = CompileState.COMPILED
        return self._compiled

    # -- Matching --

    def supports_method(self, method: str) -> bool:
        """Whether *method* (any case) is allowed on this route."""
        method = method.upper()
        if not self._methods:
            return method == DEFAULT_METHOD
        return method in self._methods

    def match(self, path: str, method: str) -> MatchResult:
        """Match *path* and *method* against this route.

        Returns ``NO_MATCH`` on a method or path mismatch. With
        strict-slash enabled, a trailing-slash disagreement yields a
        redirect result pointing at the corrected path.
        """
        compiled = self.compile()
        self._frozen = True

        if not self.supports_method(method):
            return NO_MATCH

        params = compiled.match(path)
        if params is None:
            return NO_MATCH

        if self._strict_slash:
            wants_slash = compiled.trailing_slash
            has_slash = path.endswith("/")
            if wants_slash != has_slash:
                location = path + "/" if wants_slash else path[:-1]
                return MatchResult(matched=True, route=self, handler=RedirectHandler(location))

        return MatchResult(matched=True, route=self, handler=self._handler, params=params)

    # -- Dispatch --

    async def dispatch(self, request: Request) -> Response:
        """Run the middleware chain around the handler for *request*."""
        param_types = self.compile().param_types

        async def endpoint(req: Request) -> Response:
            return await call_handler(self._handler, req, param_types)

        handler: Next = endpoint
        for mw in reversed(self._middleware):
            outer = handler

            async def make_next(req: Request, _mw: Any = mw, _next: Next = outer) -> Response:
                return await _mw(req, _next)

            handler = make_next

        return await handler(request)

    def url(self, params: Mapping[str, Any] | None = None) -> str:
        """Build a URL from this route's pattern and *params*."""
        return build_url(self._pattern, params or {})
