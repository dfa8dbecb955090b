"""Router — ordered route registry and request dispatcher.

Routes are tried in registration order and the first match wins. There
is no specificity ranking: register specific routes before general ones.

Registration is single-threaded setup. Once serving starts the registry
is only read, so concurrent ``serve`` calls need no locking.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from typing import Any

from wren._internal.asgi import Receive, Scope, Send
from wren._internal.invoke import invoke
from wren._internal.types import FallbackHandler, Handler
from wren.config import RouterConfig
from wren.errors import ConfigurationError
from wren.http.request import Request
from wren.http.response import Response, not_found_response
from wren.middleware.protocol import Hook, HookStage, Middleware
from wren.routing.route import NO_MATCH, MatchResult, Route
from wren.server.negotiation import negotiate

logger = logging.getLogger("wren.routing")


def default_not_found(request: Request) -> Response:
    """Plain-text 404 used when no not-found handler is configured."""
    return not_found_response()


class Router:
    """Ordered route registry with hooks, middleware, and reverse lookup.

    Usage::

        router = Router()
        router.handle("/users/<int:id>/", show_user).named("user").strict()

        @router.route("/posts/<slug>", methods=["GET", "POST"])
        async def post(request, slug): ...

        response = await router.serve(request)
        url, found = router.url_for("user", {"id": 7})   # ("/users/7/", True)

    A Router is also an ASGI application.
    """

    __slots__ = (
        "_hooks",
        "_middleware",
        "_named_routes",
        "_routes",
        "config",
        "not_found_handler",
    )

    def __init__(self, config: RouterConfig | None = None) -> None:
        self.config: RouterConfig = config or RouterConfig()
        self._routes: list[Route] = []
        self._middleware: list[Middleware] = []
        self._hooks: dict[HookStage, list[Hook]] = {stage: [] for stage in HookStage}
        # Built lazily by url_for(); reset whenever a route is added or renamed
        self._named_routes: dict[str, Route] | None = None
        self.not_found_handler: FallbackHandler = default_not_found

    # -- Registration --

    def handle(
        self,
        pattern: str,
        handler: Handler,
        *,
        methods: Iterable[str] | None = None,
        name: str | None = None,
        strict_slash: bool | None = None,
        middleware: Iterable[Middleware] = (),
    ) -> Route:
        """Register *handler* for *pattern* and return the Route for chaining.

        The configured prefix is prepended to *pattern*. Router-level
        middleware runs ahead of the route's own. ``strict_slash=None``
        takes the router default.

        Raises ``InvalidPatternError`` if the pattern does not compile;
        the route is not registered in that case.
        """
        route = Route(
            self.config.prefix + _leading_slash(pattern),
            handler,
            methods=methods or (),
            name=name,
            strict_slash=self.config.strict_slash if strict_slash is None else strict_slash,
            middleware=(*self._middleware, *middleware),
            on_rename=self._invalidate_names,
        )
        route.compile()
        self._routes.append(route)
        self._invalidate_names()
        logger.debug("Registered %r", route)
        return route

    def route(
        self,
        pattern: str,
        *,
        methods: Iterable[str] | None = None,
        name: str | None = None,
        strict_slash: bool | None = None,
        middleware: Iterable[Middleware] = (),
    ) -> Callable[[Handler], Handler]:
        """Register a route handler via decorator.

        Args:
            pattern: URL pattern. Use ``<name>`` or ``<type:name>`` for parameters.
            methods: HTTP methods. Defaults to ``GET`` only.
            name: Optional route name for ``url_for``.
            strict_slash: Redirect on trailing-slash mismatch. ``None`` uses
                the router default.
            middleware: Middleware for this route only.
        """

        def decorator(func: Handler) -> Handler:
            self.handle(
                pattern,
                func,
                methods=methods,
                name=name,
                strict_slash=strict_slash,
                middleware=middleware,
            )
            return func

        return decorator

    def add_middleware(self, *middleware: Middleware) -> Router:
        """Attach middleware to every route registered after this call."""
        self._middleware.extend(middleware)
        return self

    def add_hook(self, stage: HookStage | str, hook: Hook) -> Router:
        """Register *hook* for *stage*. Hooks of a stage run in registration order."""
        self._hooks[_resolve_stage(stage)].append(hook)
        return self

    def hook(self, stage: HookStage | str) -> Callable[[Hook], Hook]:
        """Register a lifecycle hook via decorator."""
        resolved = _resolve_stage(stage)

        def decorator(func: Hook) -> Hook:
            self._hooks[resolved].append(func)
            return func

        return decorator

    def not_found(self, handler: FallbackHandler) -> FallbackHandler:
        """Set the not-found handler via decorator."""
        self.not_found_handler = handler
        return handler

    @property
    def routes(self) -> list[Route]:
        """Registered routes in match order."""
        return list(self._routes)

    # -- Matching --

    def match(self, method: str, path: str) -> MatchResult:
        """Return the first route match for *method* and *path*, or ``NO_MATCH``."""
        for route in self._routes:
            result = route.match(path, method)
            if result:
                return result
        return NO_MATCH

    # -- Dispatch --

    async def serve(self, request: Request) -> Response:
        """Dispatch *request* and return the response.

        Order: before-routing hooks, route lookup, then one of

        - redirect: before-dispatch hooks, 301 (no middleware, no after-dispatch)
        - handler: before-dispatch hooks, middleware + handler, after-dispatch hooks
        - no match: the not-found handler

        After-routing hooks run on every exit path, including exceptions
        from handlers, which propagate unchanged.
        """
        current = request
        response: Response | None = None
        try:
            await self._run_hooks(HookStage.BEFORE_ROUTING, current, None)
            result = self.match(current.method, current.path)

            if not result:
                logger.debug("No route for %s %s", current.method, current.path)
                response = negotiate(await invoke(self.not_found_handler, current))
            elif result.is_redirect:
                logger.debug(
                    "Redirecting %s %s -> %s", current.method, current.path, result.redirect_to
                )
                await self._run_hooks(HookStage.BEFORE_DISPATCH, current, None)
                response = await invoke(result.handler, current)
            else:
                assert result.route is not None
                current = current.with_path_params(result.params)
                await self._run_hooks(HookStage.BEFORE_DISPATCH, current, None)
                response = await result.route.dispatch(current)
                response = await self._run_hooks(HookStage.AFTER_DISPATCH, current, response)
        finally:
            response = await self._run_hooks(HookStage.AFTER_ROUTING, current, response)

        assert response is not None
        return response

    async def _run_hooks(
        self,
        stage: HookStage,
        request: Request,
        response: Response | None,
    ) -> Response | None:
        for hook in self._hooks[stage]:
            result = await invoke(hook, request, response)
            if stage.is_after and isinstance(result, Response):
                response = result
        return response

    # -- Reverse lookup --

    def url_for(self, name: str, params: Mapping[str, Any] | None = None) -> tuple[str, bool]:
        """Build a URL for the route named *name*.

        Returns ``(url, True)`` when the name is registered, ``("", False)``
        otherwise. Placeholders with no matching key in *params* are left
        in place; values are inserted with ``str()`` and not validated.
        """
        route = self._name_index().get(name)
        if route is None:
            return "", False
        return route.url(params), True

    def _name_index(self) -> dict[str, Route]:
        if self._named_routes is None:
            index: dict[str, Route] = {}
            for route in self._routes:
                if route.name:
                    index[route.name] = route
            self._named_routes = index
        return self._named_routes

    def _invalidate_names(self) -> None:
        self._named_routes = None

    # -- ASGI --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI entry point."""
        from wren.server.handler import handle_request

        await handle_request(scope, receive, send, router=self, debug=self.config.debug)


def _leading_slash(pattern: str) -> str:
    if pattern.startswith("/"):
        return pattern
    return "/" + pattern


def _resolve_stage(stage: HookStage | str) -> HookStage:
    try:
        return HookStage(stage)
    except ValueError:
        valid = ", ".join(s.value for s in HookStage)
        msg = f"Unknown hook stage {stage!r}. Expected one of: {valid}"
        raise ConfigurationError(msg) from None
