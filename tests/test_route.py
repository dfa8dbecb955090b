"""Tests for wren.routing.route — Route, MatchResult, compile lifecycle."""

import pytest

from wren.errors import InvalidPatternError
from wren.http.response import Response
from wren.routing.route import (
    NO_MATCH,
    CompileState,
    MatchResult,
    RedirectHandler,
    Route,
)
from wren.testing import make_request


def _handler() -> str:
    return "ok"


class TestRouteConfiguration:
    def test_creation(self) -> None:
        route = Route("/users", _handler)
        assert route.pattern == "/users"
        assert route.handler is _handler
        assert route.methods == frozenset()
        assert route.name is None
        assert route.strict_slash is False
        assert route.middleware == ()

    def test_pattern_gets_leading_slash(self) -> None:
        assert Route("users", _handler).pattern == "/users"

    def test_chainable_setters(self) -> None:
        async def mw(request, next):
            return await next(request)

        route = Route("/users", _handler).allow("get", "Post").named("users").strict().use(mw)
        assert route.methods == frozenset({"GET", "POST"})
        assert route.name == "users"
        assert route.strict_slash is True
        assert route.middleware == (mw,)

    def test_use_appends_in_order(self) -> None:
        async def a(request, next):
            return await next(request)

        async def b(request, next):
            return await next(request)

        route = Route("/", _handler).use(a).use(b)
        assert route.middleware == (a, b)

    def test_frozen_after_first_match(self) -> None:
        route = Route("/users", _handler)
        route.match("/other", "GET")
        assert route.frozen is True
        with pytest.raises(RuntimeError, match="Cannot modify route"):
            route.allow("POST")
        with pytest.raises(RuntimeError, match="Cannot modify route"):
            route.named("users")

    def test_on_rename_called_by_named(self) -> None:
        calls: list[str] = []
        route = Route("/a", _handler, on_rename=lambda: calls.append("renamed"))
        route.named("a").allow("POST")
        assert calls == ["renamed"]

    def test_repr(self) -> None:
        assert repr(Route("/a", _handler).named("a")) == "Route('/a', methods=GET, name='a')"


class TestCompileLifecycle:
    def test_starts_pending(self) -> None:
        route = Route("/users/<int:id>", _handler)
        assert route.state is CompileState.PENDING

    def test_compile_once(self) -> None:
        route = Route("/users/<int:id>", _handler)
        first = route.compile()
        assert route.state is CompileState.COMPILED
        assert route.compile() is first

    def test_match_compiles_lazily(self) -> None:
        route = Route("/users/<int:id>", _handler)
        route.match("/users/1", "GET")
        assert route.state is CompileState.COMPILED

    def test_matcher_reused_across_matches(self) -> None:
        route = Route("/users/<int:id>", _handler)
        route.match("/users/1", "GET")
        compiled = route.compile()
        route.match("/users/2", "GET")
        assert route.compile() is compiled

    def test_not_recompiled_after_first_match(self) -> None:
        route = Route("/users/<int:id>", _handler)
        assert route.match("/users/1", "GET")
        route._pattern = "/posts/<int:id>"
        assert route.match("/users/2", "GET")
        assert not route.match("/posts/2", "GET")

    def test_invalid_pattern_stays_pending(self) -> None:
        route = Route("/users/<id", _handler)
        with pytest.raises(InvalidPatternError):
            route.compile()
        assert route.state is CompileState.PENDING


class TestMethods:
    def test_default_is_get_only(self) -> None:
        route = Route("/x", _handler)
        assert route.match("/x", "GET")
        assert not route.match("/x", "POST")
        assert not route.match("/x", "HEAD")

    def test_configured_method(self) -> None:
        route = Route("/test/ok/", _handler).allow("POST")
        assert route.supports_method("POST")
        assert not route.supports_method("GET")

    def test_case_insensitive(self) -> None:
        route = Route("/x", _handler).allow("put")
        assert route.supports_method("PUT")
        assert route.supports_method("put")

    def test_method_mismatch_is_no_match(self) -> None:
        route = Route("/x", _handler)
        assert route.match("/x", "DELETE") is NO_MATCH


class TestMatch:
    def test_params(self) -> None:
        route = Route("/<string:value>/<int:user_id>/", _handler)
        result = route.match("/user/10000/", "GET")
        assert result.matched is True
        assert result.handler is _handler
        assert result.route is route
        assert result.params == {"value": "user", "user_id": "10000"}

    def test_path_mismatch(self) -> None:
        route = Route("/users/<int:id>", _handler)
        assert route.match("/users/abc", "GET") is NO_MATCH

    def test_slash_tolerated_without_strict(self) -> None:
        route = Route("/test/", _handler)
        result = route.match("/test", "GET")
        assert result.handler is _handler
        assert not result.is_redirect

    def test_strict_adds_slash(self) -> None:
        route = Route("/test/", _handler).strict()
        result = route.match("/test", "GET")
        assert result.matched is True
        assert result.is_redirect
        assert result.redirect_to == "/test/"
        assert result.params == {}

    def test_strict_removes_slash(self) -> None:
        route = Route("/test", _handler).strict()
        result = route.match("/test/", "GET")
        assert result.redirect_to == "/test"

    def test_strict_redirect_skips_params(self) -> None:
        route = Route("/users/<int:id>/", _handler).strict()
        result = route.match("/users/5", "GET")
        assert result.redirect_to == "/users/5/"
        assert result.params == {}

    def test_strict_agreeing_slash_matches(self) -> None:
        route = Route("/test/", _handler).strict()
        result = route.match("/test/", "GET")
        assert result.handler is _handler

    def test_strict_method_mismatch_no_redirect(self) -> None:
        route = Route("/test/", _handler).strict()
        assert route.match("/test", "POST") is NO_MATCH

    def test_redirect_handler_response(self) -> None:
        response = RedirectHandler("/test/")(make_request("GET", "/test"))
        assert isinstance(response, Response)
        assert response.status == 301
        assert response.location == "/test/"


class TestMatchResult:
    def test_no_match_is_falsy(self) -> None:
        assert not NO_MATCH
        assert NO_MATCH.matched is False
        assert NO_MATCH.handler is None

    def test_match_is_truthy(self) -> None:
        assert MatchResult(matched=True, handler=_handler)

    def test_frozen(self) -> None:
        with pytest.raises(AttributeError):
            NO_MATCH.matched = True  # type: ignore[misc]


class TestDispatch:
    async def test_runs_handler(self) -> None:
        route = Route("/", _handler)
        response = await route.dispatch(make_request("GET", "/"))
        assert response.status == 200
        assert response.text == "ok"

    async def test_middleware_order(self) -> None:
        calls: list[str] = []

        def make(tag: str):
            async def mw(request, next):
                calls.append(f"{tag}:in")
                response = await next(request)
                calls.append(f"{tag}:out")
                return response

            return mw

        def handler():
            calls.append("handler")
            return "ok"

        route = Route("/", handler).use(make("a"), make("b"))
        await route.dispatch(make_request("GET", "/"))
        assert calls == ["a:in", "b:in", "handler", "b:out", "a:out"]

    async def test_middleware_short_circuit(self) -> None:
        called = False

        def handler():
            nonlocal called
            called = True
            return "ok"

        async def deny(request, next):
            return Response("denied", status=403)

        route = Route("/", handler).use(deny)
        response = await route.dispatch(make_request("GET", "/"))
        assert response.status == 403
        assert called is False

    def test_url(self) -> None:
        route = Route("/user/<int:id>/", _handler)
        assert route.url({"id": 7}) == "/user/7/"
