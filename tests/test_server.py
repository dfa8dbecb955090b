"""Tests for wren.server — ASGI adapter, error boundary, response sending."""

import logging

import pytest

from wren.config import RouterConfig
from wren.errors import MethodNotAllowed, NotFound
from wren.http.response import Response
from wren.routing.router import Router
from wren.server.handler import handle_request
from wren.server.sender import send_response
from wren.testing import TestClient, build_scope


class TestSendResponse:
    async def test_200_preserves_body(self) -> None:
        messages: list[dict] = []

        async def send(message: dict) -> None:
            messages.append(message)

        await send_response(Response("ok").with_header("X-A", "1"), send)

        assert messages[0]["type"] == "http.response.start"
        assert messages[0]["status"] == 200
        headers = dict(messages[0]["headers"])
        assert headers[b"content-length"] == b"2"
        assert headers[b"x-a"] == b"1"
        assert messages[1] == {"type": "http.response.body", "body": b"ok"}

    @pytest.mark.parametrize("status", [204, 304])
    async def test_no_body_statuses(self, status: int) -> None:
        messages: list[dict] = []

        async def send(message: dict) -> None:
            messages.append(message)

        await send_response(Response("unexpected-body").with_status(status), send)

        headers = dict(messages[0]["headers"])
        assert headers[b"content-length"] == b"0"
        assert messages[1]["body"] == b""

    async def test_head_withholds_body_but_keeps_length(self) -> None:
        messages: list[dict] = []

        async def send(message: dict) -> None:
            messages.append(message)

        await send_response(Response("hello"), send, head=True)

        headers = dict(messages[0]["headers"])
        assert headers[b"content-length"] == b"5"
        assert messages[1]["body"] == b""

    async def test_content_type_first_length_last(self) -> None:
        messages: list[dict] = []

        async def send(message: dict) -> None:
            messages.append(message)

        await send_response(Response("x").with_header("X-B", "2"), send)

        names = [name for name, _ in messages[0]["headers"]]
        assert names[0] == b"content-type"
        assert names[-1] == b"content-length"


class TestHandleRequest:
    async def test_ignores_non_http_scope(self) -> None:
        messages: list[dict] = []

        async def receive() -> dict:
            return {"type": "lifespan.startup"}

        async def send(message: dict) -> None:
            messages.append(message)

        await handle_request({"type": "lifespan"}, receive, send, router=Router())
        assert messages == []

    async def test_dispatches_through_router(self) -> None:
        r = Router()
        r.handle("/", lambda: "hello")
        messages: list[dict] = []

        async def receive() -> dict:
            return {"type": "http.request", "body": b"", "more_body": False}

        async def send(message: dict) -> None:
            messages.append(message)

        await handle_request(build_scope("GET", "/"), receive, send, router=r)
        assert messages[0]["status"] == 200
        assert messages[1]["body"] == b"hello"


class TestErrorBoundary:
    async def test_http_error_maps_to_status(self) -> None:
        def handler() -> str:
            raise NotFound("no such user")

        r = Router()
        r.handle("/users/<int:id>", handler)
        async with TestClient(r) as client:
            response = await client.get("/users/1")
        assert response.status == 404
        assert response.text == "no such user"

    async def test_http_error_headers(self) -> None:
        def handler() -> str:
            raise MethodNotAllowed(frozenset({"GET", "POST"}))

        r = Router()
        r.handle("/", handler)
        async with TestClient(r) as client:
            response = await client.get("/")
        assert response.status == 405
        assert response.header("allow") == "GET, POST"

    async def test_unhandled_error_is_500_and_logged(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        def handler() -> str:
            raise RuntimeError("kaboom")

        r = Router()
        r.handle("/", handler)
        with caplog.at_level(logging.ERROR, logger="wren.server"):
            async with TestClient(r) as client:
                response = await client.get("/")

        assert response.status == 500
        assert response.text == "Internal Server Error"
        assert "Unhandled RuntimeError while serving GET /" in caplog.text

    async def test_debug_includes_traceback(self) -> None:
        def handler() -> str:
            raise RuntimeError("kaboom")

        r = Router(RouterConfig(debug=True))
        r.handle("/", handler)
        async with TestClient(r) as client:
            response = await client.get("/")

        assert response.status == 500
        assert "RuntimeError: kaboom" in response.text
        assert "Traceback" in response.text

    async def test_after_routing_hook_runs_before_500(self) -> None:
        seen: list[object] = []

        def handler() -> str:
            raise RuntimeError("kaboom")

        r = Router()
        r.handle("/", handler)
        r.add_hook("after_routing", lambda request, response: seen.append(response))
        async with TestClient(r) as client:
            response = await client.get("/")

        assert response.status == 500
        assert seen == [None]


class TestBuildScope:
    def test_raw_path_is_percent_encoded(self) -> None:
        scope = build_scope("GET", "/日本/a b")
        assert scope["path"] == "/日本/a b"
        assert scope["raw_path"] == b"/%E6%97%A5%E6%9C%AC/a%20b"

    def test_query_string_is_percent_encoded(self) -> None:
        scope = build_scope("GET", "/search?q=café&page=2")
        assert scope["path"] == "/search"
        assert scope["query_string"] == b"q=caf%C3%A9&page=2"

    async def test_non_ascii_query_round_trips(self) -> None:
        r = Router()
        r.handle("/search", lambda request: request.query.get("q"))
        async with TestClient(r) as client:
            response = await client.get("/search?q=café")
        assert response.text == "café"
