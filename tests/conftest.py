"""Pytest configuration and fixtures for static_shared tests."""
import asyncio
from typing import Callable, List, Optional

import httpx
import pytest
from fastapi import FastAPI
from fastapi.responses import PlainTextResponse
from starlette.types import ASGIApp, Receive, Scope, Send

from static_shared import MemorySharedContentStore


class RecordingApp:
    """Wraps an ASGI app and records every http path it is called with."""

    def __init__(self, app: ASGIApp) -> None:
        self.app = app
        self.paths: List[str] = []
        self.scopes: List[Scope] = []

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "http":
            self.paths.append(scope["path"])
            self.scopes.append(scope)
        await self.app(scope, receive, send)


class RecordingStore(MemorySharedContentStore):
    """Memory store that records calls and can be told to fail."""

    def __init__(
        self,
        fail_on_get: Optional[Exception] = None,
        fail_on_set: Optional[Exception] = None,
    ) -> None:
        super().__init__()
        self.fail_on_get = fail_on_get
        self.fail_on_set = fail_on_set
        self.gets: List[str] = []
        self.sets: List[str] = []

    async def get(self, key: str):
        self.gets.append(key)
        if self.fail_on_get is not None:
            raise self.fail_on_get
        return await super().get(key)

    async def set(self, key: str, value: bytes) -> None:
        self.sets.append(key)
        if self.fail_on_set is not None:
            raise self.fail_on_set
        await super().set(key, value)


class GatedApp:
    """ASGI app that holds every request until the gate opens."""

    def __init__(self, body: str = "X") -> None:
        self.gate = asyncio.Event()
        self.calls = 0
        self.body = body

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        self.calls += 1
        await self.gate.wait()
        await PlainTextResponse(self.body)(scope, receive, send)


def create_downstream_app() -> FastAPI:
    """Downstream app serving the individual files."""
    app = FastAPI()

    @app.get("/a.js")
    async def a_js():
        return PlainTextResponse("A")

    @app.get("/b.js")
    async def b_js():
        return PlainTextResponse("B")

    @app.get("/c.js")
    async def c_js():
        return PlainTextResponse("C")

    @app.get("/a.css")
    async def a_css():
        return PlainTextResponse("a{}")

    @app.get("/b.css")
    async def b_css():
        return PlainTextResponse("b{}")

    @app.get("/missing.js")
    async def missing_js():
        return PlainTextResponse("not here", status_code=404)

    @app.get("/moved.js")
    async def moved_js():
        return PlainTextResponse("", status_code=302, headers={"Location": "/a.js"})

    @app.get("/boom.js")
    async def boom_js():
        raise RuntimeError("downstream exploded")

    @app.get("/slow.js")
    async def slow_js():
        await asyncio.sleep(0.05)
        return PlainTextResponse("SLOW")

    @app.get("/fast.js")
    async def fast_js():
        return PlainTextResponse("FAST")

    @app.get("/hello")
    async def hello():
        return {"hello": "world"}

    return app


@pytest.fixture
def downstream() -> RecordingApp:
    """Recording wrapper around the downstream FastAPI app."""
    return RecordingApp(create_downstream_app())


@pytest.fixture
def store() -> RecordingStore:
    """Recording memory store."""
    return RecordingStore()


@pytest.fixture
def make_client() -> Callable[[ASGIApp], httpx.AsyncClient]:
    """Factory for httpx clients bound to an ASGI app."""

    def _make(app: ASGIApp) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            transport=httpx.ASGITransport(app=app),
            base_url="http://testserver",
        )

    return _make
