"""
tests.conftest

Shared fixtures: production-mode settings over a throwaway client bundle, and a
route registrar that adds failure-injecting endpoints next to the real API routes.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from pathlib import Path

import httpx
import pytest
import pytest_asyncio
from fastapi import APIRouter, FastAPI, HTTPException, Request
from starlette.responses import StreamingResponse

from spa_host.api.bootstrap import bootstrap
from spa_host.api.routes import register_routes
from spa_host.errors import AppError
from spa_host.settings import Settings

INDEX_HTML = "<!doctype html><div id=root></div>"


class StatusCodeError(Exception):
    def __init__(self, message: str, status_code: object) -> None:
        super().__init__(message)
        self.status_code = status_code


def build_test_router() -> APIRouter:
    router = APIRouter()

    @router.get("/api/items/{item_id}")
    async def missing_item(item_id: str) -> dict[str, str]:
        raise AppError("Not found", status=404)

    @router.get("/api/boom")
    async def boom() -> dict[str, str]:
        raise RuntimeError("kaboom")

    @router.get("/api/silent")
    async def silent() -> dict[str, str]:
        raise RuntimeError()

    @router.get("/api/teapot")
    async def teapot() -> dict[str, str]:
        raise StatusCodeError("short and stout", status_code=418)

    @router.get("/api/bogus-status")
    async def bogus_status() -> dict[str, str]:
        raise StatusCodeError("odd status", status_code=999)

    @router.get("/api/forbidden")
    async def forbidden() -> dict[str, str]:
        raise HTTPException(status_code=403, detail="nope")

    @router.get("/api/stream")
    async def stream() -> StreamingResponse:
        async def chunks() -> AsyncIterator[bytes]:
            yield b"partial"
            raise RuntimeError("stream broke")

        return StreamingResponse(chunks(), media_type="text/plain")

    @router.post("/api/echo")
    async def echo(request: Request) -> dict[str, object]:
        return {
            "body": request.state.body,
            "raw": request.state.raw_body.decode(),
            "reread": await request.json(),
        }

    @router.post("/api/form")
    async def form(request: Request) -> dict[str, object]:
        return {"body": request.state.body}

    @router.get("/api/orders/{order_id}")
    async def order(order_id: int) -> dict[str, int]:
        return {"order_id": order_id}

    @router.get("/api/body")
    async def body(request: Request) -> dict[str, object]:
        return {"body": request.state.body}

    @router.get("/api/context")
    async def context(request: Request) -> dict[str, object]:
        ctx = request.state.request_context
        return {"request_id": ctx.request_id, "method": ctx.method, "path": ctx.path}

    @router.get("/plain")
    async def plain() -> dict[str, bool]:
        return {"ok": True}

    return router


async def register_test_routes(server, app: FastAPI) -> None:
    await register_routes(server, app)
    app.include_router(build_test_router())


@pytest.fixture
def static_dir(tmp_path: Path) -> Path:
    bundle = tmp_path / "dist"
    (bundle / "assets").mkdir(parents=True)
    (bundle / "index.html").write_text(INDEX_HTML)
    (bundle / "assets" / "app.js").write_text("console.log('app');")
    return bundle


@pytest.fixture
def settings(static_dir: Path) -> Settings:
    return Settings(node_env="production", static_dir=static_dir, port=5000)


@pytest.fixture
def build_app():
    async def _build(settings: Settings) -> FastAPI:
        server = await bootstrap(settings, register_routes=register_test_routes)
        return server.config.app

    return _build


@pytest_asyncio.fixture
async def client(settings: Settings, build_app) -> AsyncIterator[httpx.AsyncClient]:
    transport = httpx.ASGITransport(app=await build_app(settings), raise_app_exceptions=False)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


# --- Module Notes -----------------------------------------------------------
# httpx's ASGITransport does not run lifespan events; none of these tests need them.
