"""
tests.test_static

Production asset serving with single-page fallback.
"""

from __future__ import annotations

from pathlib import Path

import httpx
import pytest

from spa_host.settings import Settings


@pytest.mark.asyncio
async def test_serves_bundle_files(client: httpx.AsyncClient) -> None:
    r = await client.get("/assets/app.js")
    assert r.status_code == 200
    assert "console.log('app')" in r.text


@pytest.mark.asyncio
@pytest.mark.parametrize("path", ["/", "/dashboard", "/users/42/edit"])
async def test_unmatched_paths_fall_back_to_index(client: httpx.AsyncClient, path: str) -> None:
    r = await client.get(path)
    assert r.status_code == 200
    assert "id=root" in r.text


@pytest.mark.asyncio
async def test_api_routes_take_precedence(client: httpx.AsyncClient) -> None:
    r = await client.get("/api/ping")
    assert r.json() == {"message": "pong"}


@pytest.mark.asyncio
async def test_non_get_requests_do_not_fall_back(client: httpx.AsyncClient) -> None:
    r = await client.delete("/dashboard")
    assert r.status_code == 405
    assert r.json() == {"message": "Method Not Allowed"}


@pytest.mark.asyncio
async def test_bundled_404_page_does_not_block_fallback(static_dir: Path, settings: Settings, build_app) -> None:
    (static_dir / "404.html").write_text("<h1>not found page</h1>")
    transport = httpx.ASGITransport(app=await build_app(settings))

    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        r = await c.get("/dashboard")

    assert r.status_code == 200
    assert "id=root" in r.text
