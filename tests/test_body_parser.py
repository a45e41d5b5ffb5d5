"""
tests.test_body_parser

JSON/urlencoded body parsing, raw body capture and the size limit.
"""

from __future__ import annotations

import httpx
import pytest

from spa_host.api.body_parser import parse_form
from spa_host.settings import Settings


@pytest.mark.asyncio
async def test_json_body_and_raw_bytes_are_exposed(client: httpx.AsyncClient) -> None:
    payload = b'{"event": "paid", "amount": 12}'
    r = await client.post("/api/echo", content=payload, headers={"content-type": "application/json"})

    assert r.status_code == 200
    assert r.json() == {
        "body": {"event": "paid", "amount": 12},
        "raw": payload.decode(),
        "reread": {"event": "paid", "amount": 12},
    }


@pytest.mark.asyncio
async def test_malformed_json_is_rejected_with_400(
    client: httpx.AsyncClient, capsys: pytest.CaptureFixture[str]
) -> None:
    r = await client.post("/api/echo", content=b"{not json", headers={"content-type": "application/json"})

    assert r.status_code == 400
    assert "message" in r.json()
    # Parser failures never reach the observability middleware.
    assert "/api/echo" not in capsys.readouterr().out


@pytest.mark.asyncio
async def test_urlencoded_body_is_parsed(client: httpx.AsyncClient) -> None:
    r = await client.post("/api/form", data={"name": "ada", "tag": ["a", "b"]})

    assert r.status_code == 200
    assert r.json() == {"body": {"name": "ada", "tag": ["a", "b"]}}


@pytest.mark.asyncio
async def test_oversized_body_is_rejected_with_413(settings: Settings, build_app) -> None:
    app = await build_app(settings.model_copy(update={"body_limit_bytes": 16}))

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        r = await c.post("/api/echo", json={"padding": "x" * 64})

    assert r.status_code == 413
    assert r.json() == {"message": "request entity too large"}


def test_parse_form_keeps_blank_values() -> None:
    assert parse_form(b"a=1&b=&a=2") == {"a": ["1", "2"], "b": ""}


@pytest.mark.asyncio
async def test_body_defaults_to_empty_dict_without_parseable_content(client: httpx.AsyncClient) -> None:
    r = await client.get("/api/body")
    assert r.status_code == 200
    assert r.json() == {"body": {}}
