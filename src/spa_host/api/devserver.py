"""
spa_host.api.devserver

Development bridge to the frontend dev server.

Responsibilities:
- Proxy every non-API GET/HEAD request to `settings.dev_server_url`.
- Answer unmatched API paths with 404 instead of proxying them.
- Own the upstream HTTP client and close it on shutdown.

Imported lazily by `api.bootstrap`, and only outside production.
"""

from __future__ import annotations

from urllib.parse import urlsplit

import httpx
import uvicorn
from fastapi import FastAPI, HTTPException, Request
from starlette.responses import Response
from starlette.status import HTTP_404_NOT_FOUND, HTTP_502_BAD_GATEWAY

from spa_host.errors import AppError
from spa_host.observability.logging import get_logger

log = get_logger(__name__)

# Hop-by-hop headers plus the ones httpx invalidates by decoding the body.
_DROPPED_HEADERS = frozenset(
    {
        "connection",
        "keep-alive",
        "transfer-encoding",
        "upgrade",
        "content-encoding",
        "content-length",
    }
)


def _points_at_self(dev_server_url: str, server: uvicorn.Server) -> bool:
    parts = urlsplit(dev_server_url)
    return parts.hostname in ("localhost", "127.0.0.1", "0.0.0.0") and parts.port == server.config.port


async def setup_dev_server(
    server: uvicorn.Server | None,
    app: FastAPI,
    *,
    client: httpx.AsyncClient | None = None,
) -> None:
    settings = app.state.settings
    if server is not None and _points_at_self(settings.dev_server_url, server):
        raise RuntimeError(f"dev_server_url {settings.dev_server_url} points at this server")

    if client is None:
        client = httpx.AsyncClient(base_url=settings.dev_server_url, timeout=10.0)
    app.state.dev_client = client

    @app.on_event("shutdown")
    async def _close_dev_client() -> None:
        await client.aclose()

    @app.api_route("/{path:path}", methods=["GET", "HEAD"], include_in_schema=False)
    async def _proxy(path: str, request: Request) -> Response:
        if request.url.path.startswith(settings.api_prefix):
            raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail="Not Found")

        headers = {k: v for k, v in request.headers.items() if k.lower() not in ("host", *_DROPPED_HEADERS)}
        try:
            upstream = await client.request(
                request.method,
                f"/{path}",
                params=request.query_params.multi_items(),
                headers=headers,
            )
        except httpx.HTTPError as exc:
            raise AppError(
                f"Development server unavailable at {settings.dev_server_url}",
                status=HTTP_502_BAD_GATEWAY,
            ) from exc

        return Response(
            content=upstream.content,
            status_code=upstream.status_code,
            headers={k: v for k, v in upstream.headers.items() if k.lower() not in _DROPPED_HEADERS},
        )

    log.info("dev_server_bridge", upstream=settings.dev_server_url)


# --- Module Notes -----------------------------------------------------------
# Live-reload websockets are not proxied; point the browser's HMR client at the
# dev server directly.
