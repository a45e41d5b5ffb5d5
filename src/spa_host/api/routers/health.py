"""
spa_host.api.routers.health

Health and readiness endpoints.

Responsibilities:
- Provide liveness probe (`/healthz`) and a trivial `/ping`.
- Provide readiness probe (`/readyz`) reflecting whether the server is listening.
"""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Request
from starlette.status import HTTP_503_SERVICE_UNAVAILABLE

router = APIRouter()


@router.get("/healthz")
async def healthz() -> dict[str, str]:
    # Liveness: process is up and serving HTTP.
    return {"status": "ok"}


@router.get("/readyz")
async def readyz(request: Request) -> dict[str, str]:
    # Readiness: the server handle finished binding its socket.
    server = getattr(request.app.state, "server", None)
    if server is None or not server.started:
        raise HTTPException(status_code=HTTP_503_SERVICE_UNAVAILABLE, detail="not ready")
    return {"status": "ready"}


@router.get("/ping")
async def ping() -> dict[str, str]:
    return {"message": "pong"}


# --- Module Notes -----------------------------------------------------------
# Kubernetes typically uses /healthz for liveness and /readyz for readiness gating.
