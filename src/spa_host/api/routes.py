"""
spa_host.api.routes

Route registration collaborator for the bootstrap sequencer.

Responsibilities:
- Mount every API router under the configured API prefix.
- Expose the server handle to handlers via `app.state.server`.
"""

from __future__ import annotations

import uvicorn
from fastapi import FastAPI

from spa_host.api.routers.health import router as health_router


async def register_routes(server: uvicorn.Server, app: FastAPI) -> None:
    settings = app.state.settings
    app.state.server = server
    app.include_router(health_router, prefix=settings.api_prefix, tags=["health"])


# --- Module Notes -----------------------------------------------------------
# Feature routers are added here; the bootstrap sequencer only depends on the
# `register_routes(server, app)` signature.
