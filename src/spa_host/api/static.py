"""
spa_host.api.static

Production client asset serving.

Responsibilities:
- Serve the pre-built client bundle from `settings.static_dir`.
- Fall back to `index.html` for unmatched GET/HEAD paths so the client router can take over.
"""

from __future__ import annotations

from fastapi import FastAPI
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import Response
from starlette.staticfiles import StaticFiles
from starlette.types import Scope

ENTRY_DOCUMENT = "index.html"


class SinglePageApp(StaticFiles):
    async def get_response(self, path: str, scope: Scope) -> Response:
        try:
            return await super().get_response(path, scope)
        except StarletteHTTPException as exc:
            # 405s for other methods propagate unchanged.
            if exc.status_code != 404:
                raise
            return await super().get_response(ENTRY_DOCUMENT, scope)


def serve_static(app: FastAPI) -> None:
    settings = app.state.settings
    # StaticFiles raises RuntimeError when the bundle directory is missing,
    # which aborts startup. html=False keeps a bundled 404.html from pre-empting
    # the index.html fallback.
    app.mount("/", SinglePageApp(directory=settings.static_dir, html=False), name="client")


# --- Module Notes -----------------------------------------------------------
# Mounted after the API routers, so API routes always match first.
