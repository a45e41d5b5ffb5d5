"""
spa_host.api.bootstrap

Startup sequencer for the spa-host service.

Responsibilities:
- Compose the middleware chain, routes and client asset serving in a fixed order.
- Own the server handle (`ListeningServer`) and announce readiness once bound.
- Turn any startup failure into a logged error and exit code 1.

Order:
1. body parsing           4. error boundary (terminal)
2. request observability  5. static bundle (production) or dev bridge
3. route registration     6./7. bind PORT and listen
"""

from __future__ import annotations

import importlib
import socket
from collections.abc import Awaitable, Callable

import uvicorn
from fastapi import FastAPI

from spa_host.api.app import create_app, use
from spa_host.api.body_parser import BodyParserMiddleware
from spa_host.api.error_boundary import ErrorBoundaryMiddleware
from spa_host.api.routes import register_routes as default_register_routes
from spa_host.api.static import serve_static
from spa_host.observability.logging import get_logger, log
from spa_host.observability.middleware import RequestObservabilityMiddleware
from spa_host.settings import DeploymentMode, Settings

logger = get_logger(__name__)

RegisterRoutes = Callable[["ListeningServer", FastAPI], Awaitable[None]]

# Imported on demand so production never loads the dev tooling.
DEV_BRIDGE_MODULE = "spa_host.api.devserver"


class ListeningServer(uvicorn.Server):
    """uvicorn server that reports once its sockets are bound."""

    def __init__(self, config: uvicorn.Config, *, on_listen: Callable[[int], None]) -> None:
        super().__init__(config)
        self.on_listen = on_listen

    async def startup(self, sockets: list[socket.socket] | None = None) -> None:
        # uvicorn exits the process with status 1 itself when binding fails.
        await super().startup(sockets=sockets)
        if self.started:
            self.on_listen(self.config.port)


def announce_listening(port: int) -> None:
    log(f"Server running on port {port}")


async def bootstrap(
    settings: Settings,
    *,
    register_routes: RegisterRoutes = default_register_routes,
) -> ListeningServer:
    app = create_app(settings=settings)
    server = ListeningServer(
        uvicorn.Config(app, host=settings.host, port=settings.port, log_config=None),
        on_listen=announce_listening,
    )

    use(app, BodyParserMiddleware, limit=settings.body_limit_bytes)
    use(app, RequestObservabilityMiddleware, api_prefix=settings.api_prefix)

    await register_routes(server, app)

    use(app, ErrorBoundaryMiddleware)

    if settings.mode is DeploymentMode.PRODUCTION:
        serve_static(app)
    else:
        devserver = importlib.import_module(DEV_BRIDGE_MODULE)
        await devserver.setup_dev_server(server, app)

    logger.info("bootstrap_complete", mode=settings.mode.value, port=settings.port)
    return server


async def serve(
    settings: Settings,
    *,
    register_routes: RegisterRoutes = default_register_routes,
) -> None:
    try:
        server = await bootstrap(settings, register_routes=register_routes)
    except Exception as exc:
        logger.error("Failed to start server", error=repr(exc), exc_info=exc)
        raise SystemExit(1) from exc

    await server.serve()


# --- Module Notes -----------------------------------------------------------
# Nothing binds a socket until `server.serve()`, so a failed bootstrap never
# leaves a listener behind.
