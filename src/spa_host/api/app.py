"""
spa_host.api.app

FastAPI app factory for the spa-host service.

Responsibilities:
- Build the FastAPI application with settings stashed on `app.state`.
- Render framework HTTP and validation exceptions in the service's `{"message": ...}` shape.
- Provide `use()`, which installs middleware in call order (first call = outermost).
"""

from __future__ import annotations

from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware import Middleware
from starlette.responses import JSONResponse

from spa_host import __version__
from spa_host.observability.logging import configure_logging
from spa_host.settings import Settings


def create_app(*, settings: Settings) -> FastAPI:
    # Configure structured logging once at process startup (before app serves requests).
    configure_logging(service_name=settings.service_name, level=settings.log_level)

    app = FastAPI(
        title="spa-host",
        version=__version__,
        docs_url=f"{settings.api_prefix}/docs",
        openapi_url=f"{settings.api_prefix}/openapi.json",
        redoc_url=None,
    )
    app.state.settings = settings
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    return app


async def http_exception_handler(_: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        {"message": str(exc.detail)},
        status_code=exc.status_code,
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
    # Only the first problem is reported; clients get one message like any other error.
    errors = exc.errors()
    message = errors[0].get("msg") if errors else None
    return JSONResponse(
        {"message": message or "Unprocessable Entity"},
        status_code=422,
    )


def use(app: FastAPI, middleware_class: type, **options: Any) -> None:
    """
    Append middleware to the chain.

    `FastAPI.add_middleware` prepends, making the latest call the outermost layer;
    appending keeps request flow in installation order, so the last middleware
    installed is the one closest to the routes.
    """

    if app.middleware_stack is not None:
        raise RuntimeError("Cannot add middleware after an application has started")
    app.user_middleware.append(Middleware(middleware_class, **options))


# --- Module Notes -----------------------------------------------------------
# This file is intentionally small: the startup order lives in `api.bootstrap`.
