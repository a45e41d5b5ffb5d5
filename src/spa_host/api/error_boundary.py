"""
spa_host.api.error_boundary

Terminal error-handling middleware.

Responsibilities:
- Catch any exception escaping the route handlers.
- Log it with its traceback to the error stream.
- Render `{"message": ...}` with the error's status, unless a response already started.
"""

from __future__ import annotations

from starlette.responses import JSONResponse
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from spa_host.errors import resolve_message, resolve_status
from spa_host.observability.logging import get_logger

log = get_logger(__name__)


def error_response(exc: BaseException) -> JSONResponse:
    return JSONResponse({"message": resolve_message(exc)}, status_code=resolve_status(exc))


async def respond_with_error(exc: BaseException, scope: Scope, receive: Receive, send: Send) -> None:
    log.error("Unhandled Error", error=repr(exc), exc_info=exc)
    await error_response(exc)(scope, receive, send)


class ErrorBoundaryMiddleware:
    """
    Installed last, so it sits directly around the router and sees every error
    the framework's own exception handlers leave unhandled.
    """

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        headers_sent = False

        async def send_wrapper(message: Message) -> None:
            nonlocal headers_sent
            if message["type"] == "http.response.start":
                headers_sent = True
            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        except Exception as exc:
            if not headers_sent:
                await respond_with_error(exc, scope, receive, send)
                return
            # A partial response is on the wire; hand the failure to the server,
            # which aborts the connection instead of writing a second response.
            log.error("Unhandled Error", error=repr(exc), exc_info=exc)
            raise


# --- Module Notes -----------------------------------------------------------
# `respond_with_error` is shared with `api.body_parser`, whose failures happen
# before the request reaches this middleware.
