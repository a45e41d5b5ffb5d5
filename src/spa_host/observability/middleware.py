"""
spa_host.observability.middleware

HTTP middleware for request-scoped context and API access logging.

Responsibilities:
- Generate/propagate request IDs and bind them into structlog contextvars.
- Track each request in a `RequestContext` (timing, status, captured JSON body).
- Emit one access line per completed API request via `observability.logging.log`.
"""

from __future__ import annotations

import json
import uuid
from dataclasses import dataclass, field
from time import perf_counter
from typing import Any

import structlog
from starlette.datastructures import Headers, MutableHeaders
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from spa_host.observability.logging import log


@dataclass
class RequestContext:
    """
    Per-request state, reachable from handlers as `request.state.request_context`.
    """

    method: str
    path: str
    request_id: str
    started: float = field(default_factory=perf_counter)
    status_code: int | None = None
    # Decoded JSON response body; kept for diagnostics, nothing reads it yet.
    response_body: Any = None
    _body_captured: bool = field(default=False, repr=False)
    _finished: bool = field(default=False, repr=False)

    def capture_body(self, body: Any) -> None:
        if self._body_captured:
            return
        self.response_body = body
        self._body_captured = True

    def finish(self) -> bool:
        """Mark the response as fully sent. Returns True only the first time."""
        if self._finished:
            return False
        self._finished = True
        return True

    @property
    def elapsed_ms(self) -> int:
        return max(0, int((perf_counter() - self.started) * 1000))


class RequestObservabilityMiddleware:
    """
    - Ensures every request has a request id
    - Captures JSON response bodies into the request context
    - Logs `<METHOD> <PATH> <STATUS> - <DURATION>ms` once an API response is sent
    """

    def __init__(self, app: ASGIApp, *, api_prefix: str = "/api") -> None:
        self.app = app
        self.api_prefix = api_prefix

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        # Prefer a caller-provided request id for trace continuity; otherwise generate one.
        request_id = Headers(scope=scope).get("x-request-id") or str(uuid.uuid4())
        context = RequestContext(method=scope["method"], path=scope["path"], request_id=request_id)
        scope.setdefault("state", {})["request_context"] = context

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            path=context.path,
            method=context.method,
        )

        json_chunks: list[bytes] | None = None

        async def send_wrapper(message: Message) -> None:
            nonlocal json_chunks

            if message["type"] == "http.response.start":
                context.status_code = int(message["status"])
                headers = MutableHeaders(scope=message)
                headers["x-request-id"] = request_id
                if headers.get("content-type", "").startswith("application/json"):
                    json_chunks = []
                await send(message)
                return

            if message["type"] != "http.response.body":
                await send(message)
                return

            if json_chunks is not None:
                json_chunks.append(message.get("body", b""))
            if message.get("more_body", False):
                await send(message)
                return

            if json_chunks is not None:
                context.capture_body(_decode_json(b"".join(json_chunks)))
            await send(message)
            self._on_finish(context)

        try:
            await self.app(scope, receive, send_wrapper)
        finally:
            # Avoid leaking context across requests under async concurrency.
            structlog.contextvars.clear_contextvars()

    def _on_finish(self, context: RequestContext) -> None:
        if not context.finish():
            return
        if context.path.startswith(self.api_prefix):
            log(
                f"{context.method} {context.path} {context.status_code} - "
                f"{context.elapsed_ms}ms"
            )


def _decode_json(body: bytes) -> Any:
    # HEAD responses and empty bodies carry nothing to capture.
    if not body:
        return None
    try:
        return json.loads(body)
    except ValueError:
        return None


# --- Module Notes -----------------------------------------------------------
# The access line is written only after the final body chunk has been handed to
# the server, so a request that never produces a response logs nothing.
