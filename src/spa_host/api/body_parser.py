"""
spa_host.api.body_parser

Request body parsing middleware.

Responsibilities:
- Parse JSON bodies into `request.state.body`, keeping raw bytes in `request.state.raw_body`.
- Parse URL-encoded form bodies into `request.state.body`.
- Enforce the body size limit and replay the buffered body to downstream handlers.
"""

from __future__ import annotations

import json
from typing import Any
from urllib.parse import parse_qs

from starlette.datastructures import Headers
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from spa_host.api.error_boundary import respond_with_error
from spa_host.errors import AppError

JSON_TYPE = "application/json"
FORM_TYPE = "application/x-www-form-urlencoded"


def _media_type(headers: Headers) -> str:
    return headers.get("content-type", "").split(";", 1)[0].strip().lower()


def _is_json(media_type: str) -> bool:
    return media_type == JSON_TYPE or media_type.endswith("+json")


def parse_form(body: bytes) -> dict[str, Any]:
    # Repeated keys become lists; single keys stay scalar.
    parsed = parse_qs(body.decode("utf-8"), keep_blank_values=True, strict_parsing=False)
    return {key: values[0] if len(values) == 1 else values for key, values in parsed.items()}


class BodyParserMiddleware:
    def __init__(self, app: ASGIApp, *, limit: int = 100 * 1024) -> None:
        self.app = app
        self.limit = limit

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        headers = Headers(scope=scope)
        media_type = _media_type(headers)
        is_json = _is_json(media_type)
        if not is_json and media_type != FORM_TYPE:
            scope.setdefault("state", {}).setdefault("body", {})
            await self.app(scope, receive, send)
            return

        try:
            body = await self._read_body(headers, receive)
            state = scope.setdefault("state", {})
            if is_json:
                state["raw_body"] = body
                state["body"] = json.loads(body) if body else {}
            else:
                state["body"] = parse_form(body)
        except AppError as exc:
            await respond_with_error(exc, scope, receive, send)
            return
        except ValueError as exc:
            # JSONDecodeError and UnicodeDecodeError are both ValueErrors.
            await respond_with_error(AppError(str(exc), status=400), scope, receive, send)
            return

        replayed = False

        async def replay() -> Message:
            nonlocal replayed
            if not replayed:
                replayed = True
                return {"type": "http.request", "body": body, "more_body": False}
            return await receive()

        await self.app(scope, replay, send)

    async def _read_body(self, headers: Headers, receive: Receive) -> bytes:
        declared = headers.get("content-length")
        if declared is not None and declared.isdigit() and int(declared) > self.limit:
            raise AppError("request entity too large", status=413)

        chunks: list[bytes] = []
        size = 0
        while True:
            message = await receive()
            if message["type"] == "http.disconnect":
                break
            chunk = message.get("body", b"")
            size += len(chunk)
            if size > self.limit:
                raise AppError("request entity too large", status=413)
            chunks.append(chunk)
            if not message.get("more_body", False):
                break
        return b"".join(chunks)


# --- Module Notes -----------------------------------------------------------
# Handlers may still call `await request.json()` / `request.body()`; the buffered
# bytes are replayed as a single `http.request` message.
