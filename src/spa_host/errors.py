"""
spa_host.errors

Error values raised by request handlers and consumed by the error boundary.

Responsibilities:
- Provide a tagged application error carrying an optional HTTP status.
- Read status and message defensively from arbitrary exceptions.
"""

from __future__ import annotations

DEFAULT_STATUS = 500
DEFAULT_MESSAGE = "Internal Server Error"

# Checked in order; `statusCode` covers errors raised by foreign client libraries.
_STATUS_ATTRS = ("status", "status_code", "statusCode")


class AppError(Exception):
    """An error with an HTTP status, raised anywhere below the error boundary."""

    def __init__(self, message: str = "", *, status: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status = status


def _as_error_status(value: object) -> int | None:
    # bool is an int subclass; `True` is never a status.
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value if 100 <= value <= 599 else None


def resolve_status(exc: BaseException) -> int:
    for attr in _STATUS_ATTRS:
        status = _as_error_status(getattr(exc, attr, None))
        if status is not None:
            return status
    return DEFAULT_STATUS


def resolve_message(exc: BaseException) -> str:
    message = getattr(exc, "message", None)
    if isinstance(message, str) and message:
        return message
    return str(exc) or DEFAULT_MESSAGE


# --- Module Notes -----------------------------------------------------------
# Framework HTTP exceptions (`HTTPException`) are rendered by the handler in
# `api.app`; everything else that escapes a route lands in `api.error_boundary`.
