"""
Action boundary: turn service outcomes into ``ActionResult`` envelopes.

Nothing raised by a service escapes an action. Domain errors keep their
message; anything else is logged with its traceback and reported by its text.
"""

from __future__ import annotations

import functools
from typing import Any, Awaitable, Callable

import structlog
from pydantic import BaseModel

from app.core.errors import AppError
from orgtodo_shared.schemas.common import ActionResult

log = structlog.get_logger()


def _dump(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if isinstance(value, list):
        return [_dump(v) for v in value]
    return value


def action_result(
    default_message: str,
) -> Callable[[Callable[..., Awaitable[Any]]], Callable[..., Awaitable[ActionResult]]]:
    """Decorate an async service call so it returns an ``ActionResult``."""

    def decorator(fn: Callable[..., Awaitable[Any]]) -> Callable[..., Awaitable[ActionResult]]:
        @functools.wraps(fn)
        async def wrapper(*args: Any, **kwargs: Any) -> ActionResult:
            try:
                data = await fn(*args, **kwargs)
            except AppError as exc:
                log.info("action.failed", action=fn.__name__, error=exc.message, kind=type(exc).__name__)
                return ActionResult.fail(exc.message)
            except Exception as exc:
                log.exception("action.error", action=fn.__name__)
                return ActionResult.fail(str(exc) or default_message)
            return ActionResult.ok(_dump(data))

        return wrapper

    return decorator
