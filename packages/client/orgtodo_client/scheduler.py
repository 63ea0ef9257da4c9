"""
Cancellable delayed retries.

A ``RetryScheduler`` holds at most one pending retry. Scheduling a new one
cancels the previous, so retries for the same check never overlap, and
``cancel()`` on teardown leaves no timer behind.
"""

from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable, Coroutine

import structlog

log = structlog.get_logger()

SleepFn = Callable[[float], Awaitable[Any]]
RetryCallback = Callable[[], Coroutine[Any, Any, None]]


class ScheduledRetry:
    """Handle to one pending retry."""

    def __init__(self, attempt: int, delay_ms: int, task: asyncio.Task):
        self.attempt = attempt
        self.delay_ms = delay_ms
        self._task = task

    @property
    def done(self) -> bool:
        return self._task.done()

    def cancel(self) -> bool:
        """Cancel the retry if it has not run yet. Returns True if cancelled."""
        if self._task.done() or self._task is asyncio.current_task():
            return False
        return self._task.cancel()

    async def wait(self) -> None:
        try:
            await self._task
        except asyncio.CancelledError:
            pass


class RetryScheduler:
    """Single-slot scheduler for delayed async callbacks."""

    def __init__(self, sleep: SleepFn = asyncio.sleep):
        self._sleep = sleep
        self._pending: ScheduledRetry | None = None

    @property
    def pending(self) -> ScheduledRetry | None:
        if self._pending is not None and self._pending.done:
            return None
        return self._pending

    def schedule(self, attempt: int, delay_ms: int, callback: RetryCallback) -> ScheduledRetry:
        """Run ``callback`` after ``delay_ms``; replaces any pending retry."""
        self.cancel()

        async def _run() -> None:
            await self._sleep(delay_ms / 1000)
            await callback()

        handle = ScheduledRetry(attempt, delay_ms, asyncio.create_task(_run()))
        self._pending = handle
        log.debug("scheduler.retry_scheduled", attempt=attempt, delay_ms=delay_ms)
        return handle

    def cancel(self) -> None:
        if self._pending is not None and self._pending.cancel():
            log.debug("scheduler.retry_cancelled", attempt=self._pending.attempt)
        self._pending = None

    async def drain(self) -> None:
        """Wait until no retry is pending, including retries scheduled by retries."""
        while self._pending is not None:
            handle = self._pending
            await handle.wait()
            if self._pending is handle:
                self._pending = None
