"""
Onboarding status poller.

Decides whether the signed-in principal still has to create an organization,
and rides out the store's read-after-write staleness right after they did.

States::

    checking ──► ready             (membership found, or not authenticated)
       │   ├──► needs_onboarding  (no membership, ordinary check)
       │   ├──► ready + degraded  (no membership after onboarding, retries spent)
       │   └──► error             (status query kept failing, retries spent)
       └──(retry after attempt × base delay)──┘

The poller owns a single ``OnboardingSession`` value and replaces it on every
transition. Retries go through a single-slot ``RetryScheduler``; a new check
cancels the pending retry and bumps a generation counter so a callback from an
older check can never touch the session.
"""

from __future__ import annotations

import asyncio
import functools
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Awaitable, Callable, Optional

import structlog

from orgtodo_shared.schemas.common import ActionResult

from .config import MAX_RETRY_BUDGET, OnboardingPollConfig
from .metrics import MetricsCollector
from .scheduler import RetryScheduler, SleepFn

log = structlog.get_logger()

StatusFetcher = Callable[[], Awaitable[ActionResult]]
ChangeListener = Callable[["OnboardingSession"], None]


class OnboardingState(str, Enum):
    CHECKING = "checking"
    NEEDS_ONBOARDING = "needs_onboarding"
    READY = "ready"
    ERROR = "error"


class AuthStatus(str, Enum):
    CONFIGURING = "configuring"
    AUTHENTICATED = "authenticated"
    UNAUTHENTICATED = "unauthenticated"


@dataclass(frozen=True)
class OnboardingSession:
    state: OnboardingState = OnboardingState.CHECKING
    needs_onboarding: bool = False
    error: Optional[str] = None
    # ready was forced after retries ran out, not observed
    degraded: bool = False
    just_completed: bool = False
    attempt: int = 0
    completion_attempts: int = 0

    @property
    def is_loading(self) -> bool:
        return self.state == OnboardingState.CHECKING


class OnboardingPoller:
    """Owns one principal's onboarding session and its pending retry."""

    def __init__(
        self,
        fetch_status: StatusFetcher,
        config: OnboardingPollConfig | None = None,
        *,
        sleep: SleepFn = asyncio.sleep,
        metrics: MetricsCollector | None = None,
        on_change: ChangeListener | None = None,
    ):
        self._fetch_status = fetch_status
        self._config = config or OnboardingPollConfig()
        self._scheduler = RetryScheduler(sleep)
        self._metrics = metrics or MetricsCollector()
        self._on_change = on_change
        self._session = OnboardingSession()
        self._generation = 0

    @property
    def session(self) -> OnboardingSession:
        return self._session

    @property
    def metrics(self) -> MetricsCollector:
        return self._metrics

    @property
    def should_show_onboarding(self) -> bool:
        """Offer the onboarding form, unless it just ran or keeps looping."""
        s = self._session
        return (
            s.state == OnboardingState.NEEDS_ONBOARDING
            and not s.just_completed
            and s.completion_attempts < self._config.max_completion_attempts
        )

    def _transition(self, **changes: Any) -> None:
        self._session = replace(self._session, **changes)
        if self._on_change is not None:
            self._on_change(self._session)

    # --- Entry points ---

    async def on_auth_change(
        self, status: AuthStatus | str, subject_id: str | None = None
    ) -> OnboardingSession:
        """React to the identity provider's auth status."""
        status = AuthStatus(status)
        if status == AuthStatus.AUTHENTICATED:
            if not subject_id:
                self._cancel_pending()
                self._transition(
                    state=OnboardingState.ERROR,
                    needs_onboarding=False,
                    error="User not authenticated",
                    degraded=False,
                )
                return self._session
            return await self.check()

        if status == AuthStatus.UNAUTHENTICATED:
            self._cancel_pending()
            self._transition(
                state=OnboardingState.READY,
                needs_onboarding=False,
                error=None,
                degraded=False,
                just_completed=False,
                attempt=0,
                completion_attempts=0,
            )
        return self._session

    async def check(
        self,
        *,
        post_completion: bool = False,
        max_retries: int | None = None,
        wait: bool = True,
    ) -> OnboardingSession:
        """Start a fresh check cycle, superseding any pending retry.

        With ``wait`` the call returns once the cycle settles; otherwise it
        returns after the first query and retries continue in the background.
        """
        if max_retries is None:
            max_retries = (
                self._config.post_completion_max_retries
                if post_completion
                else self._config.max_retries
            )
        max_retries = max(0, min(max_retries, MAX_RETRY_BUDGET))

        self._cancel_pending()
        generation = self._generation
        self._transition(state=OnboardingState.CHECKING, error=None, degraded=False, attempt=0)
        log.info("poller.checking", post_completion=post_completion, max_retries=max_retries)

        await self._attempt(generation, 0, max_retries, post_completion)
        if wait:
            await self._scheduler.drain()
        return self._session

    async def complete_onboarding(self, *, wait: bool = True) -> OnboardingSession:
        """The onboarding transaction just succeeded: re-check until it shows up."""
        self._transition(just_completed=True)
        return await self.check(
            post_completion=True,
            max_retries=self._config.post_completion_max_retries,
            wait=wait,
        )

    async def wait(self) -> OnboardingSession:
        """Wait for any pending retries to finish."""
        await self._scheduler.drain()
        return self._session

    async def close(self) -> None:
        """Tear down: cancel the pending retry and ignore in-flight results."""
        self._cancel_pending()

    # --- Internals ---

    def _cancel_pending(self) -> None:
        self._scheduler.cancel()
        self._generation += 1

    def _schedule_retry(
        self, generation: int, attempt: int, max_retries: int, post_completion: bool
    ) -> None:
        next_attempt = attempt + 1
        delay_ms = next_attempt * self._config.retry_base_delay_ms
        self._metrics.inc("onboarding_retries_total")
        self._transition(attempt=next_attempt)
        log.info("poller.retry_scheduled", attempt=next_attempt, delay_ms=delay_ms)
        self._scheduler.schedule(
            next_attempt,
            delay_ms,
            functools.partial(self._attempt, generation, next_attempt, max_retries, post_completion),
        )

    async def _attempt(
        self, generation: int, attempt: int, max_retries: int, post_completion: bool
    ) -> None:
        if generation != self._generation:
            return

        self._metrics.inc("onboarding_checks_total")
        try:
            result = await self._fetch_status()
        except Exception as exc:
            log.warning("poller.fetch_failed", attempt=attempt, error=str(exc))
            result = ActionResult.fail(str(exc) or "Failed to check onboarding status")

        # A newer check or teardown happened while we were waiting
        if generation != self._generation:
            return

        if not result.success:
            self._handle_failure(
                generation, attempt, max_retries, post_completion,
                result.error or "Failed to check onboarding status",
            )
            return

        data = result.data or {}
        if data.get("has_organization"):
            self._handle_onboarded()
            return

        if not (post_completion or self._session.just_completed):
            log.info("poller.needs_onboarding", has_user_record=data.get("has_user_record"))
            self._transition(state=OnboardingState.NEEDS_ONBOARDING, needs_onboarding=True, error=None)
            return

        if attempt < max_retries:
            self._schedule_retry(generation, attempt, max_retries, post_completion)
            return

        # Fail open so the UI cannot loop back into onboarding forever
        log.warning("poller.degraded", attempts=attempt + 1)
        self._metrics.inc("onboarding_degraded_total")
        self._transition(
            state=OnboardingState.READY,
            needs_onboarding=False,
            error=None,
            degraded=True,
            just_completed=False,
            completion_attempts=self._session.completion_attempts + 1,
        )

    def _handle_onboarded(self) -> None:
        changes: dict[str, Any] = dict(
            state=OnboardingState.READY,
            needs_onboarding=False,
            error=None,
            degraded=False,
            attempt=0,
        )
        if self._session.just_completed:
            changes.update(just_completed=False, completion_attempts=0)
        log.info("poller.ready")
        self._transition(**changes)

    def _handle_failure(
        self,
        generation: int,
        attempt: int,
        max_retries: int,
        post_completion: bool,
        message: str,
    ) -> None:
        if attempt < max_retries:
            self._schedule_retry(generation, attempt, max_retries, post_completion)
            return
        log.error("poller.error", attempts=attempt + 1, error=message)
        self._metrics.inc("onboarding_errors_total")
        self._transition(
            state=OnboardingState.ERROR, needs_onboarding=False, error=message, degraded=False
        )
