"""
Shared fixtures for client tests: a recording sleep and scripted status fetchers.
"""

from __future__ import annotations

import asyncio
from typing import Any

import pytest

from orgtodo_client.config import OnboardingPollConfig
from orgtodo_shared.schemas.common import ActionResult


class FakeSleep:
    """Records requested delays and returns immediately."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)
        await asyncio.sleep(0)


class BlockingSleep:
    """Never wakes up on its own; retries stay pending until cancelled."""

    def __init__(self) -> None:
        self.delays: list[float] = []
        self._never = asyncio.Event()

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)
        await self._never.wait()


class ScriptedStatus:
    """Status fetcher replaying a script; the last entry repeats forever."""

    def __init__(self, *responses: Any) -> None:
        self.responses = list(responses)
        self.calls = 0

    async def __call__(self) -> ActionResult:
        self.calls += 1
        response = self.responses.pop(0) if len(self.responses) > 1 else self.responses[0]
        if isinstance(response, Exception):
            raise response
        return response


def status(has_organization: bool) -> ActionResult:
    return ActionResult.ok(
        {
            "has_organization": has_organization,
            "has_user_record": has_organization,
            "memberships": [],
            "user_record": None,
        }
    )


@pytest.fixture
def fake_sleep() -> FakeSleep:
    return FakeSleep()


@pytest.fixture
def blocking_sleep() -> BlockingSleep:
    return BlockingSleep()


@pytest.fixture
def poll_config() -> OnboardingPollConfig:
    return OnboardingPollConfig(max_retries=3, post_completion_max_retries=3, retry_base_delay_ms=1000)


@pytest.fixture
def onboarded():
    return status(True)


@pytest.fixture
def not_onboarded():
    return status(False)


@pytest.fixture
def scripted():
    return ScriptedStatus
