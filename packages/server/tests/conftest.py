"""
Shared fixtures: an in-memory SQLite store per test, the app wired to it,
and helpers for bearer tokens and misbehaving stores.
"""

from __future__ import annotations

from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.core.auth import Principal, create_jwt
from app.core.database import init_db
from app.core.store import EntityStore, StoreUnavailableError, StoreWriteError, get_store
from app.main import create_app
from app.models.membership import OrganizationMembership


class StaleReadStore(EntityStore):
    """Hides memberships from the first ``stale_reads`` membership listings.

    Models a store whose reads lag behind its writes.
    """

    def __init__(self, session_factory, stale_reads: int):
        super().__init__(session_factory)
        self.stale_reads = stale_reads
        self.membership_reads = 0

    async def list(self, model, **filters: Any):
        records = await super().list(model, **filters)
        if model is OrganizationMembership:
            self.membership_reads += 1
            if self.membership_reads <= self.stale_reads:
                return []
        return records


class FailingStore(EntityStore):
    """Fails selected operations on selected models."""

    def __init__(self, session_factory):
        super().__init__(session_factory)
        self.fail_create: dict[type, Exception] = {}
        self.fail_list: dict[type, Exception] = {}
        self.fail_update: dict[type, Exception] = {}

    async def create(self, model, **fields: Any):
        if model in self.fail_create:
            raise self.fail_create[model]
        return await super().create(model, **fields)

    async def list(self, model, **filters: Any):
        if model in self.fail_list:
            raise self.fail_list[model]
        return await super().list(model, **filters)

    async def update(self, model, record_id, **fields: Any):
        if model in self.fail_update:
            raise self.fail_update[model]
        return await super().update(model, record_id, **fields)


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
def store(session_factory) -> EntityStore:
    return EntityStore(session_factory)


@pytest.fixture
def failing_store(session_factory) -> FailingStore:
    return FailingStore(session_factory)


@pytest.fixture
def make_stale_store(session_factory):
    def _make(stale_reads: int) -> StaleReadStore:
        return StaleReadStore(session_factory, stale_reads)
    return _make


@pytest.fixture
def principal() -> Principal:
    return Principal(subject_id="u1", login_id="u1@x.com")


@pytest.fixture
def write_error() -> StoreWriteError:
    return StoreWriteError("rejected")


@pytest.fixture
def unavailable_error() -> StoreUnavailableError:
    return StoreUnavailableError("connection reset")


@pytest.fixture
def app(store):
    app = create_app()
    app.dependency_overrides[get_store] = lambda: store
    return app


@pytest.fixture
async def client(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture
def auth_headers():
    def _headers(subject: str = "u1", email: str | None = "u1@x.com") -> dict[str, str]:
        return {"Authorization": f"Bearer {create_jwt(subject, email)}"}
    return _headers
