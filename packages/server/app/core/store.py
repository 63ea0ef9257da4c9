"""
Entity store: record-oriented create/get/list/update over SQLModel tables.

Every call is its own unit of work (own session, own commit), the way a remote
data API behaves. There are no cross-entity transactions and no retries here;
callers decide what a failed call means for their workflow.
"""

from __future__ import annotations

import uuid
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Optional, TypeVar

import structlog
from sqlalchemy.exc import DataError, DBAPIError, IntegrityError, InterfaceError, OperationalError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlmodel import SQLModel, select

from app.core.database import async_session_factory, get_session_context

log = structlog.get_logger()

ModelT = TypeVar("ModelT", bound=SQLModel)


class StoreError(Exception):
    """Base for entity store failures."""


class StoreWriteError(StoreError):
    """The store rejected a write (constraint violation, bad data, missing record)."""


class StoreUnavailableError(StoreError):
    """The store could not be reached or failed mid-operation."""


class EntityStore:
    """Async CRUD over SQLModel tables with equality filters."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession] = async_session_factory):
        self._session_factory = session_factory

    @asynccontextmanager
    async def _unit_of_work(self, op: str, model: type[SQLModel]) -> AsyncIterator[AsyncSession]:
        try:
            async with get_session_context(self._session_factory) as session:
                yield session
        except (IntegrityError, DataError) as exc:
            log.warning("store.write_rejected", op=op, model=model.__name__, error=str(exc.orig))
            raise StoreWriteError(f"{model.__name__} {op} rejected: {exc.orig}") from exc
        except (OperationalError, InterfaceError, DBAPIError, OSError) as exc:
            log.warning("store.unavailable", op=op, model=model.__name__, error=str(exc))
            raise StoreUnavailableError(f"{model.__name__} {op} failed: {exc}") from exc

    async def create(self, model: type[ModelT], **fields: Any) -> ModelT:
        try:
            record = model(**fields)
        except (TypeError, ValueError) as exc:
            raise StoreWriteError(f"{model.__name__} create rejected: {exc}") from exc

        async with self._unit_of_work("create", model) as session:
            session.add(record)
            await session.flush()
        return record

    async def get(self, model: type[ModelT], record_id: uuid.UUID) -> Optional[ModelT]:
        async with self._unit_of_work("get", model) as session:
            return await session.get(model, record_id)

    async def list(self, model: type[ModelT], **filters: Any) -> list[ModelT]:
        """List records matching every ``field=value`` filter, oldest first."""
        stmt = select(model)
        for name, value in filters.items():
            column = getattr(model, name, None)
            if column is None:
                raise ValueError(f"Unknown filter field '{name}' for {model.__name__}")
            stmt = stmt.where(column == value)
        if hasattr(model, "created_at"):
            stmt = stmt.order_by(model.created_at)

        async with self._unit_of_work("list", model) as session:
            result = await session.execute(stmt)
            return list(result.scalars().all())

    async def update(self, model: type[ModelT], record_id: uuid.UUID, **fields: Any) -> ModelT:
        async with self._unit_of_work("update", model) as session:
            record = await session.get(model, record_id)
            if record is None:
                raise StoreWriteError(f"{model.__name__} {record_id} not found")
            for name, value in fields.items():
                setattr(record, name, value)
            session.add(record)
            await session.flush()
        return record


_default_store: Optional[EntityStore] = None


def get_store() -> EntityStore:
    """FastAPI dependency for the process-wide entity store."""
    global _default_store
    if _default_store is None:
        _default_store = EntityStore()
    return _default_store
