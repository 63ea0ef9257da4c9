"""Audit log model (append-only)."""

from datetime import datetime
from typing import Optional
import uuid

import sqlalchemy as sa
from sqlmodel import Field, SQLModel

from .base import JSONType, UUIDMixin, utcnow


class AuditLog(UUIDMixin, SQLModel, table=True):
    __tablename__ = "audit_logs"

    user_id: str = Field(nullable=False, index=True)  # actor subject id
    organization_id: Optional[uuid.UUID] = Field(default=None, foreign_key="organizations.id", index=True)
    action: str = Field(nullable=False)  # e.g. organization_created, user_invited
    entity_type: str = Field(nullable=False)
    entity_id: str = Field(nullable=False)
    details: dict = Field(default_factory=dict, sa_type=JSONType, nullable=False)
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    timestamp: datetime = Field(
        default_factory=utcnow,
        nullable=False,
        sa_type=sa.DateTime(timezone=True),
    )
