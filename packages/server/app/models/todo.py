"""Todo model (organization-scoped)."""

from datetime import datetime
from typing import List, Optional
import uuid

import sqlalchemy as sa
from sqlmodel import Field, SQLModel

from .base import JSONType, TimestampMixin, UUIDMixin


class Todo(UUIDMixin, TimestampMixin, SQLModel, table=True):
    __tablename__ = "todos"

    content: str = Field(nullable=False)
    done: bool = Field(default=False, nullable=False)
    priority: str = Field(default="medium", nullable=False)  # low | medium | high
    organization_id: uuid.UUID = Field(foreign_key="organizations.id", nullable=False, index=True)
    user_id: str = Field(nullable=False, index=True)  # creator subject id
    assigned_to: Optional[str] = None
    due_date: Optional[datetime] = Field(default=None, sa_type=sa.DateTime(timezone=True))
    tags: List[str] = Field(default_factory=list, sa_type=JSONType, nullable=False)
