"""Invitation model."""

from datetime import datetime
from typing import Optional
import uuid

import sqlalchemy as sa
from sqlmodel import Field, SQLModel

from .base import UUIDMixin, utcnow


class Invitation(UUIDMixin, SQLModel, table=True):
    __tablename__ = "invitations"

    email: str = Field(nullable=False, index=True)
    organization_id: uuid.UUID = Field(foreign_key="organizations.id", nullable=False, index=True)
    invited_role: str = Field(nullable=False, default="org_member")
    invited_by: str = Field(nullable=False)  # subject id of the inviter
    token: str = Field(unique=True, nullable=False, index=True)
    expires_at: datetime = Field(nullable=False, sa_type=sa.DateTime(timezone=True))
    is_accepted: bool = Field(default=False, nullable=False)
    accepted_at: Optional[datetime] = Field(default=None, sa_type=sa.DateTime(timezone=True))
    created_at: datetime = Field(
        default_factory=utcnow,
        nullable=False,
        sa_type=sa.DateTime(timezone=True),
    )
