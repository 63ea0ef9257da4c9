"""User-Organization membership."""

from datetime import datetime
from typing import Optional
import uuid

import sqlalchemy as sa
from sqlmodel import Field, SQLModel

from .base import JSONType, TimestampMixin, UUIDMixin, utcnow


class OrganizationMembership(UUIDMixin, TimestampMixin, SQLModel, table=True):
    __tablename__ = "organization_memberships"

    user_id: str = Field(nullable=False, index=True)  # identity-provider subject
    organization_id: uuid.UUID = Field(foreign_key="organizations.id", nullable=False, index=True)
    organization_role: str = Field(nullable=False, default="org_member")  # org_owner | org_admin | org_member
    permissions: dict = Field(default_factory=dict, sa_type=JSONType, nullable=False)
    is_active: bool = Field(default=True, nullable=False)
    joined_at: datetime = Field(
        default_factory=utcnow,
        nullable=False,
        sa_type=sa.DateTime(timezone=True),
    )
    invited_by: Optional[str] = None  # subject id of the inviter
