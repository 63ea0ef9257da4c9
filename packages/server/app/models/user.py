"""User and UserProfile models."""

from datetime import datetime
from typing import Optional

import sqlalchemy as sa
from sqlmodel import Field, SQLModel

from .base import JSONType, TimestampMixin, UUIDMixin


class User(UUIDMixin, TimestampMixin, SQLModel, table=True):
    __tablename__ = "users"

    cognito_user_id: str = Field(nullable=False, index=True)  # identity-provider subject
    email: str = Field(nullable=False, index=True)
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    system_role: Optional[str] = None  # system_owner | system_admin | system_user, set out-of-band
    is_active: bool = Field(default=True, nullable=False)
    last_login_at: Optional[datetime] = Field(default=None, sa_type=sa.DateTime(timezone=True))


class UserProfile(UUIDMixin, TimestampMixin, SQLModel, table=True):
    __tablename__ = "user_profiles"

    user_id: str = Field(nullable=False, index=True)  # identity-provider subject
    avatar: Optional[str] = None
    bio: Optional[str] = None
    phone_number: Optional[str] = None
    timezone: str = Field(default="UTC", nullable=False)
    language: str = Field(default="en", nullable=False)
    notification_preferences: dict = Field(default_factory=dict, sa_type=JSONType, nullable=False)
    social_links: dict = Field(default_factory=dict, sa_type=JSONType, nullable=False)
