"""Organization model."""

from typing import Optional

from sqlmodel import Field, SQLModel

from .base import JSONType, TimestampMixin, UUIDMixin


class Organization(UUIDMixin, TimestampMixin, SQLModel, table=True):
    __tablename__ = "organizations"

    name: str = Field(nullable=False, index=True)
    description: Optional[str] = None
    domain: Optional[str] = None  # for email-based auto-assignment
    is_active: bool = Field(default=True, nullable=False)
    settings: dict = Field(default_factory=dict, sa_type=JSONType, nullable=False)
