"""
Organization, user, membership and profile snapshots shared between server and client.

Snapshots are plain read models built from store records (``from_attributes``)
so that nothing ORM-bound crosses the action boundary.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from .common import OrganizationRole, SystemRole


# ---------------------------------------------------------------------------
# Organization settings
# ---------------------------------------------------------------------------

class OrgSettings(BaseModel):
    """Organization-level settings blob. All fields optional with defaults."""

    default_todo_priority: str = Field(
        default="medium",
        pattern=r"^(low|medium|high)$",
        description="Priority given to new todos when none is supplied",
    )


# ---------------------------------------------------------------------------
# Record snapshots
# ---------------------------------------------------------------------------

class OrganizationSnapshot(BaseModel):
    id: uuid.UUID
    name: str
    description: Optional[str] = None
    domain: Optional[str] = None
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class UserSnapshot(BaseModel):
    id: uuid.UUID
    cognito_user_id: str
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    system_role: Optional[SystemRole] = None  # assigned out-of-band only
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class MembershipSnapshot(BaseModel):
    id: uuid.UUID
    user_id: str
    organization_id: uuid.UUID
    organization_role: OrganizationRole
    is_active: bool = True
    joined_at: Optional[datetime] = None
    invited_by: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class ProfileSnapshot(BaseModel):
    id: uuid.UUID
    user_id: str
    avatar: Optional[str] = None
    bio: Optional[str] = None
    phone_number: Optional[str] = None
    timezone: str = "UTC"
    language: str = "en"
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


# ---------------------------------------------------------------------------
# User organization info
# ---------------------------------------------------------------------------

class IdentityInfo(BaseModel):
    """What the identity provider says about the caller."""
    user_id: str
    email: Optional[str] = None


class OrganizationMembershipInfo(BaseModel):
    membership: MembershipSnapshot
    organization: OrganizationSnapshot


class UserOrganizationInfo(BaseModel):
    user: Optional[UserSnapshot] = None
    identity: IdentityInfo
    profile: Optional[ProfileSnapshot] = None
    organizations: list[OrganizationMembershipInfo] = Field(default_factory=list)
