"""Onboarding request and response schemas."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field, field_validator

from .organizations import (
    MembershipSnapshot,
    OrganizationSnapshot,
    ProfileSnapshot,
    UserSnapshot,
)


class OnboardingRequest(BaseModel):
    """Data the principal submits to create their first organization."""
    organization_name: str = Field(min_length=1, max_length=200)
    first_name: Optional[str] = Field(default=None, max_length=100)
    last_name: Optional[str] = Field(default=None, max_length=100)

    @field_validator("organization_name")
    @classmethod
    def _strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Organization name is required")
        return v


class OnboardingSnapshot(BaseModel):
    """The records created (or attempted) by one onboarding run."""
    organization: OrganizationSnapshot
    user: UserSnapshot
    membership: MembershipSnapshot
    profile: Optional[ProfileSnapshot] = None  # profile creation is best-effort


class OnboardingStatus(BaseModel):
    has_organization: bool
    has_user_record: bool
    memberships: list[MembershipSnapshot] = Field(default_factory=list)
    user_record: Optional[UserSnapshot] = None
