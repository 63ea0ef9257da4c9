"""Invitation request/response schemas."""

from __future__ import annotations

import uuid
from datetime import datetime
from enum import Enum
from typing import Annotated, Optional

from email_validator import EmailNotValidError, validate_email
from pydantic import AfterValidator, BaseModel, Field

from .organizations import MembershipSnapshot


class InvitableRole(str, Enum):
    """Roles an invitation may grant. Ownership is never handed out by invite."""
    ADMIN = "org_admin"
    MEMBER = "org_member"


def _check_email(value: str) -> str:
    """Reject malformed addresses but keep the text exactly as submitted.

    Acceptance matches the invitee's verified login email byte-for-byte, so the
    stored address must not be normalized.
    """
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError as exc:
        raise ValueError(str(exc)) from exc
    return value


SubmittedEmail = Annotated[str, AfterValidator(_check_email)]


class InviteRequest(BaseModel):
    email: SubmittedEmail
    organization_id: uuid.UUID
    role: InvitableRole


class AcceptInvitationRequest(BaseModel):
    token: str = Field(min_length=1, max_length=512)


class InvitationSummary(BaseModel):
    id: uuid.UUID
    email: str
    organization_id: uuid.UUID
    invited_role: str
    invited_by: str
    token: str
    expires_at: datetime
    is_accepted: bool = False
    accepted_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class AcceptedInvitation(BaseModel):
    membership: MembershipSnapshot
