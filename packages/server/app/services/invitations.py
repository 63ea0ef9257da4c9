"""
Invitation service: issuing and accepting organization invitations.

A token is the only proof of an invitation, so it comes from ``secrets`` and is
consumed once. Acceptance creates the membership before flipping
``is_accepted``; a crash between the two leaves the invitation usable again
rather than losing the membership.
"""

from __future__ import annotations

import secrets
import uuid
from datetime import timedelta
from typing import Optional

import structlog

from app.core.audit import record_audit_event
from app.core.auth import Principal, require_principal
from app.core.config import get_settings
from app.core.errors import (
    CreationError,
    ExpiredError,
    NotFoundError,
    PermissionDeniedError,
    TransientUnavailableError,
)
from app.core.results import action_result
from app.core.store import EntityStore, StoreError, StoreUnavailableError, StoreWriteError
from app.models.base import ensure_utc, utcnow
from app.models.invitation import Invitation
from app.models.membership import OrganizationMembership
from app.services.users import ensure_user
from orgtodo_shared.schemas.common import INVITER_ROLES, OrganizationRole
from orgtodo_shared.schemas.invitations import (
    AcceptedInvitation,
    InvitableRole,
    InvitationSummary,
    InviteRequest,
)
from orgtodo_shared.schemas.organizations import MembershipSnapshot

log = structlog.get_logger()
settings = get_settings()

TOKEN_BYTES = 32


def generate_invitation_token() -> str:
    """Cryptographically random, URL-safe invitation token."""
    return secrets.token_urlsafe(TOKEN_BYTES)


async def get_membership(
    subject_id: str, organization_id: uuid.UUID, store: EntityStore
) -> Optional[OrganizationMembership]:
    """The subject's active membership in an organization, if any."""
    try:
        memberships = await store.list(
            OrganizationMembership,
            user_id=subject_id,
            organization_id=organization_id,
            is_active=True,
        )
    except StoreUnavailableError as exc:
        raise TransientUnavailableError(f"Failed to check organization membership: {exc}") from exc
    return memberships[0] if memberships else None


def check_can_invite(inviter_role: str, invited_role: InvitableRole) -> None:
    """Owners and admins may invite; only owners may invite admins."""
    if inviter_role not in {r.value for r in INVITER_ROLES}:
        raise PermissionDeniedError(
            "You don't have permission to invite users to this organization"
        )
    if invited_role == InvitableRole.ADMIN and inviter_role != OrganizationRole.OWNER.value:
        raise PermissionDeniedError("Only organization owners can invite admins")


async def invite_user(
    principal: Optional[Principal],
    req: InviteRequest,
    store: EntityStore,
) -> InvitationSummary:
    """Issue an invitation to join ``req.organization_id``."""
    principal = require_principal(principal)
    inviter = principal.subject_id

    membership = await get_membership(inviter, req.organization_id, store)
    if membership is None:
        raise PermissionDeniedError("You are not a member of this organization")
    check_can_invite(membership.organization_role, req.role)

    token = generate_invitation_token()
    expires_at = utcnow() + timedelta(days=settings.invitation_ttl_days)

    try:
        invitation = await store.create(
            Invitation,
            email=req.email,
            organization_id=req.organization_id,
            invited_role=req.role.value,
            invited_by=inviter,
            token=token,
            expires_at=expires_at,
            is_accepted=False,
        )
    except (StoreWriteError, StoreUnavailableError) as exc:
        raise CreationError(f"Failed to create invitation: {exc}") from exc

    # TODO: deliver the invitation link by email once an outbound mail provider is configured
    log.info(
        "invitation.created",
        invitation_id=str(invitation.id),
        org_id=str(req.organization_id),
        role=req.role.value,
        inviter=inviter,
    )
    await record_audit_event(
        store,
        user_id=inviter,
        action="user_invited",
        entity_type="Invitation",
        entity_id=invitation.id,
        organization_id=req.organization_id,
        details={"email": invitation.email, "role": invitation.invited_role},
    )
    return InvitationSummary.model_validate(invitation)


async def accept_invitation(
    principal: Optional[Principal],
    token: str,
    store: EntityStore,
) -> AcceptedInvitation:
    """Consume an invitation addressed to the principal's verified email."""
    principal = require_principal(principal, need_login_id=True)
    subject = principal.subject_id

    try:
        invitations = await store.list(
            Invitation,
            token=token,
            email=principal.login_id,
            is_accepted=False,
        )
    except StoreUnavailableError as exc:
        raise TransientUnavailableError(f"Failed to look up invitation: {exc}") from exc
    if not invitations:
        raise NotFoundError("Invalid or expired invitation")

    invitation = invitations[0]
    if utcnow() > ensure_utc(invitation.expires_at):
        log.info("invitation.expired", invitation_id=str(invitation.id), subject=subject)
        raise ExpiredError("Invitation has expired")

    await ensure_user(principal, store)

    try:
        membership = await store.create(
            OrganizationMembership,
            user_id=subject,
            organization_id=invitation.organization_id,
            organization_role=invitation.invited_role,
            is_active=True,
            joined_at=utcnow(),
            invited_by=invitation.invited_by,
        )
    except (StoreWriteError, StoreUnavailableError) as exc:
        raise CreationError(f"Failed to create organization membership: {exc}") from exc
    log.info(
        "membership.created",
        membership_id=str(membership.id),
        org_id=str(invitation.organization_id),
        role=membership.organization_role,
    )

    # Membership already exists; a failed status flip must not undo acceptance
    try:
        await store.update(Invitation, invitation.id, is_accepted=True, accepted_at=utcnow())
    except StoreError as exc:
        log.warning("invitation.mark_accepted_failed", invitation_id=str(invitation.id), error=str(exc))

    await record_audit_event(
        store,
        user_id=subject,
        action="invitation_accepted",
        entity_type="Invitation",
        entity_id=invitation.id,
        organization_id=invitation.organization_id,
        details={"membership_id": str(membership.id)},
    )
    return AcceptedInvitation(membership=MembershipSnapshot.model_validate(membership))


async def list_invitations(
    principal: Optional[Principal],
    organization_id: uuid.UUID,
    store: EntityStore,
) -> list[InvitationSummary]:
    """Pending, unexpired invitations of an organization (owners and admins only)."""
    principal = require_principal(principal)
    membership = await get_membership(principal.subject_id, organization_id, store)
    if membership is None or membership.organization_role not in {r.value for r in INVITER_ROLES}:
        raise PermissionDeniedError("You don't have permission to view invitations for this organization")

    try:
        pending = await store.list(Invitation, organization_id=organization_id, is_accepted=False)
    except StoreUnavailableError as exc:
        raise TransientUnavailableError(f"Failed to list invitations: {exc}") from exc

    now = utcnow()
    return [
        InvitationSummary.model_validate(inv)
        for inv in pending
        if ensure_utc(inv.expires_at) > now
    ]


invite_user_action = action_result("Failed to invite user")(invite_user)
accept_invitation_action = action_result("Failed to accept invitation")(accept_invitation)
list_invitations_action = action_result("Failed to list invitations")(list_invitations)
