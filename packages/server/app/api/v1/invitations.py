"""
Invitation API endpoints.

POST /api/v1/invitations                           Invite an email to an org
POST /api/v1/invitations/accept                    Accept an invitation by token
GET  /api/v1/organizations/{organization_id}/invitations Pending invitations
"""

from __future__ import annotations

import uuid
from typing import Optional

from fastapi import APIRouter, Depends

from app.core.auth import Principal, get_current_principal
from app.core.store import EntityStore, get_store
from app.services import invitations as invitation_service
from orgtodo_shared.schemas.common import ActionResult
from orgtodo_shared.schemas.invitations import AcceptInvitationRequest, InviteRequest

router = APIRouter()
router_org_scoped = APIRouter()


@router.post("", response_model=ActionResult)
async def invite_user_to_organization(
    body: InviteRequest,
    principal: Optional[Principal] = Depends(get_current_principal),
    store: EntityStore = Depends(get_store),
):
    """Issue a 7-day invitation (owners/admins; admins may only invite members)."""
    return await invitation_service.invite_user_action(principal, body, store)


@router.post("/accept", response_model=ActionResult)
async def accept_invitation(
    body: AcceptInvitationRequest,
    principal: Optional[Principal] = Depends(get_current_principal),
    store: EntityStore = Depends(get_store),
):
    """Join the invitation's organization with the invited role."""
    return await invitation_service.accept_invitation_action(principal, body.token, store)


@router_org_scoped.get("/invitations", response_model=ActionResult)
async def list_invitations(
    organization_id: uuid.UUID,
    principal: Optional[Principal] = Depends(get_current_principal),
    store: EntityStore = Depends(get_store),
):
    return await invitation_service.list_invitations_action(principal, organization_id, store)
