"""
Onboarding API endpoints.

POST /api/v1/onboarding         Create the caller's first organization
GET  /api/v1/onboarding/status  Does the caller have a membership yet?

Both return the ActionResult envelope; failures never surface as HTTP errors.
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends

from app.core.auth import Principal, get_current_principal
from app.core.store import EntityStore, get_store
from app.services import onboarding as onboarding_service
from orgtodo_shared.schemas.common import ActionResult
from orgtodo_shared.schemas.onboarding import OnboardingRequest

router = APIRouter()


@router.post("", response_model=ActionResult)
async def create_user_organization(
    body: OnboardingRequest,
    principal: Optional[Principal] = Depends(get_current_principal),
    store: EntityStore = Depends(get_store),
):
    """Create an organization, user record, owner membership and profile."""
    return await onboarding_service.create_user_organization_action(principal, body, store)


@router.get("/status", response_model=ActionResult)
async def check_onboarding_status(
    principal: Optional[Principal] = Depends(get_current_principal),
    store: EntityStore = Depends(get_store),
):
    """Report membership and user-record existence for the caller."""
    return await onboarding_service.check_onboarding_status_action(principal, store)
