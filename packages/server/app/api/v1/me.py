"""
GET /api/v1/me: the caller's user record, profile and organizations.
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends

from app.core.auth import Principal, get_current_principal
from app.core.store import EntityStore, get_store
from app.services import users as user_service
from orgtodo_shared.schemas.common import ActionResult

router = APIRouter()


@router.get("", response_model=ActionResult)
async def get_me(
    principal: Optional[Principal] = Depends(get_current_principal),
    store: EntityStore = Depends(get_store),
):
    return await user_service.get_user_organization_info_action(principal, store)
