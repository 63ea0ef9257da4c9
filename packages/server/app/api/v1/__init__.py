"""
API v1 Router

Every action endpoint answers with the ActionResult envelope.
"""

from fastapi import APIRouter
from . import invitations, me, onboarding, todos

router = APIRouter()

router.include_router(onboarding.router, prefix="/onboarding", tags=["Onboarding"])
router.include_router(invitations.router, prefix="/invitations", tags=["Invitations"])
router.include_router(
    invitations.router_org_scoped,
    prefix="/organizations/{organization_id}",
    tags=["Invitations"],
)
router.include_router(todos.router, prefix="/todos", tags=["Todos"])
router.include_router(me.router, prefix="/me", tags=["Users"])


@router.get("/", tags=["API"])
async def api_root():
    """API root: returns version and available endpoints."""
    return {
        "api": "v1",
        "version": "0.1.0",
        "endpoints": [
            "/onboarding",
            "/onboarding/status",
            "/invitations",
            "/invitations/accept",
            "/organizations/{organization_id}/invitations",
            "/todos",
            "/me",
        ],
    }
