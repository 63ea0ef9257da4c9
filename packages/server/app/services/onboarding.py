"""
Onboarding service: first-organization creation and onboarding status.

The transaction is four store calls in fixed order:

1. Organization
2. User (reused if the subject already has one)
3. OrganizationMembership with role ``org_owner``
4. UserProfile (best-effort)

There is no rollback. A failure after step 1 leaves an orphan organization,
and running the transaction twice creates a second organization and a second
membership. Callers only start it when the subject has no membership.
"""

from __future__ import annotations

from typing import Optional

import structlog

from app.core.audit import record_audit_event
from app.core.auth import Principal, require_principal
from app.core.errors import CreationError, TransientUnavailableError
from app.core.results import action_result
from app.core.store import EntityStore, StoreError, StoreUnavailableError, StoreWriteError
from app.models.base import utcnow
from app.models.membership import OrganizationMembership
from app.models.organization import Organization
from app.models.user import User, UserProfile
from app.services.users import ensure_user, find_user
from orgtodo_shared.schemas.common import OrganizationRole
from orgtodo_shared.schemas.onboarding import (
    OnboardingRequest,
    OnboardingSnapshot,
    OnboardingStatus,
)
from orgtodo_shared.schemas.organizations import (
    MembershipSnapshot,
    OrganizationSnapshot,
    OrgSettings,
    ProfileSnapshot,
    UserSnapshot,
)

log = structlog.get_logger()

DEFAULT_TIMEZONE = "UTC"
DEFAULT_LANGUAGE = "en"


async def _ensure_profile(subject_id: str, store: EntityStore) -> Optional[UserProfile]:
    """Reuse or create the subject's profile. Failures are logged, never raised."""
    try:
        existing = await store.list(UserProfile, user_id=subject_id)
        if existing:
            return existing[0]
        return await store.create(
            UserProfile,
            user_id=subject_id,
            timezone=DEFAULT_TIMEZONE,
            language=DEFAULT_LANGUAGE,
        )
    except StoreError as exc:
        log.warning("onboarding.profile_failed", subject=subject_id, error=str(exc))
        return None


async def create_user_organization(
    principal: Optional[Principal],
    req: OnboardingRequest,
    store: EntityStore,
) -> OnboardingSnapshot:
    """Create an organization owned by the principal. Not idempotent."""
    principal = require_principal(principal, need_login_id=True)
    subject = principal.subject_id
    log.info("onboarding.started", subject=subject, organization_name=req.organization_name)

    # 1. Organization
    try:
        org = await store.create(
            Organization,
            name=req.organization_name,
            description=f"Organization for {req.organization_name}",
            is_active=True,
            settings=OrgSettings().model_dump(),
        )
    except (StoreWriteError, StoreUnavailableError) as exc:
        raise CreationError(f"Failed to create organization: {exc}") from exc
    log.info("org.created", org_id=str(org.id), subject=subject)

    # 2. User record
    user: User = await ensure_user(
        principal, store, first_name=req.first_name, last_name=req.last_name
    )

    # 3. Owner membership
    try:
        membership = await store.create(
            OrganizationMembership,
            user_id=subject,
            organization_id=org.id,
            organization_role=OrganizationRole.OWNER.value,
            is_active=True,
            joined_at=utcnow(),
        )
    except (StoreWriteError, StoreUnavailableError) as exc:
        log.error("onboarding.membership_failed", org_id=str(org.id), subject=subject)
        raise CreationError(f"Failed to create organization membership: {exc}") from exc
    log.info("membership.created", membership_id=str(membership.id), org_id=str(org.id), role=membership.organization_role)

    # 4. Profile (best-effort)
    profile = await _ensure_profile(subject, store)

    await record_audit_event(
        store,
        user_id=subject,
        action="organization_created",
        entity_type="Organization",
        entity_id=org.id,
        organization_id=org.id,
        details={"name": org.name},
    )

    log.info("onboarding.completed", subject=subject, org_id=str(org.id), profile=profile is not None)
    return OnboardingSnapshot(
        organization=OrganizationSnapshot.model_validate(org),
        user=UserSnapshot.model_validate(user),
        membership=MembershipSnapshot.model_validate(membership),
        profile=ProfileSnapshot.model_validate(profile) if profile else None,
    )


async def check_onboarding_status(
    principal: Optional[Principal], store: EntityStore
) -> OnboardingStatus:
    """Report whether the principal is onboarded (has at least one membership)."""
    principal = require_principal(principal)
    subject = principal.subject_id

    try:
        memberships = await store.list(OrganizationMembership, user_id=subject)
    except StoreUnavailableError as exc:
        raise TransientUnavailableError(f"Failed to check onboarding status: {exc}") from exc
    user = await find_user(subject, store)

    log.debug(
        "onboarding.status",
        subject=subject,
        memberships=len(memberships),
        has_user_record=user is not None,
    )
    return OnboardingStatus(
        has_organization=len(memberships) > 0,
        has_user_record=user is not None,
        memberships=[MembershipSnapshot.model_validate(m) for m in memberships],
        user_record=UserSnapshot.model_validate(user) if user else None,
    )


create_user_organization_action = action_result("Failed to complete onboarding")(
    create_user_organization
)
check_onboarding_status_action = action_result("Failed to check onboarding status")(
    check_onboarding_status
)
