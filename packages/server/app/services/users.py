"""
User service: user record reuse and the caller's organization overview.
"""

from __future__ import annotations

from typing import Optional

import structlog

from app.core.auth import Principal, require_principal
from app.core.errors import CreationError, TransientUnavailableError
from app.core.results import action_result
from app.core.store import EntityStore, StoreUnavailableError, StoreWriteError
from app.models.membership import OrganizationMembership
from app.models.organization import Organization
from app.models.user import User, UserProfile
from orgtodo_shared.schemas.organizations import (
    IdentityInfo,
    MembershipSnapshot,
    OrganizationMembershipInfo,
    OrganizationSnapshot,
    ProfileSnapshot,
    UserOrganizationInfo,
    UserSnapshot,
)

log = structlog.get_logger()


async def find_user(subject_id: str, store: EntityStore) -> Optional[User]:
    """The user record mapped to an identity-provider subject, if any."""
    try:
        users = await store.list(User, cognito_user_id=subject_id)
    except StoreUnavailableError as exc:
        raise TransientUnavailableError(f"Failed to look up user record: {exc}") from exc
    return users[0] if users else None


async def ensure_user(
    principal: Principal,
    store: EntityStore,
    *,
    first_name: Optional[str] = None,
    last_name: Optional[str] = None,
) -> User:
    """Reuse the subject's user record or create it.

    Reuse keeps a half-finished onboarding or a second invitation from failing
    on the record a previous attempt already wrote.
    """
    existing = await find_user(principal.subject_id, store)
    if existing is not None:
        log.info("user.reused", user_id=str(existing.id), subject=principal.subject_id)
        return existing

    try:
        user = await store.create(
            User,
            cognito_user_id=principal.subject_id,
            email=principal.login_id,
            first_name=first_name or "",
            last_name=last_name or "",
            is_active=True,
        )
    except (StoreWriteError, StoreUnavailableError) as exc:
        raise CreationError(f"Failed to create user record: {exc}") from exc

    log.info("user.created", user_id=str(user.id), subject=principal.subject_id)
    return user


async def get_user_organization_info(
    principal: Optional[Principal], store: EntityStore
) -> UserOrganizationInfo:
    """The caller's user record, profile and active organizations."""
    principal = require_principal(principal)
    subject = principal.subject_id

    try:
        user = await find_user(subject, store)
        profile = None
        if user is not None:
            profiles = await store.list(UserProfile, user_id=subject)
            profile = profiles[0] if profiles else None

        memberships = await store.list(OrganizationMembership, user_id=subject, is_active=True)
        organizations = []
        for membership in memberships:
            org = await store.get(Organization, membership.organization_id)
            # Memberships pointing at missing or deactivated orgs are hidden
            if org is None or not org.is_active:
                continue
            organizations.append(
                OrganizationMembershipInfo(
                    membership=MembershipSnapshot.model_validate(membership),
                    organization=OrganizationSnapshot.model_validate(org),
                )
            )
    except StoreUnavailableError as exc:
        raise TransientUnavailableError(f"Failed to fetch user information: {exc}") from exc

    return UserOrganizationInfo(
        user=UserSnapshot.model_validate(user) if user else None,
        identity=IdentityInfo(user_id=subject, email=principal.login_id),
        profile=ProfileSnapshot.model_validate(profile) if profile else None,
        organizations=organizations,
    )


get_user_organization_info_action = action_result("Failed to fetch user information")(
    get_user_organization_info
)
