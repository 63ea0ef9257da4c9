"""
Tests for the caller's user and organization overview.
"""

from __future__ import annotations

import pytest

from app.core.auth import Principal
from app.core.errors import CreationError
from app.models.organization import Organization
from app.models.user import User
from app.services.onboarding import create_user_organization
from app.services.users import ensure_user, find_user, get_user_organization_info_action
from orgtodo_shared.schemas.onboarding import OnboardingRequest


class TestEnsureUser:

    @pytest.mark.asyncio
    async def test_creates_once(self, store, principal):
        first = await ensure_user(principal, store, first_name="Ada")
        second = await ensure_user(principal, store, first_name="Other")
        assert first.id == second.id
        assert second.first_name == "Ada"
        assert (await find_user("u1", store)).id == first.id

    @pytest.mark.asyncio
    async def test_write_failure_is_creation_error(self, failing_store, principal, write_error):
        failing_store.fail_create[User] = write_error
        with pytest.raises(CreationError):
            await ensure_user(principal, failing_store)

    @pytest.mark.asyncio
    async def test_find_missing(self, store):
        assert await find_user("nobody", store) is None


class TestUserOrganizationInfo:

    @pytest.mark.asyncio
    async def test_before_onboarding(self, store, principal):
        result = await get_user_organization_info_action(principal, store)
        assert result.success is True
        assert result.data["user"] is None
        assert result.data["identity"] == {"user_id": "u1", "email": "u1@x.com"}
        assert result.data["organizations"] == []

    @pytest.mark.asyncio
    async def test_after_onboarding(self, store, principal):
        snapshot = await create_user_organization(
            principal, OnboardingRequest(organization_name="Acme"), store
        )
        result = await get_user_organization_info_action(principal, store)
        data = result.data
        assert data["user"]["cognito_user_id"] == "u1"
        assert data["profile"]["timezone"] == "UTC"
        [entry] = data["organizations"]
        assert entry["organization"]["id"] == str(snapshot.organization.id)
        assert entry["membership"]["organization_role"] == "org_owner"

    @pytest.mark.asyncio
    async def test_inactive_organization_hidden(self, store, principal):
        snapshot = await create_user_organization(
            principal, OnboardingRequest(organization_name="Acme"), store
        )
        await store.update(Organization, snapshot.organization.id, is_active=False)
        result = await get_user_organization_info_action(principal, store)
        assert result.data["organizations"] == []

    @pytest.mark.asyncio
    async def test_unauthenticated(self, store):
        result = await get_user_organization_info_action(None, store)
        assert result.error == "User not authenticated"

    @pytest.mark.asyncio
    async def test_api(self, client, auth_headers):
        resp = await client.get("/api/v1/me", headers=auth_headers("u9", "u9@x.com"))
        assert resp.status_code == 200
        assert resp.json()["data"]["identity"]["user_id"] == "u9"

    @pytest.mark.asyncio
    async def test_identity_without_email(self, store):
        result = await get_user_organization_info_action(Principal("u1"), store)
        assert result.data["identity"] == {"user_id": "u1", "email": None}
