"""
Tests for organization-scoped todos.
"""

from __future__ import annotations

import uuid

import pytest

from app.core.auth import Principal
from app.models.organization import Organization
from app.services.invitations import accept_invitation, invite_user
from app.services.onboarding import create_user_organization
from app.services.todos import add_todo, add_todo_action, list_todos, list_todos_action, set_todo_done_action
from orgtodo_shared.schemas.common import TodoPriority
from orgtodo_shared.schemas.invitations import InvitableRole, InviteRequest
from orgtodo_shared.schemas.onboarding import OnboardingRequest
from orgtodo_shared.schemas.todos import TodoCreateRequest

OWNER = Principal("owner", "owner@x.com")
OTHER = Principal("other", "other@x.com")


async def make_org(store, principal=OWNER, name="Acme") -> uuid.UUID:
    snapshot = await create_user_organization(principal, OnboardingRequest(organization_name=name), store)
    return snapshot.organization.id


class TestAddTodo:

    @pytest.mark.asyncio
    async def test_add_uses_org_default_priority(self, store):
        org_id = await make_org(store)
        todo = await add_todo(OWNER, TodoCreateRequest(content="Ship it"), store)
        assert todo.content == "Ship it"
        assert todo.done is False
        assert todo.priority == TodoPriority.MEDIUM
        assert todo.organization_id == org_id
        assert todo.user_id == "owner"

    @pytest.mark.asyncio
    async def test_org_setting_changes_default(self, store):
        org_id = await make_org(store)
        await store.update(Organization, org_id, settings={"default_todo_priority": "low"})
        todo = await add_todo(OWNER, TodoCreateRequest(content="Later"), store)
        assert todo.priority == TodoPriority.LOW

    @pytest.mark.asyncio
    async def test_explicit_priority_and_tags(self, store):
        await make_org(store)
        todo = await add_todo(
            OWNER,
            TodoCreateRequest(content="Urgent", priority="high", tags=["ops", "billing"]),
            store,
        )
        assert todo.priority == TodoPriority.HIGH
        assert todo.tags == ["ops", "billing"]

    @pytest.mark.asyncio
    async def test_requires_membership(self, store):
        result = await add_todo_action(OWNER, TodoCreateRequest(content="x"), store)
        assert result.success is False
        assert result.error == "User has no organization memberships"

    @pytest.mark.asyncio
    async def test_unauthenticated(self, store):
        result = await add_todo_action(None, TodoCreateRequest(content="x"), store)
        assert result.error == "User not authenticated"


class TestListTodos:

    @pytest.mark.asyncio
    async def test_list_scoped_to_organization(self, store):
        await make_org(store)
        await make_org(store, principal=OTHER, name="Globex")
        await add_todo(OWNER, TodoCreateRequest(content="a"), store)
        await add_todo(OWNER, TodoCreateRequest(content="b"), store)
        await add_todo(OTHER, TodoCreateRequest(content="c"), store)

        todos = await list_todos(OWNER, store)
        assert [t.content for t in todos] == ["a", "b"]

    @pytest.mark.asyncio
    async def test_list_other_org_denied(self, store):
        await make_org(store)
        other_org = await make_org(store, principal=OTHER, name="Globex")
        result = await list_todos_action(OWNER, store, other_org)
        assert result.success is False
        assert result.error == "You are not a member of this organization"

    @pytest.mark.asyncio
    async def test_invited_member_sees_org_todos(self, store):
        org_id = await make_org(store)
        await add_todo(OWNER, TodoCreateRequest(content="shared"), store)
        summary = await invite_user(
            OWNER,
            InviteRequest(email="u2@x.com", organization_id=org_id, role=InvitableRole.MEMBER),
            store,
        )
        member = Principal("u2", "u2@x.com")
        await accept_invitation(member, summary.token, store)

        todos = await list_todos(member, store, org_id)
        assert [t.content for t in todos] == ["shared"]


class TestSetTodoDone:

    @pytest.mark.asyncio
    async def test_toggle(self, store):
        await make_org(store)
        todo = await add_todo(OWNER, TodoCreateRequest(content="a"), store)

        result = await set_todo_done_action(OWNER, todo.id, True, store)
        assert result.success is True
        assert result.data["done"] is True

        result = await set_todo_done_action(OWNER, todo.id, False, store)
        assert result.data["done"] is False

    @pytest.mark.asyncio
    async def test_unknown_todo(self, store):
        await make_org(store)
        result = await set_todo_done_action(OWNER, uuid.uuid4(), True, store)
        assert result.error == "Todo not found"

    @pytest.mark.asyncio
    async def test_non_member_denied(self, store):
        await make_org(store)
        await make_org(store, principal=OTHER, name="Globex")
        todo = await add_todo(OWNER, TodoCreateRequest(content="mine"), store)
        result = await set_todo_done_action(OTHER, todo.id, True, store)
        assert result.error == "You are not a member of this organization"


class TestTodoApi:

    @pytest.mark.asyncio
    async def test_crud_flow(self, client, auth_headers):
        headers = auth_headers("owner", "owner@x.com")
        await client.post("/api/v1/onboarding", json={"organization_name": "Acme"}, headers=headers)

        resp = await client.post("/api/v1/todos", json={"content": "Write docs"}, headers=headers)
        assert resp.status_code == 200
        todo = resp.json()["data"]
        assert todo["priority"] == "medium"

        resp = await client.patch(f"/api/v1/todos/{todo['id']}", json={"done": True}, headers=headers)
        assert resp.json()["data"]["done"] is True

        resp = await client.get("/api/v1/todos", headers=headers)
        body = resp.json()
        assert body["success"] is True
        assert [t["content"] for t in body["data"]] == ["Write docs"]
