"""
Todo service: organization-scoped todos.

A todo belongs to the organization of the creator's first membership; reads
and updates require a membership in that organization.
"""

from __future__ import annotations

import uuid
from typing import Optional

import structlog

from app.core.auth import Principal, require_principal
from app.core.errors import (
    CreationError,
    NotFoundError,
    PermissionDeniedError,
    TransientUnavailableError,
)
from app.core.results import action_result
from app.core.store import EntityStore, StoreUnavailableError, StoreWriteError
from app.models.membership import OrganizationMembership
from app.models.organization import Organization
from app.models.todo import Todo
from app.services.invitations import get_membership
from orgtodo_shared.schemas.organizations import OrgSettings
from orgtodo_shared.schemas.todos import TodoCreateRequest, TodoSnapshot

log = structlog.get_logger()


async def _primary_membership(subject_id: str, store: EntityStore) -> OrganizationMembership:
    try:
        memberships = await store.list(OrganizationMembership, user_id=subject_id, is_active=True)
    except StoreUnavailableError as exc:
        raise TransientUnavailableError(f"Failed to load memberships: {exc}") from exc
    if not memberships:
        raise NotFoundError("User has no organization memberships")
    return memberships[0]


async def _default_priority(organization_id: uuid.UUID, store: EntityStore) -> str:
    org = await store.get(Organization, organization_id)
    settings = OrgSettings.model_validate(org.settings if org else {})
    return settings.default_todo_priority


async def add_todo(
    principal: Optional[Principal],
    req: TodoCreateRequest,
    store: EntityStore,
) -> TodoSnapshot:
    """Create a todo in the caller's first organization."""
    principal = require_principal(principal)
    membership = await _primary_membership(principal.subject_id, store)

    try:
        priority = req.priority.value if req.priority else await _default_priority(
            membership.organization_id, store
        )
        todo = await store.create(
            Todo,
            content=req.content,
            done=False,
            priority=priority,
            organization_id=membership.organization_id,
            user_id=principal.subject_id,
            assigned_to=req.assigned_to,
            due_date=req.due_date,
            tags=req.tags,
        )
    except (StoreWriteError, StoreUnavailableError) as exc:
        raise CreationError(f"Failed to create todo: {exc}") from exc

    log.info("todo.created", todo_id=str(todo.id), org_id=str(todo.organization_id))
    return TodoSnapshot.model_validate(todo)


async def list_todos(
    principal: Optional[Principal],
    store: EntityStore,
    organization_id: Optional[uuid.UUID] = None,
) -> list[TodoSnapshot]:
    """Todos of an organization the caller belongs to (default: first membership)."""
    principal = require_principal(principal)
    if organization_id is None:
        organization_id = (await _primary_membership(principal.subject_id, store)).organization_id
    elif await get_membership(principal.subject_id, organization_id, store) is None:
        raise PermissionDeniedError("You are not a member of this organization")

    try:
        todos = await store.list(Todo, organization_id=organization_id)
    except StoreUnavailableError as exc:
        raise TransientUnavailableError(f"Failed to list todos: {exc}") from exc
    return [TodoSnapshot.model_validate(t) for t in todos]


async def set_todo_done(
    principal: Optional[Principal],
    todo_id: uuid.UUID,
    done: bool,
    store: EntityStore,
) -> TodoSnapshot:
    """Mark a todo done or not done; any member of its organization may do so."""
    principal = require_principal(principal)
    try:
        todo = await store.get(Todo, todo_id)
    except StoreUnavailableError as exc:
        raise TransientUnavailableError(f"Failed to load todo: {exc}") from exc
    if todo is None:
        raise NotFoundError("Todo not found")
    if await get_membership(principal.subject_id, todo.organization_id, store) is None:
        raise PermissionDeniedError("You are not a member of this organization")

    try:
        todo = await store.update(Todo, todo_id, done=done)
    except (StoreWriteError, StoreUnavailableError) as exc:
        raise CreationError(f"Failed to update todo: {exc}") from exc
    log.info("todo.updated", todo_id=str(todo_id), done=done)
    return TodoSnapshot.model_validate(todo)


add_todo_action = action_result("Failed to add todo")(add_todo)
list_todos_action = action_result("Failed to list todos")(list_todos)
set_todo_done_action = action_result("Failed to update todo")(set_todo_done)
