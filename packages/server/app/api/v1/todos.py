"""
Todo API endpoints.

GET   /api/v1/todos            List todos (optionally ?organization_id=)
POST  /api/v1/todos            Add a todo to the caller's first organization
PATCH /api/v1/todos/{todo_id}  Mark done / not done
"""

from __future__ import annotations

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query

from app.core.auth import Principal, get_current_principal
from app.core.store import EntityStore, get_store
from app.services import todos as todo_service
from orgtodo_shared.schemas.common import ActionResult
from orgtodo_shared.schemas.todos import TodoCreateRequest, TodoUpdateRequest

router = APIRouter()


@router.get("", response_model=ActionResult)
async def list_todos(
    organization_id: Optional[uuid.UUID] = Query(None),
    principal: Optional[Principal] = Depends(get_current_principal),
    store: EntityStore = Depends(get_store),
):
    return await todo_service.list_todos_action(principal, store, organization_id)


@router.post("", response_model=ActionResult)
async def add_todo(
    body: TodoCreateRequest,
    principal: Optional[Principal] = Depends(get_current_principal),
    store: EntityStore = Depends(get_store),
):
    return await todo_service.add_todo_action(principal, body, store)


@router.patch("/{todo_id}", response_model=ActionResult)
async def update_todo(
    todo_id: uuid.UUID,
    body: TodoUpdateRequest,
    principal: Optional[Principal] = Depends(get_current_principal),
    store: EntityStore = Depends(get_store),
):
    return await todo_service.set_todo_done_action(principal, todo_id, body.done, store)
