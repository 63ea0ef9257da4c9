from __future__ import annotations

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from .common import TodoPriority


class TodoCreateRequest(BaseModel):
    content: str = Field(min_length=1, max_length=1000)
    priority: Optional[TodoPriority] = None  # falls back to the org default
    due_date: Optional[datetime] = None
    assigned_to: Optional[str] = None
    tags: list[str] = Field(default_factory=list)


class TodoUpdateRequest(BaseModel):
    done: bool


class TodoSnapshot(BaseModel):
    id: uuid.UUID
    content: str
    done: bool = False
    priority: TodoPriority = TodoPriority.MEDIUM
    organization_id: uuid.UUID
    user_id: str
    assigned_to: Optional[str] = None
    due_date: Optional[datetime] = None
    tags: list[str] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
