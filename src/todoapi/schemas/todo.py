"""Pydantic schemas for todos.

Learn: TodoCreate and TodoUpdate are the field whitelists — anything
else in the request body is ignored. TodoRead serializes with camelCase
aliases (completedAt, ownerId), which is the wire format clients expect.
"""

import uuid
from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel


class TodoCreate(BaseModel):
    text: str = Field(..., min_length=1)

    model_config = {"str_strip_whitespace": True}


class TodoUpdate(BaseModel):
    text: Optional[str] = Field(None, min_length=1)
    # Any JSON value is accepted; only a literal true marks the todo completed.
    completed: Any = None

    model_config = {"str_strip_whitespace": True}


class TodoRead(BaseModel):
    id: uuid.UUID
    text: str
    completed: bool
    completed_at: Optional[datetime] = None
    owner_id: uuid.UUID

    model_config = {
        "from_attributes": True,
        "alias_generator": to_camel,
        "populate_by_name": True,
    }


class TodoEnvelope(BaseModel):
    todo: TodoRead


class TodoList(BaseModel):
    todos: list[TodoRead]
