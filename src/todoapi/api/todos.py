"""Todo API routes.

Learn: FastAPI routers define HTTP endpoints. Each route function
receives dependencies via Depends() and delegates to the service
layer. The owner id always comes from the authenticated identity,
never from the request body.
"""

import uuid
from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from todoapi.auth.dependencies import CurrentIdentity, get_current_identity
from todoapi.db.engine import get_db
from todoapi.schemas.todo import (
    TodoCreate,
    TodoEnvelope,
    TodoList,
    TodoRead,
    TodoUpdate,
)
from todoapi.services.todo_service import TodoService, parse_id

router = APIRouter(prefix="/todos")


def _svc(db: AsyncSession = Depends(get_db)) -> TodoService:
    return TodoService(db)


def _todo_id(todo_id: str) -> uuid.UUID:
    """Parse the path id as a dependency.

    Dependencies run before the request body is validated, so a
    malformed id is a 404 even when the body is also bad.
    """
    return parse_id(todo_id)


@router.post("", response_model=TodoRead)
async def create_todo(
    body: TodoCreate,
    identity: CurrentIdentity = Depends(get_current_identity),
    svc: TodoService = Depends(_svc),
):
    return await svc.create(owner_id=identity.user_id, text=body.text)


@router.get("", response_model=TodoList)
async def list_todos(
    identity: CurrentIdentity = Depends(get_current_identity),
    svc: TodoService = Depends(_svc),
):
    todos = await svc.list_todos(identity.user_id)
    return TodoList(todos=[TodoRead.model_validate(t) for t in todos])


@router.get("/{todo_id}", response_model=TodoEnvelope)
async def get_todo(
    todo_id: uuid.UUID = Depends(_todo_id),
    identity: CurrentIdentity = Depends(get_current_identity),
    svc: TodoService = Depends(_svc),
):
    todo = await svc.get(identity.user_id, todo_id)
    return TodoEnvelope(todo=TodoRead.model_validate(todo))


@router.patch("/{todo_id}", response_model=TodoEnvelope)
async def update_todo(
    todo_id: uuid.UUID = Depends(_todo_id),
    body: Optional[TodoUpdate] = None,
    identity: CurrentIdentity = Depends(get_current_identity),
    svc: TodoService = Depends(_svc),
):
    """Partial update of text and/or completed.

    Anything but `"completed": true`, including omitting the field or
    sending a non-boolean, marks the todo as not completed.
    """
    body = body or TodoUpdate()
    todo = await svc.update(
        identity.user_id, todo_id, text=body.text, completed=body.completed
    )
    return TodoEnvelope(todo=TodoRead.model_validate(todo))


@router.delete("/{todo_id}", response_model=TodoEnvelope)
async def delete_todo(
    todo_id: uuid.UUID = Depends(_todo_id),
    identity: CurrentIdentity = Depends(get_current_identity),
    svc: TodoService = Depends(_svc),
):
    todo = await svc.delete(identity.user_id, todo_id)
    return TodoEnvelope(todo=TodoRead.model_validate(todo))
