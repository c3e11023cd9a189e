"""Todo service — owner-scoped CRUD.

Learn: every query here filters on owner_id. A todo that exists but
belongs to someone else is indistinguishable from one that doesn't
exist: both raise NotFound, so callers can't probe for other users'
ids.
"""

import uuid
from datetime import datetime, timezone
from typing import Any, Optional

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from todoapi.db.models import Todo
from todoapi.errors import InvalidId, NotFound

logger = structlog.get_logger()


def parse_id(raw: str) -> uuid.UUID:
    """Parse a path id, raising InvalidId for anything that isn't a UUID."""
    try:
        return uuid.UUID(str(raw))
    except ValueError:
        raise InvalidId()


def resolve_completion(
    completed: Any, now: Optional[datetime] = None
) -> tuple[bool, Optional[datetime]]:
    """Decide (completed, completed_at) for an update.

    Three cases:
    - True  → completed, stamped with now
    - False → not completed, timestamp cleared
    - None (field absent) → treated like False

    Only the boolean True counts as completed. Non-boolean values such
    as "true" or 1 take the clearing path, same as False.

    The absent case resets completion too. An update that only changes
    the text therefore reopens a completed todo.
    """
    if completed is True:
        return True, now or datetime.now(timezone.utc)
    return False, None


class TodoService:
    """Business logic for todos, always scoped to one owner."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(self, owner_id: uuid.UUID, text: str) -> Todo:
        todo = Todo(text=text, owner_id=owner_id, completed=False)
        self.db.add(todo)
        await self.db.commit()
        logger.info("todo.created", todo_id=str(todo.id))
        return todo

    async def list_todos(self, owner_id: uuid.UUID) -> list[Todo]:
        result = await self.db.execute(
            select(Todo)
            .where(Todo.owner_id == owner_id)
            .order_by(Todo.created_at, Todo.id)
        )
        return list(result.scalars().all())

    async def get(self, owner_id: uuid.UUID, todo_id: uuid.UUID | str) -> Todo:
        tid = parse_id(todo_id)
        result = await self.db.execute(
            select(Todo).where(Todo.id == tid, Todo.owner_id == owner_id)
        )
        todo = result.scalars().first()
        if todo is None:
            raise NotFound()
        return todo

    async def update(
        self,
        owner_id: uuid.UUID,
        todo_id: uuid.UUID | str,
        text: Optional[str] = None,
        completed: Any = None,
    ) -> Todo:
        todo = await self.get(owner_id, todo_id)
        if text is not None:
            todo.text = text
        todo.completed, todo.completed_at = resolve_completion(completed)
        await self.db.commit()
        logger.info("todo.updated", todo_id=str(todo.id), completed=todo.completed)
        return todo

    async def delete(self, owner_id: uuid.UUID, todo_id: uuid.UUID | str) -> Todo:
        todo = await self.get(owner_id, todo_id)
        await self.db.delete(todo)
        await self.db.commit()
        logger.info("todo.deleted", todo_id=str(todo.id))
        return todo
