"""Service-layer tests — UserService and TodoService without HTTP."""

import uuid
from datetime import datetime, timezone

import pytest

from todoapi.errors import AuthenticationFailed, DuplicateKey, InvalidId, NotFound, ValidationError
from todoapi.services.todo_service import TodoService, parse_id, resolve_completion
from todoapi.services.user_service import UserService


@pytest.fixture
def users(db_session, settings):
    return UserService(db_session, settings)


@pytest.fixture
def todos(db_session):
    return TodoService(db_session)


# ═══════════════════════════════════════════════════════════
# Completion policy
# ═══════════════════════════════════════════════════════════


def test_resolve_completion_true_stamps_now():
    now = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
    assert resolve_completion(True, now) == (True, now)


def test_resolve_completion_true_defaults_to_current_time():
    completed, at = resolve_completion(True)
    assert completed is True
    assert at is not None


def test_resolve_completion_false_clears():
    assert resolve_completion(False) == (False, None)


def test_resolve_completion_absent_clears():
    assert resolve_completion(None) == (False, None)


def test_parse_id():
    tid = uuid.uuid4()
    assert parse_id(str(tid)) == tid
    with pytest.raises(InvalidId):
        parse_id("123")


# ═══════════════════════════════════════════════════════════
# UserService
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_register_validates_email(users):
    with pytest.raises(ValidationError, match="email"):
        await users.register("nope", "password1")


@pytest.mark.asyncio
async def test_register_validates_password_length(users):
    with pytest.raises(ValidationError, match="password"):
        await users.register("short@example.com", "12345")


@pytest.mark.asyncio
async def test_register_duplicate(users):
    first = await users.register("same@example.com", "password1")
    original_hash = first.password_hash

    with pytest.raises(DuplicateKey):
        await users.register("same@example.com", "password2")

    again = await users.get_by_email("same@example.com")
    assert again.id == first.id
    assert again.password_hash == original_hash


@pytest.mark.asyncio
async def test_find_by_credentials(users):
    user = await users.register("creds@example.com", "password1")
    assert (await users.find_by_credentials("creds@example.com", "password1")).id == user.id


@pytest.mark.asyncio
async def test_find_by_credentials_same_error_for_both_failures(users):
    await users.register("creds@example.com", "password1")

    with pytest.raises(AuthenticationFailed) as wrong_pw:
        await users.find_by_credentials("creds@example.com", "password2")
    with pytest.raises(AuthenticationFailed) as unknown:
        await users.find_by_credentials("ghost@example.com", "password1")

    assert str(wrong_pw.value) == str(unknown.value)
    assert wrong_pw.value.public_message is None


@pytest.mark.asyncio
async def test_login_and_logout(users):
    await users.register("io@example.com", "password1")
    user, token = await users.login("io@example.com", "password1")
    assert await users.tokens.verify(token) is user

    await users.logout(user, token)
    assert user.tokens == []


# ═══════════════════════════════════════════════════════════
# TodoService
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_todo_crud_scoped_to_owner(users, todos):
    a = await users.register("a@example.com", "password1")
    b = await users.register("b@example.com", "password1")

    todo = await todos.create(a.id, "buy milk")
    assert todo.completed is False
    assert todo.completed_at is None

    assert [t.id for t in await todos.list_todos(a.id)] == [todo.id]
    assert await todos.list_todos(b.id) == []

    with pytest.raises(NotFound):
        await todos.get(b.id, str(todo.id))
    with pytest.raises(NotFound):
        await todos.update(b.id, str(todo.id), completed=True)
    with pytest.raises(NotFound):
        await todos.delete(b.id, str(todo.id))

    updated = await todos.update(a.id, str(todo.id), completed=True)
    assert updated.completed is True
    assert updated.completed_at is not None

    removed = await todos.delete(a.id, str(todo.id))
    assert removed.id == todo.id
    assert await todos.list_todos(a.id) == []


def test_resolve_completion_non_boolean_clears():
    for value in ("true", 1, "yes", [True]):
        assert resolve_completion(value) == (False, None)
