"""Test fixtures — a fresh app and database per test.

Learn: Every test builds its own app through the same create_app()
factory production uses, pointed at a throwaway SQLite file (aiosqlite).
Nothing is shared between tests, so there's nothing to roll back.

- settings: test Settings (fast bcrypt, fixed secret)
- app / client: the app and an httpx client talking to it in-process
- db_session: a separate session on the same database, for asserting
  on what the API actually stored
- alice / bob: registered + logged-in users with ready-made auth headers
"""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from todoapi.config import Settings
from todoapi.db.engine import init_models
from todoapi.main import create_app

PASSWORD = "password1"


@pytest.fixture
def settings(tmp_path):
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        jwt_secret="test-secret-at-least-32-bytes-long-for-hs256",
        environment="test",
        bcrypt_rounds=4,
    )


@pytest_asyncio.fixture()
async def app(settings):
    """App with tables created.

    Learn: ASGITransport doesn't run the lifespan, so tables are
    created here instead of at startup.
    """
    app = create_app(settings)
    await init_models(app.state.engine)
    yield app
    await app.state.engine.dispose()


@pytest_asyncio.fixture()
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture()
async def db_session(app):
    async with app.state.session_factory() as session:
        yield session


async def signup(client, email: str, password: str = PASSWORD) -> dict:
    """Register and log in. Returns id, email, token, and auth headers."""
    r = await client.post("/users", json={"email": email, "password": password})
    assert r.status_code == 200, r.text
    r = await client.post("/users/login", json={"email": email, "password": password})
    assert r.status_code == 200, r.text
    data = r.json()
    data["headers"] = {"x-auth": data["token"]}
    return data


@pytest_asyncio.fixture()
async def alice(client):
    return await signup(client, "alice@example.com")


@pytest_asyncio.fixture()
async def bob(client):
    return await signup(client, "bob@example.com")
