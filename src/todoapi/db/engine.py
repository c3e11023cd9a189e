"""Async SQLAlchemy engine and session factory.

Learn: SQLAlchemy 2.0 async mode — create_async_engine for connection pooling,
AsyncSession for per-request database access, dependency injection via FastAPI.

Nothing here is a module-level global. create_app() builds one engine and
one session factory from its Settings and stores them on app.state;
get_db() reads them back off the request.
"""

from typing import AsyncIterator

from fastapi import Request
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from todoapi.config import Settings
from todoapi.db.models import Base


def build_engine(settings: Settings) -> AsyncEngine:
    """Create the async engine for the configured database.

    Connection pool: min 5, max 20 connections. SQLite (tests) keeps the
    driver's default pool, which rejects sizing arguments.
    """
    kwargs = {}
    if not settings.database_url.startswith("sqlite"):
        kwargs.update(pool_size=5, max_overflow=15)
    return create_async_engine(settings.database_url, echo=settings.debug, **kwargs)


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    # Each request gets its own session.
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def init_models(engine: AsyncEngine) -> None:
    """Create any missing tables. Existing tables are left untouched."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def get_db(request: Request) -> AsyncIterator[AsyncSession]:
    """FastAPI dependency — yields a session per request, auto-closes."""
    async with request.app.state.session_factory() as session:
        try:
            yield session
        finally:
            await session.close()
