"""Todo API command line.

Usage:
    todoapi serve                       # Run the API with uvicorn
    todoapi serve --port 9000 --reload  # Dev server with autoreload
    todoapi init-db                     # Create tables for TODOAPI_DATABASE_URL
"""

from __future__ import annotations

import asyncio
from typing import Optional

import click
import uvicorn

from todoapi import __version__
from todoapi.config import Settings
from todoapi.db.engine import build_engine, init_models
from todoapi.logging_config import configure_logging


@click.group()
@click.version_option(version=__version__, prog_name="todoapi")
def main():
    """Todo API — per-user todo lists behind token authentication."""


@main.command()
@click.option("--host", help="Bind address (default: TODOAPI_HOST)")
@click.option("--port", type=int, help="Port (default: TODOAPI_PORT)")
@click.option("--reload", is_flag=True, help="Restart on code changes")
def serve(host: Optional[str], port: Optional[int], reload: bool):
    """Run the API server."""
    settings = Settings()
    uvicorn.run(
        "todoapi.main:create_app",
        factory=True,
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
        log_level=settings.log_level.lower(),
    )


@main.command("init-db")
def init_db():
    """Create database tables. Existing tables are left as they are."""
    settings = Settings()
    configure_logging(settings)
    asyncio.run(_init_db(settings))
    click.secho("Tables ready.", fg="green")


async def _init_db(settings: Settings) -> None:
    engine = build_engine(settings)
    try:
        await init_models(engine)
    finally:
        await engine.dispose()


if __name__ == "__main__":
    main()
