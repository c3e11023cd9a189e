"""FastAPI application factory.

Learn: App factory pattern — create_app() returns a configured FastAPI
instance. It owns everything a request needs (settings, engine, session
factory) and stores it on app.state; there are no module-level database
handles. Lifespan creates tables at startup and disposes the engine at
shutdown.
"""

from contextlib import asynccontextmanager
from typing import Optional

import structlog
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from todoapi import __version__
from todoapi.api import api_router
from todoapi.config import Settings
from todoapi.db.engine import build_engine, build_session_factory, init_models
from todoapi.errors import TodoApiError
from todoapi.logging_config import configure_logging
from todoapi.middleware.request_id import RequestIdMiddleware

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle.

    Learn: Anything before `yield` runs at startup, after `yield` runs at shutdown.
    """
    settings: Settings = app.state.settings
    logger.info(
        "todoapi.starting",
        version=__version__,
        environment=settings.environment,
        port=settings.port,
    )

    if settings.create_tables:
        await init_models(app.state.engine)
        logger.info("todoapi.tables_ready")

    yield

    logger.info("todoapi.shutdown")
    await app.state.engine.dispose()


async def handle_app_error(request: Request, exc: TodoApiError) -> Response:
    """Render a TodoApiError. Errors without a public message get an empty body."""
    if exc.public_message is None:
        return Response(status_code=exc.status_code)
    return JSONResponse(
        status_code=exc.status_code,
        content={"errorMessage": exc.public_message},
    )


async def handle_validation_error(
    request: Request, exc: RequestValidationError
) -> Response:
    """Malformed request input is a plain 400 rather than FastAPI's 422.

    A malformed login body gets the same empty 400 as bad credentials.
    """
    if request.url.path == request.app.url_path_for("login"):
        return Response(status_code=400)
    return JSONResponse(
        status_code=400,
        content={"detail": jsonable_encoder(exc.errors())},
    )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build and return the FastAPI application."""
    settings = settings or Settings()
    configure_logging(settings)

    app = FastAPI(
        title="Todo API",
        description="Per-user todo lists behind token authentication",
        version=__version__,
        lifespan=lifespan,
    )

    engine = build_engine(settings)
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)

    app.add_exception_handler(TodoApiError, handle_app_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)

    # ── Middleware stack ──────────────────────────────────────
    # Starlette middleware executes in reverse order of registration.
    # Request flow: RequestId → CORS → handler
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[settings.auth_header, "X-Request-ID"],
    )
    app.add_middleware(RequestIdMiddleware)

    app.include_router(api_router)

    return app
