"""FastAPI auth dependencies.

Learn: require_auth is the gate in front of every protected router
(applied via include_router(..., dependencies=...) in api/__init__.py).
Handlers that need the caller's identity declare
Depends(get_current_identity), which FastAPI resolves from the same
cached dependency call.

The token comes from the x-auth header (TODOAPI_AUTH_HEADER). Any
failure becomes a 401 with an empty body; the reason only goes to
the log.
"""

from typing import Optional

import structlog
from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from todoapi.auth.tokens import TokenError, TokenService
from todoapi.config import Settings
from todoapi.db.engine import get_db
from todoapi.db.models import User
from todoapi.errors import Unauthenticated

logger = structlog.get_logger()


class CurrentIdentity:
    """The authenticated user making the request, plus the token they used.

    Learn: the token is kept so logout can revoke exactly the session
    that made the request, leaving the user's other sessions alive.
    """

    def __init__(self, user: User, token: str):
        self.user = user
        self.token = token

    @property
    def user_id(self):
        return self.user.id


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_token_service(
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> TokenService:
    return TokenService(db, settings)


async def require_auth(
    request: Request,
    tokens: TokenService = Depends(get_token_service),
) -> CurrentIdentity:
    """Verify the request's token and attach the identity to request.state."""
    token: Optional[str] = request.headers.get(tokens.settings.auth_header)
    if not token:
        logger.info("auth.rejected", reason="missing token", path=request.url.path)
        raise Unauthenticated()

    try:
        user = await tokens.verify(token)
    except TokenError as e:
        logger.info("auth.rejected", reason=str(e), path=request.url.path)
        raise Unauthenticated()

    identity = CurrentIdentity(user=user, token=token)
    request.state.identity = identity
    structlog.contextvars.bind_contextvars(user_id=str(user.id))
    return identity


async def get_current_identity(
    identity: CurrentIdentity = Depends(require_auth),
) -> CurrentIdentity:
    return identity
