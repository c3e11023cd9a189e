"""Auth token issuing, verification, and revocation.

Learn: Tokens are JWTs signed with the server secret, but a valid
signature alone is not enough. Every issued token is also appended to
the owning user's token list, and verify() requires the token to still
be in that list. Removing it (logout) revokes the token immediately,
something a purely stateless JWT scheme can't do without a denylist.

Claims:
- sub: user id
- access: purpose tag (only "auth" is issued today)
- iat, jti: issue time plus a random id, so two logins in the same
  second still get distinct tokens
- exp: only when TODOAPI_AUTH_TOKEN_EXPIRE_MINUTES is set
"""

import secrets
import uuid
from datetime import datetime, timedelta, timezone

import jwt
import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from todoapi.config import Settings
from todoapi.db.models import User

logger = structlog.get_logger()

AUTH = "auth"


class TokenError(Exception):
    """Raised when a token can't be verified."""


class TokenService:
    """Issue, verify, and revoke per-user auth tokens."""

    def __init__(self, db: AsyncSession, settings: Settings):
        self.db = db
        self.settings = settings

    # ─── Signing ────────────────────────────────────────

    def sign(self, user_id: uuid.UUID, purpose: str = AUTH) -> str:
        now = datetime.now(timezone.utc)
        payload = {
            "sub": str(user_id),
            "access": purpose,
            "iat": now,
            "jti": secrets.token_hex(8),
        }
        if self.settings.auth_token_expire_minutes:
            payload["exp"] = now + timedelta(
                minutes=self.settings.auth_token_expire_minutes
            )
        return jwt.encode(
            payload, self.settings.jwt_secret, algorithm=self.settings.jwt_algorithm
        )

    def decode(self, token: str) -> dict:
        """Check the signature and return the claims.

        Raises TokenError on failure.
        """
        try:
            return jwt.decode(
                token,
                self.settings.jwt_secret,
                algorithms=[self.settings.jwt_algorithm],
            )
        except jwt.ExpiredSignatureError:
            raise TokenError("Token has expired")
        except jwt.InvalidTokenError as e:
            raise TokenError(f"Invalid token: {e}")

    # ─── Lifecycle ──────────────────────────────────────

    async def issue(self, user: User, purpose: str = AUTH) -> str:
        """Sign a new token for the user and persist it in their token list."""
        token = self.sign(user.id, purpose)
        user.tokens = [*(user.tokens or []), {"access": purpose, "token": token}]
        await self.db.commit()
        logger.info(
            "token.issued",
            user_id=str(user.id),
            purpose=purpose,
            active_tokens=len(user.tokens),
        )
        return token

    async def verify(self, token: str, purpose: str = AUTH) -> User:
        """Resolve a token to its user.

        Fails if the signature is bad, the purpose doesn't match, the
        user is gone, or the token has been revoked.
        """
        payload = self.decode(token)
        if payload.get("access") != purpose:
            raise TokenError("Token purpose mismatch")

        try:
            user_id = uuid.UUID(payload["sub"])
        except (KeyError, TypeError, ValueError):
            raise TokenError("Token subject is not a user id")

        user = await self.db.get(User, user_id)
        if user is None:
            raise TokenError("Token owner no longer exists")

        if not any(
            t.get("token") == token and t.get("access") == purpose
            for t in user.tokens or []
        ):
            raise TokenError("Token has been revoked")
        return user

    async def revoke(self, user: User, token: str) -> bool:
        """Remove a token from the user's list. Idempotent.

        Returns True if the token was present.
        """
        current = user.tokens or []
        remaining = [t for t in current if t.get("token") != token]
        if len(remaining) == len(current):
            return False

        user.tokens = remaining
        await self.db.commit()
        logger.info(
            "token.revoked", user_id=str(user.id), active_tokens=len(remaining)
        )
        return True
