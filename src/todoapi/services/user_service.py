"""User service — registration, credential checks, login/logout.

Learn: Service layer separates business logic from HTTP routing.
API routes call services, services call the database. The token
lifecycle itself lives in TokenService; this service decides when
to issue and revoke.
"""

import uuid

import pydantic
import structlog
from pydantic import EmailStr, TypeAdapter
from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from todoapi.auth.password import hash_password, verify_password
from todoapi.auth.tokens import AUTH, TokenService
from todoapi.config import Settings
from todoapi.db.models import Todo, User
from todoapi.errors import AuthenticationFailed, DuplicateKey, ValidationError
from todoapi.schemas.user import UserCreate

logger = structlog.get_logger()

_email_adapter = TypeAdapter(EmailStr)


class UserService:
    """Business logic for user accounts."""

    def __init__(self, db: AsyncSession, settings: Settings):
        self.db = db
        self.settings = settings
        self.tokens = TokenService(db, settings)

    async def get_by_email(self, email: str) -> User | None:
        result = await self.db.execute(select(User).where(User.email == email))
        return result.scalars().first()

    async def get(self, user_id: uuid.UUID) -> User | None:
        return await self.db.get(User, user_id)

    # ─── Registration ───────────────────────────────────

    async def register(self, email: str, password: str) -> User:
        """Create a user.

        Validates with the same schema the HTTP layer uses, so callers
        outside the API (CLI, tests) get the same rules. The plaintext
        password is hashed before anything touches the database.
        """
        try:
            data = UserCreate(email=email, password=password)
        except pydantic.ValidationError as e:
            raise ValidationError(_first_error(e))

        if await self.get_by_email(data.email):
            raise DuplicateKey()

        user = User(
            email=data.email,
            password_hash=hash_password(data.password, self.settings.bcrypt_rounds),
            tokens=[],
        )
        self.db.add(user)
        try:
            await self.db.commit()
        except IntegrityError:
            # Lost a race against a concurrent registration for the same email.
            await self.db.rollback()
            raise DuplicateKey()

        logger.info("user.registered", user_id=str(user.id))
        return user

    # ─── Login / logout ─────────────────────────────────

    async def find_by_credentials(self, email: str, password: str) -> User:
        """Look up a user by email and check the password.

        Unknown email and wrong password raise the same error.
        """
        user = await self.get_by_email(_normalize_email(email))
        if not user or not verify_password(password, user.password_hash):
            logger.info("user.login_failed")
            raise AuthenticationFailed()
        return user

    async def login(self, email: str, password: str) -> tuple[User, str]:
        user = await self.find_by_credentials(email, password)
        token = await self.tokens.issue(user, AUTH)
        return user, token

    async def logout(self, user: User, token: str) -> None:
        await self.tokens.revoke(user, token)

    # ─── Deletion ───────────────────────────────────────

    async def delete(self, user: User) -> User:
        """Delete a user and every todo they own.

        Todos are removed first and explicitly; there is no ON DELETE
        CASCADE on the foreign key.
        """
        result = await self.db.execute(delete(Todo).where(Todo.owner_id == user.id))
        await self.db.delete(user)
        await self.db.commit()
        logger.info(
            "user.deleted", user_id=str(user.id), todos_deleted=result.rowcount
        )
        return user


def _normalize_email(email: str) -> str:
    """Normalize like registration does (EmailStr lowercases the domain)."""
    try:
        return _email_adapter.validate_python(email.strip())
    except pydantic.ValidationError:
        return email.strip()


def _first_error(exc: pydantic.ValidationError) -> str:
    err = exc.errors()[0]
    field = ".".join(str(p) for p in err.get("loc", ()))
    return f"{field}: {err['msg']}" if field else err["msg"]
