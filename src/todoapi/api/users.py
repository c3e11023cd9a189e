"""User API — registration, login, current user, logout.

Learn: Two routers. `router` is open (register, login); `me_router`
is mounted behind require_auth in api/__init__.py:
- POST /users → create an account
- POST /users/login → email/password → auth token (body + x-auth header)
- GET /users/me → current user
- DELETE /users/me/token → revoke the token used for this request
- DELETE /users/me → delete the account and all its todos
"""

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from todoapi.auth.dependencies import CurrentIdentity, get_current_identity, get_settings
from todoapi.config import Settings
from todoapi.db.engine import get_db
from todoapi.schemas.user import LoginRead, UserCreate, UserLogin, UserRead
from todoapi.services.user_service import UserService

router = APIRouter(prefix="/users")
me_router = APIRouter(prefix="/users/me")


def _svc(
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> UserService:
    return UserService(db, settings)


# ─── Open routes ────────────────────────────────────────


@router.post("", response_model=UserRead)
async def register(body: UserCreate, svc: UserService = Depends(_svc)):
    """Create a new user account."""
    return await svc.register(body.email, body.password)


@router.post("/login", response_model=LoginRead, name="login")
async def login(
    body: UserLogin,
    response: Response,
    svc: UserService = Depends(_svc),
    settings: Settings = Depends(get_settings),
):
    """Login with email and password → auth token."""
    user, token = await svc.login(body.email, body.password)
    response.headers[settings.auth_header] = token
    return LoginRead(id=user.id, email=user.email, token=token)


# ─── Current user ───────────────────────────────────────


@me_router.get("", response_model=UserRead)
async def get_me(identity: CurrentIdentity = Depends(get_current_identity)):
    return identity.user


@me_router.delete("/token")
async def logout(
    identity: CurrentIdentity = Depends(get_current_identity),
    svc: UserService = Depends(_svc),
):
    """Revoke the token this request was made with. Other sessions stay valid."""
    await svc.logout(identity.user, identity.token)
    return Response(status_code=200)


@me_router.delete("", response_model=UserRead)
async def delete_me(
    identity: CurrentIdentity = Depends(get_current_identity),
    svc: UserService = Depends(_svc),
):
    """Delete the account and every todo it owns."""
    return await svc.delete(identity.user)
