"""API route aggregation.

All routers registered here get mounted in main.py.

Learn: Auth is applied at the include_router level using FastAPI's
dependencies parameter. This protects all routes in each router
without modifying individual handlers. Health, registration and
login are open.
"""

from fastapi import APIRouter, Depends

from todoapi.api.health import router as health_router
from todoapi.api.todos import router as todos_router
from todoapi.api.users import me_router as users_me_router
from todoapi.api.users import router as users_router
from todoapi.auth.dependencies import require_auth

# All protected routers require a valid auth token
_auth = [Depends(require_auth)]

api_router = APIRouter()

# Open routes — no auth required
api_router.include_router(health_router, tags=["health"])
api_router.include_router(users_router, tags=["users"])

# Protected routes
api_router.include_router(users_me_router, tags=["users"], dependencies=_auth)
api_router.include_router(todos_router, tags=["todos"], dependencies=_auth)
