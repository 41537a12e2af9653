"""API route aggregation.

All routers registered here get mounted in main.py.

Learn: Auth is applied at the include_router level using FastAPI's
dependencies parameter. This protects all routes in each router
without modifying individual handlers, and a rejected request never
reaches handler code. Health and sign-up/sign-in/refresh are open.
"""

from fastapi import APIRouter, Depends

from fintrack.api.accounts import router as accounts_router
from fintrack.api.auth import router as auth_router
from fintrack.api.health import router as health_router
from fintrack.api.users import router as users_router
from fintrack.auth.dependencies import get_current_principal

# All protected routers require a valid access token
_auth = [Depends(get_current_principal)]

api_router = APIRouter(prefix="/api/v1")

# Open routes (no auth required)
api_router.include_router(health_router, tags=["health"])
api_router.include_router(auth_router, tags=["auth"])

# Protected routes: require a valid access token
api_router.include_router(users_router, tags=["users"], dependencies=_auth)
api_router.include_router(
    accounts_router, tags=["accounts", "transactions"], dependencies=_auth
)
