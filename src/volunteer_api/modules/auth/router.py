"""
Admin Authentication Router

Endpoints:
- POST /admin/login - Exchange email + password for a bearer token
- POST /admin/register - Create an admin account (bootstrap or setup token only)
- GET /admin/profile - Identity of the authenticated admin
"""

import logging

from fastapi import APIRouter, Depends, Header, status
from sqlalchemy.ext.asyncio import AsyncSession

from volunteer_api.core.auth import AuthenticatedAdmin, get_current_admin
from volunteer_api.core.database import get_db
from volunteer_api.core.rate_limit import RateLimiter
from volunteer_api.modules.auth import service
from volunteer_api.modules.auth.schemas import (
    AdminProfileResponse,
    AuthResponse,
    LoginRequest,
    RegisterRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter()

RATE_LIMIT_LOGIN = RateLimiter("admin_login", limit=10, window_seconds=60)
RATE_LIMIT_REGISTER = RateLimiter("admin_register", limit=5, window_seconds=60)


@router.post(
    "/login",
    response_model=AuthResponse,
    summary="Admin Login",
    dependencies=[Depends(RATE_LIMIT_LOGIN)],
    responses={
        401: {"description": "Invalid email or password"},
        429: {"description": "Too many login attempts"},
    },
)
async def login(
    credentials: LoginRequest,
    db: AsyncSession = Depends(get_db),
) -> AuthResponse:
    """
    Authenticate an admin and return a bearer token valid for 7 days.

    Unknown email and wrong password return the same 401 response.
    """
    admin = await service.authenticate(db, credentials.email, credentials.password)

    return AuthResponse(id=admin.id, email=admin.email, token=service.issue_token(admin))


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register Admin",
    dependencies=[Depends(RATE_LIMIT_REGISTER)],
    responses={
        400: {"description": "Invalid email or weak password"},
        403: {"description": "Registration closed (an admin already exists)"},
        409: {"description": "Email already registered"},
    },
)
async def register(
    data: RegisterRequest,
    db: AsyncSession = Depends(get_db),
    x_setup_token: str | None = Header(None),
) -> AuthResponse:
    """
    Register an admin account.

    Open only while no admin exists. After that the request must carry the
    operator's ``X-Setup-Token`` header.
    """
    admin = await service.register(db, data.email, data.password, setup_token=x_setup_token)

    return AuthResponse(id=admin.id, email=admin.email, token=service.issue_token(admin))


@router.get(
    "/profile",
    response_model=AdminProfileResponse,
    summary="Get Admin Profile",
    responses={401: {"description": "Missing, invalid or expired token"}},
)
async def get_profile(
    db: AsyncSession = Depends(get_db),
    current: AuthenticatedAdmin = Depends(get_current_admin),
) -> AdminProfileResponse:
    """Return the authenticated admin's identity (never the password hash)."""
    admin = await service.get_profile(db, current.id)
    return AdminProfileResponse.model_validate(admin)
