"""
Authentication Dependencies

Bearer-token verification for admin endpoints. Validity is decided purely by
the token's signature and expiry; no server-side session state is kept.
"""

import logging
from dataclasses import dataclass
from uuid import UUID

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from volunteer_api.core.errors import UnauthorizedError
from volunteer_api.core.security import ACCESS_TOKEN_TYPE, decode_token

logger = logging.getLogger(__name__)

# auto_error=False so a missing header produces our 401, not FastAPI's default
security = HTTPBearer(
    auto_error=False,
    description="JWT Bearer token issued by POST /api/admin/login",
)


@dataclass(frozen=True)
class AuthenticatedAdmin:
    """
    Identity of the admin making the request, populated from JWT claims.

    Attributes:
        id: Admin account id (the ``sub`` claim)
        email: Admin email at the time the token was issued
    """

    id: UUID
    email: str

    def __str__(self) -> str:
        return f"AuthenticatedAdmin(id={self.id}, email={self.email})"


def verify_access_token(token: str) -> AuthenticatedAdmin:
    """
    Validate an access token and extract the admin identity.

    Raises:
        UnauthorizedError: If the token is malformed, tampered with, expired,
            of the wrong type or carries an invalid subject
    """
    payload = decode_token(token)

    if payload is None:
        logger.warning("Invalid or expired JWT token")
        raise UnauthorizedError(
            "Invalid or expired authentication token.",
            error_code="INVALID_TOKEN",
        )

    if payload.get("type") != ACCESS_TOKEN_TYPE:
        logger.warning(f"Invalid token type: {payload.get('type')}")
        raise UnauthorizedError(
            "This endpoint requires an access token.",
            error_code="INVALID_TOKEN_TYPE",
        )

    try:
        admin_id = UUID(str(payload["sub"]))
    except (KeyError, ValueError) as e:
        logger.warning(f"Invalid token claims: {e}")
        raise UnauthorizedError(
            "Token contains invalid or missing claims.",
            error_code="INVALID_TOKEN_CLAIMS",
        ) from e

    return AuthenticatedAdmin(id=admin_id, email=str(payload.get("email", "")))


async def get_current_admin(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> AuthenticatedAdmin:
    """
    FastAPI dependency guarding every admin endpoint.

    Usage:
        @router.get("/applicants")
        async def list_applicants(admin: AuthenticatedAdmin = Depends(get_current_admin)):
            ...

    Raises:
        UnauthorizedError: If the Authorization header is missing or the token is invalid
    """
    if credentials is None or not credentials.credentials:
        raise UnauthorizedError(
            "Authentication required. Provide a Bearer token.",
            error_code="MISSING_TOKEN",
        )

    admin = verify_access_token(credentials.credentials)
    logger.debug(f"Authenticated admin: {admin}")
    return admin


__all__ = [
    "AuthenticatedAdmin",
    "get_current_admin",
    "verify_access_token",
]
