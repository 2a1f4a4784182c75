"""
Security Utilities

Password hashing (bcrypt via passlib) and JWT access tokens (python-jose).

The hashing helpers are CPU-bound and synchronous; async callers should run
them through ``run_in_threadpool`` so they never block the event loop.
"""

import logging
from datetime import UTC, datetime, timedelta
from typing import Any

from jose import JWTError, jwt
from passlib.context import CryptContext

from volunteer_api.core.config import settings

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

ACCESS_TOKEN_TYPE = "access"


def hash_password(password: str) -> str:
    """Hash a plaintext password with a per-hash random salt."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, password_hash: str) -> bool:
    """Check a plaintext password against a stored bcrypt hash."""
    try:
        return pwd_context.verify(plain_password, password_hash)
    except ValueError:
        # Unrecognised or corrupt hash
        logger.warning("Stored password hash could not be parsed")
        return False


def dummy_verify() -> None:
    """
    Spend the same time as a real verification.

    Called when no account matches a login email, so response timing does not
    reveal which emails are registered.
    """
    pwd_context.dummy_verify()


def create_access_token(
    subject: str,
    additional_claims: dict[str, Any] | None = None,
    expires_delta: timedelta | None = None,
) -> str:
    """
    Create a signed access token.

    Args:
        subject: Value of the ``sub`` claim (the admin account id)
        additional_claims: Extra claims merged into the payload
        expires_delta: Lifetime override; defaults to ACCESS_TOKEN_EXPIRE_DAYS

    Returns:
        Encoded JWT string
    """
    now = datetime.now(UTC)
    expire = now + (expires_delta or timedelta(days=settings.access_token_expire_days))

    payload: dict[str, Any] = dict(additional_claims or {})
    payload.update(
        {
            "sub": subject,
            "type": ACCESS_TOKEN_TYPE,
            "iat": int(now.timestamp()),
            "exp": int(expire.timestamp()),
        }
    )

    return jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> dict[str, Any] | None:
    """
    Decode and validate a JWT.

    Verifies the signature, the algorithm and the ``exp`` claim.

    Returns:
        The token payload, or None if the token is malformed, tampered
        with or expired
    """
    try:
        return jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError as e:
        logger.debug(f"JWT rejected: {e}")
        return None
