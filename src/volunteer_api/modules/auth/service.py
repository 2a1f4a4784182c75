"""
Authentication Service Layer

Admin login, gated registration and profile lookup.

Security considerations:
- Passwords are hashed with bcrypt; plaintext is never stored or logged
- Unknown email and wrong password produce the same error, and the unknown
  email path still spends a bcrypt verification so timing does not leak
  which emails are registered
- bcrypt runs in the threadpool so it never blocks the event loop
- Registration is open only until the first admin exists; afterwards it
  requires the operator setup token
"""

import logging
import secrets
from uuid import UUID

from fastapi.concurrency import run_in_threadpool
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from volunteer_api.core.config import settings
from volunteer_api.core.errors import ErrorKind, ServiceError, UnauthorizedError
from volunteer_api.core.security import (
    create_access_token,
    dummy_verify,
    hash_password,
    verify_password,
)
from volunteer_api.modules.admins import AdminAccount, AdminRepository, normalize_email

logger = logging.getLogger(__name__)


class InvalidCredentialsError(UnauthorizedError):
    """Raised for an unknown email or a wrong password (deliberately indistinguishable)."""

    def __init__(self):
        super().__init__("Invalid email or password.", error_code="INVALID_CREDENTIALS")


class AdminAccountGoneError(UnauthorizedError):
    """Raised when a valid token names an account that no longer exists."""

    def __init__(self):
        super().__init__(
            "The account for this token no longer exists.",
            error_code="ACCOUNT_NOT_FOUND",
        )


class DuplicateAdminError(ServiceError):
    """Raised when registering an email that already has an admin account."""

    def __init__(self):
        super().__init__(
            kind=ErrorKind.CONFLICT,
            message="An admin with this email already exists.",
            error_code="ADMIN_ALREADY_EXISTS",
        )


class RegistrationClosedError(ServiceError):
    """Raised when registration is attempted without operator authorization."""

    def __init__(self):
        super().__init__(
            kind=ErrorKind.FORBIDDEN,
            message="Admin registration is closed. Ask an operator to create your account.",
            error_code="REGISTRATION_CLOSED",
        )


def issue_token(admin: AdminAccount) -> str:
    """Issue a bearer token bound to the admin account id."""
    return create_access_token(
        subject=str(admin.id),
        additional_claims={"email": admin.email},
    )


async def authenticate(db: AsyncSession, email: str, password: str) -> AdminAccount:
    """
    Check admin credentials.

    Args:
        db: Database session
        email: Login email (any case)
        password: Plaintext password

    Returns:
        The matching AdminAccount

    Raises:
        InvalidCredentialsError: If the email is unknown or the password is wrong
    """
    admin = await AdminRepository.get_by_email(db, email)

    if admin is None:
        await run_in_threadpool(dummy_verify)
        logger.warning("Login attempt for unknown admin email")
        raise InvalidCredentialsError()

    if not await run_in_threadpool(verify_password, password, admin.password_hash):
        logger.warning(f"Invalid password for admin {admin.id}")
        raise InvalidCredentialsError()

    logger.info(f"Admin logged in: {admin.id}")
    return admin


async def ensure_registration_allowed(db: AsyncSession, setup_token: str | None) -> None:
    """
    Gate the registration endpoint.

    Open while no admin exists (first-run bootstrap). Afterwards the caller
    must present the configured ADMIN_SETUP_TOKEN; without one configured,
    registration is closed.

    Raises:
        RegistrationClosedError: If the caller is not authorized to register
    """
    if await AdminRepository.count(db) == 0:
        logger.info("No admin accounts exist yet; allowing bootstrap registration")
        return

    expected = settings.admin_setup_token
    if expected and setup_token and secrets.compare_digest(setup_token, expected):
        return

    logger.warning("Rejected admin registration without a valid setup token")
    raise RegistrationClosedError()


async def register(
    db: AsyncSession,
    email: str,
    password: str,
    setup_token: str | None = None,
) -> AdminAccount:
    """
    Register a new admin account.

    Args:
        db: Database session
        email: Admin email
        password: Plaintext password (already checked against the policy)
        setup_token: Value of the X-Setup-Token header, if any

    Returns:
        The created AdminAccount

    Raises:
        RegistrationClosedError: If registration is not allowed for this caller
        DuplicateAdminError: If the email is already registered
    """
    await ensure_registration_allowed(db, setup_token)

    email = normalize_email(email)
    if await AdminRepository.email_exists(db, email):
        logger.warning("Duplicate admin registration attempt")
        raise DuplicateAdminError()

    password_hash = await run_in_threadpool(hash_password, password)

    try:
        return await AdminRepository.create(db, email=email, password_hash=password_hash)
    except IntegrityError as e:
        # Lost a race with a concurrent registration for the same email
        await db.rollback()
        raise DuplicateAdminError() from e


async def get_profile(db: AsyncSession, admin_id: UUID) -> AdminAccount:
    """
    Load the account behind an authenticated request.

    Raises:
        AdminAccountGoneError: If the account was deleted after the token was issued
    """
    admin = await AdminRepository.get_by_id(db, admin_id)

    if admin is None:
        logger.warning(f"Token references missing admin account {admin_id}")
        raise AdminAccountGoneError()

    return admin
