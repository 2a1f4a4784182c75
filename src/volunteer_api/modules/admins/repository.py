"""
Admin Repository

Database operations for admin accounts.
"""

import logging
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from volunteer_api.modules.admins.models import AdminAccount

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    """Canonical form used for storage and lookup."""
    return email.strip().lower()


class AdminRepository:
    """Repository for admin account database operations."""

    @staticmethod
    async def create(
        db: AsyncSession,
        *,
        email: str,
        password_hash: str,
    ) -> AdminAccount:
        """
        Create a new admin account.

        Args:
            db: Database session
            email: Admin email (normalized before storage)
            password_hash: Bcrypt hash of the password

        Returns:
            Created AdminAccount instance

        Raises:
            IntegrityError: If the email is already taken (unique index)
        """
        admin = AdminAccount(
            email=normalize_email(email),
            password_hash=password_hash,
        )

        db.add(admin)
        await db.commit()
        await db.refresh(admin)

        logger.info(f"Created admin account: {admin.id} - {admin.email}")
        return admin

    @staticmethod
    async def get_by_id(db: AsyncSession, admin_id: UUID) -> AdminAccount | None:
        """Get an admin account by ID."""
        return await db.get(AdminAccount, admin_id)

    @staticmethod
    async def get_by_email(db: AsyncSession, email: str) -> AdminAccount | None:
        """Get an admin account by email (case-insensitive)."""
        result = await db.execute(
            select(AdminAccount).where(AdminAccount.email == normalize_email(email))
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def email_exists(db: AsyncSession, email: str) -> bool:
        """Check if an email address is already registered."""
        admin = await AdminRepository.get_by_email(db, email)
        return admin is not None

    @staticmethod
    async def count(db: AsyncSession) -> int:
        """Total number of admin accounts."""
        result = await db.execute(select(func.count()).select_from(AdminAccount))
        return result.scalar() or 0
