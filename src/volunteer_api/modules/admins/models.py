"""
Admin Models

Database model for admin accounts (the credential store).
"""

import uuid
from datetime import datetime

from sqlalchemy import DateTime, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from volunteer_api.core.database import Base, utcnow


class AdminAccount(Base):
    """
    Admin account used to sign in to the review dashboard.

    Emails are stored lowercased so the unique index enforces
    case-insensitive uniqueness. Only the bcrypt hash of the password is kept.
    """

    __tablename__ = "admin_accounts"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        index=True,
        nullable=False,
    )
    password_hash: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )

    # Audit timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False
    )

    def __repr__(self) -> str:
        return f"<AdminAccount(id={self.id}, email={self.email})>"
