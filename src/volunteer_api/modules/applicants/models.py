"""
Applicant Models

Database models for volunteer applications. Interests are stored as rows of
an association table keyed by (applicant_id, interest), so each record's
interests form a set and "has interest X" is an indexed EXISTS query on
every backend.
"""

import enum
import uuid
from datetime import datetime

from sqlalchemy import (
    Boolean,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    String,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from volunteer_api.core.database import Base, utcnow


class Interest(str, enum.Enum):
    """Volunteer interest areas offered on the form."""

    EDUCATION = "Education"
    TECH = "Tech"
    OUTREACH = "Outreach"
    HEALTHCARE = "Healthcare"
    ENVIRONMENT = "Environment"
    COMMUNITY_SERVICE = "Community Service"


class Availability(str, enum.Enum):
    """How much time the volunteer can commit."""

    FULL_TIME = "Full-time"
    PART_TIME = "Part-time"
    WEEKENDS = "Weekends"


def _enum_values(enum_cls: type[enum.Enum]) -> list[str]:
    # Persist the human-readable values ("Full-time"), not the member names
    return [member.value for member in enum_cls]


class Applicant(Base):
    """
    A volunteer application submitted through the public form.

    Only ``reviewed`` changes after creation, and only through the review
    toggle. Records are never deleted by the API.
    """

    __tablename__ = "applicants"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    full_name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    phone: Mapped[str | None] = mapped_column(String(20), nullable=True)
    availability: Mapped[Availability] = mapped_column(
        Enum(
            Availability,
            name="availability",
            native_enum=False,
            length=20,
            values_callable=_enum_values,
            validate_strings=True,
        ),
        nullable=False,
    )
    bio: Mapped[str | None] = mapped_column(String(300), nullable=True)

    # Review triage flag, toggled by admins
    reviewed: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    # Audit timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False
    )

    # Relationships
    interest_links: Mapped[list["ApplicantInterest"]] = relationship(
        "ApplicantInterest",
        back_populates="applicant",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="ApplicantInterest.position",
    )

    # email is indexed by its unique constraint
    __table_args__ = (
        Index("ix_applicants_reviewed", "reviewed"),
        Index("ix_applicants_created_at", "created_at"),
    )

    @property
    def interests(self) -> list[Interest]:
        """Interests in the order the applicant selected them."""
        return [link.interest for link in self.interest_links]

    def __repr__(self) -> str:
        return f"<Applicant(id={self.id}, email={self.email}, reviewed={self.reviewed})>"


class ApplicantInterest(Base):
    """One interest tag of one applicant."""

    __tablename__ = "applicant_interests"

    applicant_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("applicants.id", ondelete="CASCADE"),
        primary_key=True,
    )
    interest: Mapped[Interest] = mapped_column(
        Enum(
            Interest,
            name="interest",
            native_enum=False,
            length=32,
            values_callable=_enum_values,
            validate_strings=True,
        ),
        primary_key=True,
    )
    # Selection order on the form, for stable display
    position: Mapped[int] = mapped_column(default=0, nullable=False)

    applicant: Mapped["Applicant"] = relationship("Applicant", back_populates="interest_links")

    __table_args__ = (Index("ix_applicant_interests_interest", "interest"),)
