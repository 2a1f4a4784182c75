"""
Applicant Service Layer

Business logic for volunteer applications:

1. Submission (public):
   - Reject duplicate emails before insert, and again via the unique
     constraint if two submissions race
   - Persist the applicant with reviewed=False

2. Admin dashboard (authenticated at the router):
   - Filtered listing, newest first
   - Single-record lookup
   - Review flag toggle

Email addresses are compared in their normalized (lowercase) form.
"""

import logging
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from volunteer_api.core.errors import ErrorKind, ServiceError
from volunteer_api.modules.applicants import repository
from volunteer_api.modules.applicants.filters import ApplicantFilter
from volunteer_api.modules.applicants.models import Applicant
from volunteer_api.modules.applicants.schemas import ApplicantCreate

logger = logging.getLogger(__name__)


class DuplicateApplicantError(ServiceError):
    """Raised when an application with the same email already exists."""

    def __init__(self):
        super().__init__(
            kind=ErrorKind.CONFLICT,
            message="An application with this email already exists.",
            error_code="DUPLICATE_APPLICATION",
        )


class ApplicantNotFoundError(ServiceError):
    """Raised when no applicant has the requested id."""

    def __init__(self, applicant_id: UUID | None = None):
        message = f"Applicant {applicant_id} not found" if applicant_id else "Applicant not found"
        super().__init__(
            kind=ErrorKind.NOT_FOUND,
            message=message,
            error_code="APPLICANT_NOT_FOUND",
        )


async def submit_application(db: AsyncSession, data: ApplicantCreate) -> Applicant:
    """
    Create an applicant from a validated public submission.

    Args:
        db: Database session
        data: Validated form data

    Returns:
        The stored Applicant

    Raises:
        DuplicateApplicantError: If the email was already used
    """
    if await repository.get_by_email(db, data.email) is not None:
        logger.warning("Duplicate application attempt rejected")
        raise DuplicateApplicantError()

    try:
        applicant = await repository.create(db, data)
    except IntegrityError as e:
        # A concurrent submission with the same email won the insert
        await db.rollback()
        logger.warning("Duplicate application rejected by unique constraint")
        raise DuplicateApplicantError() from e

    logger.info(
        f"Application submitted: id={applicant.id}, "
        f"interests={[interest.value for interest in applicant.interests]}"
    )
    return applicant


async def list_applicants(db: AsyncSession, filters: ApplicantFilter) -> list[Applicant]:
    """Return applicants matching the filters, newest first. An empty list is not an error."""
    applicants = await repository.list_applicants(db, filters)

    logger.info(
        f"Listed applicants: search={'yes' if filters.search else 'no'}, "
        f"interest={filters.interest.value if filters.interest else None}, "
        f"reviewed={filters.reviewed}, found={len(applicants)}"
    )
    return applicants


async def get_applicant(db: AsyncSession, applicant_id: UUID) -> Applicant:
    """
    Get a single applicant.

    Raises:
        ApplicantNotFoundError: If the applicant doesn't exist
    """
    applicant = await repository.get_by_id(db, applicant_id)

    if applicant is None:
        logger.warning(f"Applicant not found: {applicant_id}")
        raise ApplicantNotFoundError(applicant_id)

    return applicant


async def toggle_review_status(
    db: AsyncSession,
    applicant_id: UUID,
    admin_id: UUID | None = None,
) -> Applicant:
    """
    Flip an applicant's reviewed flag.

    Applying this twice restores the original value.

    Raises:
        ApplicantNotFoundError: If the applicant doesn't exist
    """
    applicant = await repository.toggle_reviewed(db, applicant_id)

    if applicant is None:
        logger.warning(f"Cannot toggle review, applicant not found: {applicant_id}")
        raise ApplicantNotFoundError(applicant_id)

    logger.info(
        f"Admin {admin_id} marked applicant {applicant_id} as "
        f"{'reviewed' if applicant.reviewed else 'unreviewed'}"
    )
    return applicant
