"""
Applicant Repository

Database operations for volunteer applications.

Design Principles:
- All queries are parameterized (no SQL injection)
- Single responsibility - only database operations, no business logic
- Single-record atomic operations; no multi-record transactions
"""

from uuid import UUID

from sqlalchemy import not_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from volunteer_api.core.database import utcnow
from volunteer_api.modules.applicants.filters import ApplicantFilter
from volunteer_api.modules.applicants.models import Applicant, ApplicantInterest
from volunteer_api.modules.applicants.schemas import ApplicantCreate


async def create(db: AsyncSession, data: ApplicantCreate) -> Applicant:
    """
    Create a new applicant record.

    Raises:
        IntegrityError: If the email is already used (unique constraint)
    """
    new_applicant = Applicant(
        full_name=data.full_name,
        email=data.email,
        phone=data.phone,
        availability=data.availability,
        bio=data.bio,
        reviewed=False,
        interest_links=[
            ApplicantInterest(interest=interest, position=position)
            for position, interest in enumerate(data.interests)
        ],
    )

    db.add(new_applicant)
    await db.commit()
    await db.refresh(new_applicant)

    return new_applicant


async def get_by_id(db: AsyncSession, id: UUID) -> Applicant | None:
    """Get applicant by ID."""
    return await db.get(Applicant, id)


async def get_by_email(db: AsyncSession, email: str) -> Applicant | None:
    """Get applicant by (normalized) email."""
    result = await db.execute(select(Applicant).where(Applicant.email == email))
    return result.scalar_one_or_none()


async def list_applicants(db: AsyncSession, filters: ApplicantFilter) -> list[Applicant]:
    """
    List applicants matching the filter, newest first.

    Args:
        db: Database session
        filters: Parsed dashboard filters

    Returns:
        Matching applicants ordered by created_at descending
    """
    query = (
        select(Applicant)
        .where(filters.predicate())
        .order_by(Applicant.created_at.desc())
    )

    result = await db.execute(query)
    return list(result.scalars().all())


async def toggle_reviewed(db: AsyncSession, id: UUID) -> Applicant | None:
    """
    Flip the reviewed flag of one applicant.

    The negation happens inside a single UPDATE statement, so the database
    serializes concurrent toggles of the same row and none is lost.

    Returns:
        The applicant as stored after the update, or None if no row matched
    """
    stmt = (
        update(Applicant)
        .where(Applicant.id == id)
        .values(reviewed=not_(Applicant.reviewed), updated_at=utcnow())
        .execution_options(synchronize_session=False)
    )

    result = await db.execute(stmt)
    await db.commit()

    if result.rowcount == 0:
        return None

    return await db.get(Applicant, id, populate_existing=True)
