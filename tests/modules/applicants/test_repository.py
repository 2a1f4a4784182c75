"""
Tests for the applicant repository against SQLite.

These tests cover:
- Insert and lookup
- Email uniqueness
- Newest-first ordering
- Filter composition
- The review toggle, including concurrent toggles of one row
"""

import asyncio
from datetime import datetime, timedelta
from uuid import uuid4

import pytest
import pytest_asyncio
from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from volunteer_api.core.database import Base
from volunteer_api.modules.applicants import repository
from volunteer_api.modules.applicants.filters import ApplicantFilter
from volunteer_api.modules.applicants.models import Applicant, Availability, Interest
from volunteer_api.modules.applicants.schemas import ApplicantCreate


def _create_data(name: str, email: str, interests: list[Interest]) -> ApplicantCreate:
    return ApplicantCreate(
        full_name=name,
        email=email,
        interests=interests,
        availability=Availability.PART_TIME,
    )


async def _set_created_at(db, applicant_id, created_at: datetime) -> None:
    await db.execute(
        update(Applicant).where(Applicant.id == applicant_id).values(created_at=created_at)
    )
    await db.commit()


@pytest.fixture
def seed(db_session):
    """Insert three applicants with distinct, known creation times (oldest first)."""

    async def _seed():
        base = datetime(2026, 1, 1, 12, 0, 0)
        rows = [
            ("Jane Doe", "jane@example.org", [Interest.TECH, Interest.EDUCATION]),
            ("John Smith", "john@example.org", [Interest.HEALTHCARE]),
            ("Ann Lee", "ann@janeco.example.org", [Interest.TECH]),
        ]
        created = []
        for offset, (name, email, interests) in enumerate(rows):
            applicant = await repository.create(db_session, _create_data(name, email, interests))
            await _set_created_at(db_session, applicant.id, base + timedelta(minutes=offset))
            created.append(applicant)
        return created

    return _seed


async def _names(db, filters: ApplicantFilter) -> list[str]:
    return [applicant.full_name for applicant in await repository.list_applicants(db, filters)]


class TestCreate:
    """Tests for repository.create."""

    @pytest.mark.asyncio
    async def test_create_and_get(self, db_session, session_maker, sample_applicant_create):
        applicant = await repository.create(db_session, sample_applicant_create)

        # Read back through a separate session so nothing comes from the identity map
        async with session_maker() as other_session:
            fetched = await repository.get_by_id(other_session, applicant.id)

        assert fetched is not None
        assert fetched.id == applicant.id
        assert fetched.full_name == sample_applicant_create.full_name
        assert fetched.email == sample_applicant_create.email
        assert fetched.phone == sample_applicant_create.phone
        assert fetched.interests == sample_applicant_create.interests
        assert fetched.availability == sample_applicant_create.availability
        assert fetched.bio == sample_applicant_create.bio
        assert fetched.reviewed is False
        assert fetched.created_at is not None

    @pytest.mark.asyncio
    async def test_get_by_email(self, db_session, sample_applicant_create):
        applicant = await repository.create(db_session, sample_applicant_create)

        assert (await repository.get_by_email(db_session, "jane@example.org")).id == applicant.id
        assert await repository.get_by_email(db_session, "nobody@example.org") is None

    @pytest.mark.asyncio
    async def test_get_unknown_id(self, db_session):
        assert await repository.get_by_id(db_session, uuid4()) is None

    @pytest.mark.asyncio
    async def test_duplicate_email_violates_unique_constraint(
        self, db_session, sample_applicant_create
    ):
        await repository.create(db_session, sample_applicant_create)

        with pytest.raises(IntegrityError):
            await repository.create(db_session, sample_applicant_create)


class TestListApplicants:
    """Tests for filtered listing."""

    @pytest.mark.asyncio
    async def test_empty_store(self, db_session):
        assert await repository.list_applicants(db_session, ApplicantFilter()) == []

    @pytest.mark.asyncio
    async def test_newest_first(self, db_session, seed):
        await seed()

        assert await _names(db_session, ApplicantFilter()) == [
            "Ann Lee",
            "John Smith",
            "Jane Doe",
        ]

    @pytest.mark.asyncio
    async def test_search_matches_name_or_email_case_insensitively(self, db_session, seed):
        await seed()

        # "JANE" matches Jane Doe by name and Ann Lee by email domain
        assert await _names(db_session, ApplicantFilter(search="JANE")) == [
            "Ann Lee",
            "Jane Doe",
        ]

    @pytest.mark.asyncio
    async def test_search_wildcards_are_literal(self, db_session, seed):
        await seed()

        assert await _names(db_session, ApplicantFilter(search="%")) == []
        assert await _names(db_session, ApplicantFilter(search="_")) == []

    @pytest.mark.asyncio
    async def test_interest_filter(self, db_session, seed):
        await seed()

        assert await _names(db_session, ApplicantFilter(interest=Interest.TECH)) == [
            "Ann Lee",
            "Jane Doe",
        ]
        assert await _names(db_session, ApplicantFilter(interest=Interest.OUTREACH)) == []

    @pytest.mark.asyncio
    async def test_reviewed_filter(self, db_session, seed):
        jane, _john, _ann = await seed()
        await repository.toggle_reviewed(db_session, jane.id)

        assert await _names(db_session, ApplicantFilter(reviewed=True)) == ["Jane Doe"]
        assert await _names(db_session, ApplicantFilter(reviewed=False)) == [
            "Ann Lee",
            "John Smith",
        ]

    @pytest.mark.asyncio
    async def test_filters_combine_with_and(self, db_session, seed):
        jane, _john, _ann = await seed()
        await repository.toggle_reviewed(db_session, jane.id)

        filters = ApplicantFilter(search="jane", interest=Interest.TECH, reviewed=False)

        assert await _names(db_session, filters) == ["Ann Lee"]


class TestToggleReviewed:
    """Tests for the atomic review toggle."""

    @pytest.mark.asyncio
    async def test_toggle_flips_and_restores(self, db_session, sample_applicant_create):
        applicant = await repository.create(db_session, sample_applicant_create)

        first = await repository.toggle_reviewed(db_session, applicant.id)
        assert first.reviewed is True

        second = await repository.toggle_reviewed(db_session, applicant.id)
        assert second.reviewed is False

    @pytest.mark.asyncio
    async def test_toggle_changes_only_reviewed(self, db_session, sample_applicant_create):
        applicant = await repository.create(db_session, sample_applicant_create)
        before = (applicant.full_name, applicant.email, applicant.interests, applicant.bio)

        toggled = await repository.toggle_reviewed(db_session, applicant.id)

        assert (toggled.full_name, toggled.email, toggled.interests, toggled.bio) == before

    @pytest.mark.asyncio
    async def test_toggle_unknown_id(self, db_session):
        assert await repository.toggle_reviewed(db_session, uuid4()) is None


@pytest_asyncio.fixture
async def file_session_maker(tmp_path):
    """Sessions on a file-backed database, each with its own connection."""
    file_engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'toggle.db'}",
        connect_args={"timeout": 30},
    )
    async with file_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(file_engine, class_=AsyncSession, expire_on_commit=False)

    await file_engine.dispose()


class TestConcurrentToggle:
    """Concurrent toggles of the same applicant must all take effect."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(("toggles", "expected"), [(7, True), (8, False)])
    async def test_concurrent_toggles_keep_parity(
        self, file_session_maker, sample_applicant_create, toggles, expected
    ):
        async with file_session_maker() as db:
            applicant = await repository.create(db, sample_applicant_create)

        async def toggle_once():
            async with file_session_maker() as db:
                return await repository.toggle_reviewed(db, applicant.id)

        results = await asyncio.gather(*(toggle_once() for _ in range(toggles)))

        assert all(result is not None for result in results)

        async with file_session_maker() as db:
            stored = await repository.get_by_id(db, applicant.id)

        assert stored.reviewed is expected
