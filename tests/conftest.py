"""
Shared fixtures.

Settings are read once at import time, so the test environment is written to
os.environ before anything from volunteer_api is imported.
"""

import os

os.environ.setdefault("PYTHON_ENV", "test")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-that-is-at-least-32-characters")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("ADMIN_SETUP_TOKEN", "operator-setup-token")

from unittest.mock import AsyncMock, MagicMock  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool  # noqa: E402

from volunteer_api.core.database import Base, get_db  # noqa: E402
from volunteer_api.core.rate_limit import reset_memory_store  # noqa: E402
from volunteer_api.main import app  # noqa: E402
from volunteer_api.modules.admins import models as _admin_models  # noqa: E402, F401
from volunteer_api.modules.applicants import models as _applicant_models  # noqa: E402, F401
from volunteer_api.modules.applicants.models import Availability, Interest  # noqa: E402
from volunteer_api.modules.applicants.schemas import ApplicantCreate  # noqa: E402


@pytest.fixture
def mock_db():
    """Create a mock database session."""
    db = AsyncMock()
    db.commit = AsyncMock()
    db.refresh = AsyncMock()
    db.rollback = AsyncMock()
    db.get = AsyncMock()
    db.execute = AsyncMock()
    db.add = MagicMock()
    return db


@pytest.fixture(autouse=True)
def clear_rate_limits():
    """Start every test with empty in-memory rate limit counters."""
    reset_memory_store()
    yield
    reset_memory_store()


@pytest_asyncio.fixture
async def engine():
    """A fresh in-memory SQLite database with every table created."""
    test_engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield test_engine

    await test_engine.dispose()


@pytest.fixture
def session_maker(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_maker):
    """A real session against the in-memory database."""
    async with session_maker() as session:
        yield session


@pytest_asyncio.fixture
async def client(session_maker):
    """HTTP client for the app, with get_db bound to the in-memory database."""

    async def override_get_db():
        async with session_maker() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as http_client:
        yield http_client

    app.dependency_overrides.clear()


@pytest.fixture
def sample_applicant_create():
    """A valid submission."""
    return ApplicantCreate(
        full_name="Jane Doe",
        email="jane@example.org",
        phone="555-0100",
        interests=[Interest.TECH, Interest.EDUCATION],
        availability=Availability.WEEKENDS,
        bio="Software developer who likes teaching.",
    )


@pytest.fixture
def sample_applicant_payload():
    """A valid submission as the UI client sends it (camelCase JSON)."""
    return {
        "fullName": "Jane Doe",
        "email": "jane@example.org",
        "phone": "555-0100",
        "interests": ["Tech", "Education"],
        "availability": "Weekends",
        "bio": "Software developer who likes teaching.",
    }
