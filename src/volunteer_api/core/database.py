"""
Database Configuration

Async SQLAlchemy engine, session factory and the FastAPI session dependency.
"""

import logging
from collections.abc import AsyncGenerator
from datetime import UTC, datetime

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from volunteer_api.core.config import settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Declarative base for all ORM models."""


def utcnow() -> datetime:
    """Timezone-aware current time, used as the default for audit columns."""
    return datetime.now(UTC)


def _engine_options(database_url: str) -> dict:
    options: dict = {"echo": settings.db_echo, "pool_pre_ping": True}

    # SQLite (tests, local experiments) uses a static pool that takes no sizing options
    if not database_url.startswith("sqlite"):
        options["pool_size"] = settings.db_pool_size
        options["pool_timeout"] = settings.db_pool_timeout

    return options


engine: AsyncEngine = create_async_engine(
    settings.database_url,
    **_engine_options(settings.database_url),
)

async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that yields a database session per request.

    Repositories commit explicitly; anything left uncommitted when the
    request fails is rolled back here.
    """
    async with async_session_maker() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise


async def ping_db() -> bool:
    """Return True if the database answers a trivial query."""
    async with async_session_maker() as session:
        result = await session.execute(text("SELECT 1"))
        return result.scalar() == 1


async def init_db() -> None:
    """
    Verify connectivity on startup.

    In development the tables are created directly from the models;
    every other environment is expected to run Alembic migrations.
    """
    # Import models so they are registered on Base.metadata
    from volunteer_api.modules.admins import models as _admin_models  # noqa: F401
    from volunteer_api.modules.applicants import models as _applicant_models  # noqa: F401

    async with engine.begin() as conn:
        await conn.execute(text("SELECT 1"))
        if settings.is_development:
            await conn.run_sync(Base.metadata.create_all)
            logger.info("Development mode: ensured database tables exist")


async def close_db() -> None:
    """Dispose of the connection pool."""
    await engine.dispose()
