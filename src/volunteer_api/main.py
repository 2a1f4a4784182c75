"""
Volunteer Intake API - Main Application Entry Point

This module initializes and configures the FastAPI application including:
- Logging
- Database and Redis connections
- CORS middleware
- Exception handlers
- API routing
- Health check endpoints
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from volunteer_api import __version__
from volunteer_api.api import api_router
from volunteer_api.core.config import settings
from volunteer_api.core.database import close_db, init_db, ping_db
from volunteer_api.core.errors import StoreUnavailableError, register_exception_handlers
from volunteer_api.core.logging import configure_logging
from volunteer_api.core.redis import close_redis, init_redis

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    """
    Application lifespan manager.

    A database that cannot be reached at boot is fatal: the exception
    propagates and the server exits instead of serving degraded traffic.
    Redis only backs rate limiting and is fatal in production alone.
    """
    # Startup
    configure_logging()
    logger.info(f"Starting {settings.app_name} in {settings.python_env} mode...")

    try:
        await init_redis()
        logger.info("[OK] Redis connected")
    except Exception as e:
        logger.error(f"[FAIL] Redis connection failed: {e}")
        if settings.is_production:
            raise
        logger.warning("Rate limiting will use in-process counters")

    try:
        await init_db()
        logger.info("[OK] Database connected")
    except Exception:
        logger.exception("[FAIL] Database connection failed; shutting down")
        await close_redis()
        raise

    yield  # Application runs here

    # Shutdown
    logger.info(f"Shutting down {settings.app_name}...")
    await close_redis()
    await close_db()
    logger.info("[OK] Cleanup complete")


app = FastAPI(
    title=settings.app_name,
    description="Volunteer application intake form API with an admin review dashboard",
    version=__version__,
    docs_url="/docs" if settings.is_development else None,
    redoc_url="/redoc" if settings.is_development else None,
    lifespan=lifespan,
)

register_exception_handlers(app)

app.include_router(api_router, prefix="/api")

# CORS configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/", tags=["Root"])
async def root() -> dict:
    """Root endpoint - API banner."""
    return {
        "message": settings.app_name,
        "version": __version__,
        "environment": settings.python_env,
        "endpoints": {
            "applicants": "/api/applicants",
            "admin": "/api/admin",
            "health": "/api/health",
        },
    }


@app.get("/api/health", tags=["Health"])
async def health_check() -> dict[str, str]:
    """Liveness check."""
    return {"status": "healthy"}


@app.get("/api/ready", tags=["Health"])
async def readiness_check() -> dict[str, str]:
    """Readiness check: the database must answer."""
    try:
        await ping_db()
    except Exception as e:
        logger.error(f"Readiness check failed: {e!r}")
        raise StoreUnavailableError() from e
    return {"status": "ready"}
