import logging
import sys

from volunteer_api.core.config import settings


def configure_logging() -> None:
    """
    Configure logging for the whole app.
    Called from the FastAPI lifespan at startup. Handlers already installed by
    the host process (uvicorn --log-config, pytest) are left in place.
    """
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s [%(levelname)s] %(name)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    # SQL echo is controlled by DB_ECHO, not by the root level
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
