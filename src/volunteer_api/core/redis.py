"""
Redis Connection

Redis only backs the rate limiter. The client is published after a successful
ping, so ``get_redis()`` returning a client means the server answered at
startup; None means the limiter counts in process memory instead.
"""

import logging

from redis.asyncio import Redis, from_url

from volunteer_api.core.config import settings

logger = logging.getLogger(__name__)

# Seconds; a slow Redis must not stall login or submission requests
REDIS_SOCKET_TIMEOUT = 2.0

_client: Redis | None = None


async def init_redis() -> Redis:
    """
    Connect to REDIS_URL and verify the server answers.

    Raises:
        redis.exceptions.RedisError: If the server cannot be reached
    """
    global _client
    client = from_url(
        settings.redis_url,
        decode_responses=True,
        socket_timeout=REDIS_SOCKET_TIMEOUT,
        socket_connect_timeout=REDIS_SOCKET_TIMEOUT,
    )
    try:
        await client.ping()
    except Exception:
        await client.aclose()
        raise

    _client = client
    logger.debug(f"Redis client ready at {settings.redis_url.rsplit('@', 1)[-1]}")
    return client


def get_redis() -> Redis | None:
    """The connected client, or None when rate limiting runs in memory."""
    return _client


async def close_redis() -> None:
    global _client
    if _client is not None:
        await _client.aclose()
        _client = None
