"""
Rate Limiting Module

Sliding-window rate limiting backed by Redis sorted sets, with an in-memory
fallback when Redis is not connected.

Both backends count only admitted requests: a rejected request is not
recorded, so a client that keeps retrying regains access once its earlier
requests leave the window.

Applied to the public endpoints that an attacker can hammer:
- Admin login (brute force)
- Admin registration
- Applicant submission (form spam)
"""

import logging
import time
import uuid

from fastapi import Request

from volunteer_api.core.config import settings
from volunteer_api.core.errors import ErrorKind, ServiceError
from volunteer_api.core.redis import get_redis

logger = logging.getLogger(__name__)

# In-memory rate limit storage (fallback when Redis unavailable)
# Format: {key: [timestamp, ...]}
_memory_store: dict[str, list[float]] = {}
# Format: {key: time at which its newest timestamp leaves the window}
_memory_expiry: dict[str, float] = {}

# Every N memory checks, keys whose window has fully passed are dropped
MEMORY_SWEEP_INTERVAL = 500
_memory_checks = 0

# KEYS[1] = key; ARGV = window_start, limit, now, member, window_seconds
# Returns 1 if admitted (and recorded), 0 if rejected (and not recorded)
_SLIDING_WINDOW_SCRIPT = """
redis.call('ZREMRANGEBYSCORE', KEYS[1], 0, ARGV[1])
if redis.call('ZCARD', KEYS[1]) >= tonumber(ARGV[2]) then
    return 0
end
redis.call('ZADD', KEYS[1], ARGV[3], ARGV[4])
redis.call('EXPIRE', KEYS[1], ARGV[5])
return 1
"""


class RateLimitExceeded(ServiceError):
    """Raised when a client exceeds the allowed request rate."""

    def __init__(self, limit: int, window_seconds: int):
        super().__init__(
            kind=ErrorKind.RATE_LIMITED,
            message=f"Rate limit exceeded. Maximum {limit} requests per {window_seconds} seconds.",
            error_code="RATE_LIMIT_EXCEEDED",
            headers={"Retry-After": str(window_seconds)},
        )


async def _check_rate_limit_redis(
    client,
    key: str,
    limit: int,
    window_seconds: int,
) -> bool:
    """
    Check rate limit using Redis.

    Uses a sliding window with a sorted set scored by request time. The
    trim, count and conditional insert run as one Lua script, so concurrent
    requests cannot both take the last slot.

    Returns:
        True if request is allowed, False if rate limit exceeded
    """
    now = time.time()
    window_start = now - window_seconds
    # Unique member so two requests in the same instant both count
    member = f"{now}:{uuid.uuid4().hex}"

    script = client.register_script(_SLIDING_WINDOW_SCRIPT)
    admitted = await script(
        keys=[key],
        args=[window_start, limit, now, member, max(window_seconds, 1)],
    )

    return int(admitted) == 1


def _sweep_memory_store(now: float) -> None:
    expired = [key for key, expires_at in _memory_expiry.items() if expires_at <= now]
    for key in expired:
        _memory_store.pop(key, None)
        _memory_expiry.pop(key, None)


def _check_rate_limit_memory(
    key: str,
    limit: int,
    window_seconds: int,
) -> bool:
    """
    Check rate limit using in-memory storage.

    Fallback when Redis is unavailable. Only limits within this process.
    """
    global _memory_checks

    now = time.time()
    window_start = now - window_seconds

    _memory_checks += 1
    if _memory_checks % MEMORY_SWEEP_INTERVAL == 0:
        _sweep_memory_store(now)

    timestamps = [ts for ts in _memory_store.get(key, []) if ts > window_start]

    if len(timestamps) >= limit:
        _memory_store[key] = timestamps
        return False

    timestamps.append(now)
    _memory_store[key] = timestamps
    _memory_expiry[key] = now + window_seconds
    return True


async def check_rate_limit(key: str, limit: int, window_seconds: int) -> bool:
    """
    Check if a request is within rate limits.

    Tries Redis first, falls back to in-memory storage.

    Args:
        key: Unique key for this rate limit (e.g., "login:203.0.113.5")
        limit: Maximum requests allowed in the window
        window_seconds: Time window in seconds

    Returns:
        True if request is allowed, False if rate limit exceeded
    """
    client = get_redis()

    if client is not None:
        try:
            return await _check_rate_limit_redis(client, key, limit, window_seconds)
        except Exception as e:
            logger.warning(f"Redis rate limit check failed, using memory: {e}")

    return _check_rate_limit_memory(key, limit, window_seconds)


def client_ip(request: Request) -> str:
    return request.client.host if request.client else "unknown"


class RateLimiter:
    """
    FastAPI dependency enforcing a per-client-IP limit on one action.

    Usage:
        @router.post("/login", dependencies=[Depends(RateLimiter("login", 10, 60))])
    """

    def __init__(self, action: str, limit: int, window_seconds: int):
        self.action = action
        self.limit = limit
        self.window_seconds = window_seconds

    async def __call__(self, request: Request) -> None:
        if not settings.rate_limit_enabled:
            return

        key = f"rate_limit:{self.action}:{client_ip(request)}"
        allowed = await check_rate_limit(key, self.limit, self.window_seconds)

        if not allowed:
            logger.warning(f"Rate limit exceeded for {key}: {self.limit}/{self.window_seconds}s")
            raise RateLimitExceeded(self.limit, self.window_seconds)


def reset_memory_store() -> None:
    """Clear the in-memory fallback counters."""
    global _memory_checks
    _memory_store.clear()
    _memory_expiry.clear()
    _memory_checks = 0


__all__ = [
    "RateLimiter",
    "RateLimitExceeded",
    "check_rate_limit",
    "client_ip",
    "reset_memory_store",
]
