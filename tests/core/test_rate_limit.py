"""
Tests for the sliding-window rate limiter.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from volunteer_api.core import rate_limit
from volunteer_api.core.rate_limit import RateLimiter, RateLimitExceeded, check_rate_limit


@pytest.fixture
def mock_redis():
    """Create a mock Redis client whose sliding-window script admits requests."""
    redis = MagicMock()
    redis.register_script.return_value = AsyncMock(return_value=1)
    return redis


def _request(host: str = "203.0.113.5"):
    request = MagicMock()
    request.client.host = host
    return request


class TestCheckRateLimit:
    """Tests for check_rate_limit."""

    @pytest.mark.asyncio
    async def test_memory_fallback_allows_up_to_limit(self):
        with patch("volunteer_api.core.rate_limit.get_redis", return_value=None):
            results = [await check_rate_limit("k", limit=3, window_seconds=60) for _ in range(4)]

        assert results == [True, True, True, False]

    @pytest.mark.asyncio
    async def test_memory_keys_are_independent(self):
        with patch("volunteer_api.core.rate_limit.get_redis", return_value=None):
            assert await check_rate_limit("a", limit=1, window_seconds=60) is True
            assert await check_rate_limit("b", limit=1, window_seconds=60) is True
            assert await check_rate_limit("a", limit=1, window_seconds=60) is False

    @pytest.mark.asyncio
    async def test_memory_rejections_are_not_recorded(self):
        clock = MagicMock()

        with (
            patch("volunteer_api.core.rate_limit.get_redis", return_value=None),
            patch("volunteer_api.core.rate_limit.time", clock),
        ):
            clock.time.return_value = 1000.0
            assert await check_rate_limit("k", limit=1, window_seconds=60) is True

            # Retrying inside the window is refused but does not extend the lockout
            clock.time.return_value = 1050.0
            assert await check_rate_limit("k", limit=1, window_seconds=60) is False

            clock.time.return_value = 1061.0
            assert await check_rate_limit("k", limit=1, window_seconds=60) is True

    @pytest.mark.asyncio
    async def test_memory_sweep_drops_expired_keys(self):
        clock = MagicMock()

        with (
            patch("volunteer_api.core.rate_limit.get_redis", return_value=None),
            patch("volunteer_api.core.rate_limit.time", clock),
            patch("volunteer_api.core.rate_limit.MEMORY_SWEEP_INTERVAL", 100),
        ):
            clock.time.return_value = 1000.0
            for i in range(99):
                await check_rate_limit(f"ip-{i}", limit=5, window_seconds=60)
            assert len(rate_limit._memory_store) == 99

            # The 100th check runs after every earlier window has closed
            clock.time.return_value = 1061.0
            await check_rate_limit("ip-new", limit=5, window_seconds=60)

        assert set(rate_limit._memory_store) == {"ip-new"}
        assert set(rate_limit._memory_expiry) == {"ip-new"}

    @pytest.mark.asyncio
    async def test_memory_sweep_keeps_live_keys(self):
        clock = MagicMock()

        with (
            patch("volunteer_api.core.rate_limit.get_redis", return_value=None),
            patch("volunteer_api.core.rate_limit.time", clock),
            patch("volunteer_api.core.rate_limit.MEMORY_SWEEP_INTERVAL", 2),
        ):
            clock.time.return_value = 1000.0
            await check_rate_limit("live", limit=1, window_seconds=60)

            clock.time.return_value = 1030.0
            await check_rate_limit("other", limit=1, window_seconds=60)

            # "live" is still inside its window, so it stays limited
            assert await check_rate_limit("live", limit=1, window_seconds=60) is False

        assert set(rate_limit._memory_store) == {"live", "other"}

    @pytest.mark.asyncio
    async def test_redis_admitted(self, mock_redis):
        with patch("volunteer_api.core.rate_limit.get_redis", return_value=mock_redis):
            allowed = await check_rate_limit("k", limit=3, window_seconds=60)

        assert allowed is True
        script = mock_redis.register_script.return_value
        kwargs = script.call_args.kwargs
        assert kwargs["keys"] == ["k"]
        # window_start, limit, now, member, ttl
        assert kwargs["args"][1] == 3
        assert kwargs["args"][4] == 60

    @pytest.mark.asyncio
    async def test_redis_rejected(self, mock_redis):
        mock_redis.register_script.return_value = AsyncMock(return_value=0)

        with patch("volunteer_api.core.rate_limit.get_redis", return_value=mock_redis):
            allowed = await check_rate_limit("k", limit=3, window_seconds=60)

        assert allowed is False

    def test_redis_script_only_records_admitted_requests(self):
        script = rate_limit._SLIDING_WINDOW_SCRIPT
        assert script.index("return 0") < script.index("ZADD")

    @pytest.mark.asyncio
    async def test_redis_failure_falls_back_to_memory(self, mock_redis):
        mock_redis.register_script.return_value = AsyncMock(side_effect=ConnectionError())

        with patch("volunteer_api.core.rate_limit.get_redis", return_value=mock_redis):
            assert await check_rate_limit("k", limit=1, window_seconds=60) is True
            assert await check_rate_limit("k", limit=1, window_seconds=60) is False


class TestRateLimiter:
    """Tests for the RateLimiter dependency."""

    @pytest.mark.asyncio
    async def test_disabled_limiter_never_blocks(self):
        limiter = RateLimiter("login", limit=1, window_seconds=60)

        with patch("volunteer_api.core.rate_limit.settings", MagicMock(rate_limit_enabled=False)):
            for _ in range(5):
                await limiter(_request())

    @pytest.mark.asyncio
    async def test_raises_once_limit_is_hit(self):
        limiter = RateLimiter("login", limit=2, window_seconds=60)

        with (
            patch("volunteer_api.core.rate_limit.settings", MagicMock(rate_limit_enabled=True)),
            patch("volunteer_api.core.rate_limit.get_redis", return_value=None),
        ):
            await limiter(_request())
            await limiter(_request())

            with pytest.raises(RateLimitExceeded) as exc_info:
                await limiter(_request())

            # A different client has its own budget
            await limiter(_request("198.51.100.7"))

        assert exc_info.value.status_code == 429
        assert exc_info.value.headers == {"Retry-After": "60"}
