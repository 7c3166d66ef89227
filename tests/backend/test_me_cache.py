"""
Tests for the Redis-backed /api/me cache.
"""

import pytest
from unittest.mock import AsyncMock, MagicMock
from redis.exceptions import ConnectionError as RedisConnectionError

from panel_api.services.me_cache import MeCache


class TestMeCache:

    @pytest.mark.asyncio
    async def test_round_trip(self, mock_async_redis):
        cache = MeCache(mock_async_redis, default_ttl_ms=15000)

        await cache.set("111", {"user": {"id": "111"}, "guilds": []})

        assert await cache.get("111") == {"user": {"id": "111"}, "guilds": []}

    @pytest.mark.asyncio
    async def test_default_ttl_applied(self, mock_async_redis):
        cache = MeCache(mock_async_redis, default_ttl_ms=15000)

        await cache.set("111", {"a": 1})

        ttl = await mock_async_redis.pttl("me:111")
        assert 0 < ttl <= 15000

    @pytest.mark.asyncio
    async def test_explicit_ttl(self, mock_async_redis):
        cache = MeCache(mock_async_redis, default_ttl_ms=15000)

        await cache.set("111", {"error": "Discord rate limited"}, ttl_ms=250)

        ttl = await mock_async_redis.pttl("me:111")
        assert 0 < ttl <= 250

    @pytest.mark.asyncio
    async def test_miss_and_missing_user(self, mock_async_redis):
        cache = MeCache(mock_async_redis, default_ttl_ms=15000)

        assert await cache.get("nobody") is None
        assert await cache.get(None) is None

    @pytest.mark.asyncio
    async def test_redis_failure_is_a_miss(self):
        """A Redis outage degrades to uncached calls instead of failing /api/me."""
        redis = MagicMock()
        redis.get = AsyncMock(side_effect=RedisConnectionError("down"))
        redis.set = AsyncMock(side_effect=RedisConnectionError("down"))
        cache = MeCache(redis, default_ttl_ms=15000)

        assert await cache.get("111") is None
        await cache.set("111", {"a": 1})
