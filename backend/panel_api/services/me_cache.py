"""
Short-lived cache for `/api/me` payloads.

The panel refreshes `/api/me` often; caching the Discord answer for a few
seconds per user keeps us clear of Discord's rate limits.
Key pattern: me:{user_id}
"""
import json
import logging
from typing import Any, Optional

from redis.asyncio import Redis
from redis.exceptions import RedisError

logger = logging.getLogger(__name__)

KEY_PREFIX = "me"


class MeCache:
    """Read-through TTL cache backed by Redis."""

    def __init__(self, redis: Redis, default_ttl_ms: int):
        self.redis = redis
        self.default_ttl_ms = default_ttl_ms

    @staticmethod
    def _key(user_id: str) -> str:
        return f"{KEY_PREFIX}:{user_id}"

    async def get(self, user_id: Optional[str]) -> Optional[dict[str, Any]]:
        """Cached payload for a user, or None on miss (or if Redis is down)."""
        if not user_id:
            return None
        try:
            raw = await self.redis.get(self._key(user_id))
        except RedisError as e:
            logger.warning("me cache read failed: %s", e)
            return None
        return json.loads(raw) if raw else None

    async def set(
        self,
        user_id: Optional[str],
        payload: dict[str, Any],
        ttl_ms: Optional[int] = None,
    ) -> None:
        if not user_id:
            return
        ttl_ms = ttl_ms if ttl_ms is not None else self.default_ttl_ms
        try:
            await self.redis.set(self._key(user_id), json.dumps(payload, default=str), px=max(1, int(ttl_ms)))
        except RedisError as e:
            logger.warning("me cache write failed: %s", e)
