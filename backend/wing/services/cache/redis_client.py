"""
Redis cache client.

Short-lived JSON cache for routed indicator responses.
Falls back to an in-process dict when Redis is unavailable.
"""

import json
import logging
import time
from typing import Any, Callable, Dict, Optional, Tuple

import redis.asyncio as redis

from wing.core.config import settings

logger = logging.getLogger(__name__)

# Global Redis connection pool
_redis_pool: Optional[redis.Redis] = None


async def init_redis() -> Optional[redis.Redis]:
    """
    Initialize Redis connection pool.
    Called on application startup.
    """
    global _redis_pool

    if _redis_pool is not None:
        return _redis_pool

    try:
        _redis_pool = redis.from_url(
            settings.redis_url,
            encoding="utf-8",
            decode_responses=True,
        )
        # Test connection
        await _redis_pool.ping()
        logger.info(f"Redis connected: {settings.redis_url}")
        return _redis_pool
    except Exception as e:
        logger.warning(f"Redis connection failed: {e}. Using in-memory fallback.")
        _redis_pool = None
        return None


async def close_redis() -> None:
    """Close Redis connection pool."""
    global _redis_pool
    if _redis_pool:
        await _redis_pool.aclose()
        _redis_pool = None
        logger.info("Redis connection closed")


def get_redis() -> Optional[redis.Redis]:
    """Get the Redis connection pool."""
    return _redis_pool


class JsonCache:
    """
    JSON value cache with TTL.

    Keys are namespaced by the caller, e.g.
    - indicator:RSI:f:NVDA:14 → JSON list of points
    """

    def __init__(
        self,
        redis_client: Optional[redis.Redis] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._redis = redis_client
        self._clock = clock
        # In-memory fallback: key -> (expires_at, serialized value)
        self._memory_cache: Dict[str, Tuple[float, str]] = {}

    @property
    def redis(self) -> Optional[redis.Redis]:
        return self._redis or _redis_pool

    def _memory_get(self, key: str) -> Optional[str]:
        entry = self._memory_cache.get(key)
        if entry is None:
            return None
        expires_at, value = entry
        if expires_at < self._clock():
            del self._memory_cache[key]
            return None
        return value

    def _memory_set(self, key: str, value: str, ex: int):
        now = self._clock()
        expired = [k for k, (expires_at, _) in self._memory_cache.items() if expires_at < now]
        for k in expired:
            del self._memory_cache[k]
        self._memory_cache[key] = (now + ex, value)

    async def get_json(self, key: str) -> Optional[Any]:
        """Cached value or None."""
        if self.redis:
            try:
                value = await self.redis.get(key)
                return json.loads(value) if value else None
            except Exception as e:
                logger.debug(f"Redis get failed for {key}: {e}")

        value = self._memory_get(key)
        return json.loads(value) if value else None

    async def set_json(self, key: str, data: Any, ttl: int = 300) -> bool:
        value = json.dumps(data, ensure_ascii=False)

        if self.redis:
            try:
                await self.redis.set(key, value, ex=ttl)
                return True
            except Exception as e:
                logger.debug(f"Redis set failed for {key}: {e}")

        self._memory_set(key, value, ttl)
        return True

    async def delete(self, key: str) -> None:
        if self.redis:
            try:
                await self.redis.delete(key)
            except Exception as e:
                logger.debug(f"Redis delete failed for {key}: {e}")
        self._memory_cache.pop(key, None)


# Singleton instance
_json_cache: Optional[JsonCache] = None


def get_json_cache() -> JsonCache:
    """Get the JSON cache singleton."""
    global _json_cache
    if _json_cache is None:
        _json_cache = JsonCache()
    return _json_cache
