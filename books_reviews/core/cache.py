# books_reviews/core/cache.py
"""
Cache stores for the application.

A store is a plain key/value map of strings with a per-key TTL and an
explicit delete. ``RedisCacheStore`` is used in deployments,
``InMemoryCacheStore`` for local runs and tests. Failures of the backing
store surface as ``CacheUnavailable``; there is no fallback to an
uncached read.
"""

import asyncio
import logging
import time
from typing import Callable, Dict, Optional, Protocol, Tuple

from redis import asyncio as aioredis
from redis.exceptions import RedisError

from books_reviews.core.config import settings
from books_reviews.core.exceptions import CacheUnavailable

logger = logging.getLogger(__name__)


class CacheStore(Protocol):
    async def get(self, key: str) -> Optional[str]: ...

    async def set(self, key: str, value: str, ttl: int) -> None: ...

    async def delete(self, key: str) -> bool: ...


class RedisCacheStore:
    """Store backed by a ``redis.asyncio`` client."""

    def __init__(self, client: aioredis.Redis):
        self.client = client

    async def get(self, key: str) -> Optional[str]:
        try:
            return await self.client.get(key)
        except (RedisError, OSError) as e:
            logger.error(f"Cache read failed for key: {key}", exc_info=True)
            raise CacheUnavailable(f"Cache read failed for key '{key}'.") from e

    async def set(self, key: str, value: str, ttl: int) -> None:
        try:
            await self.client.set(key, value, ex=ttl)
        except (RedisError, OSError) as e:
            logger.error(f"Cache write failed for key: {key}", exc_info=True)
            raise CacheUnavailable(f"Cache write failed for key '{key}'.") from e

    async def delete(self, key: str) -> bool:
        try:
            return bool(await self.client.delete(key))
        except (RedisError, OSError) as e:
            logger.error(f"Cache delete failed for key: {key}", exc_info=True)
            raise CacheUnavailable(f"Cache delete failed for key '{key}'.") from e


class InMemoryCacheStore:
    """
    Process-local store with TTL expiry.

    ``clock`` returns seconds; tests pass a controllable clock to move
    entries past their expiry.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._entries: Dict[str, Tuple[str, float]] = {}
        self._lock = asyncio.Lock()

    async def get(self, key: str) -> Optional[str]:
        async with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            value, expires_at = entry
            if self._clock() >= expires_at:
                del self._entries[key]
                return None
            return value

    async def set(self, key: str, value: str, ttl: int) -> None:
        async with self._lock:
            now = self._clock()
            self._purge_expired(now)
            self._entries[key] = (value, now + ttl)

    async def delete(self, key: str) -> bool:
        async with self._lock:
            return self._entries.pop(key, None) is not None

    def keys(self) -> list[str]:
        """Keys currently held, expired or not."""
        return list(self._entries)

    def _purge_expired(self, now: float) -> None:
        # Expired entries that were never read back
        expired = [key for key, (_, expires_at) in self._entries.items() if now >= expires_at]
        for key in expired:
            del self._entries[key]


def build_cache_store() -> CacheStore:
    """Create the store selected by ``CACHE_BACKEND``."""
    if settings.CACHE_BACKEND == "memory":
        logger.info("Using in-memory cache store")
        return InMemoryCacheStore()

    from books_reviews.db.redis_conn import redis_client

    logger.info("Using Redis cache store")
    return RedisCacheStore(redis_client)
