import logging
from typing import Any, Awaitable, Callable, Optional, TypeVar

from pydantic import TypeAdapter

from books_reviews.core.cache import CacheStore, build_cache_store
from books_reviews.core.config import settings

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CacheService:
    """
    Read-through cache for book listings and book details.

    Values are stored as JSON produced by a pydantic ``TypeAdapter`` and
    decoded again on every hit, so each caller gets its own copy.
    """

    CACHE_TTL = settings.CACHE_TTL

    def __init__(self, store: CacheStore):
        self.store = store
        self._adapters: dict[Any, TypeAdapter] = {}

    # ---- keys ----

    @staticmethod
    def listing_key(title: Optional[str], filter_name: Optional[str]) -> str:
        """
        Key for a listing. The review window of a filter is not part of
        the key, so a windowed listing stays cached until its TTL expires
        even after the window has moved.

        The parts are joined with ":" unescaped, so distinct requests can
        share a key: ``(title="b:", filter_name="a")`` and
        ``(title=None, filter_name="a:b")`` both map to ``books:a:b:`` and
        are served the same cached listing.
        """
        return f"books:{filter_name or ''}:{title or ''}"

    @staticmethod
    def detail_key(book_id: Any) -> str:
        return f"book:{book_id}"

    # ---- operations ----

    async def remember(
        self,
        key: str,
        ttl: int,
        producer: Callable[[], Awaitable[T]],
        *,
        schema: Any,
    ) -> T:
        """
        Return the value cached under ``key``; on a miss await ``producer``,
        store its result for ``ttl`` seconds and return it.

        Exceptions from ``producer`` propagate and leave the key unset.
        """
        adapter = self._adapter(schema)

        cached = await self.store.get(key)
        if cached is not None:
            logger.debug(f"Cache hit: {key}")
            return adapter.validate_json(cached)

        logger.debug(f"Cache miss: {key}")
        value = await producer()
        await self.store.set(key, adapter.dump_json(value).decode(), ttl)
        return value

    async def forget(self, key: str) -> bool:
        """Evict ``key``. Evicting an absent key is a no-op."""
        removed = await self.store.delete(key)
        logger.info(f"Cache key evicted: {key}", extra={"removed": removed})
        return removed

    def _adapter(self, schema: Any) -> TypeAdapter:
        adapter = self._adapters.get(schema)
        if adapter is None:
            adapter = self._adapters[schema] = TypeAdapter(schema)
        return adapter


# Create a single, reusable instance for the rest of the application
cache_service = CacheService(build_cache_store())
