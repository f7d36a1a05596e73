# books_reviews/services/invalidation.py
"""
Cache invalidation on entity writes.

- Review created, updated or deleted: evict the detail entry of its book.
- Book updated or deleted: evict ``"books:" + <book id>``.

The Book key never matches a listing key (``books:<filter>:<title>``), so
Book writes leave cached listings in place until their TTL expires.
Whether that gap is intended is an open question; the behavior is kept
as is and covered by tests.
"""

import logging

from books_reviews.core.events import EntityEvent, WriteEventBus
from books_reviews.models.book_model import Book
from books_reviews.models.review_model import Review
from books_reviews.services.cache_service import CacheService, cache_service

logger = logging.getLogger(__name__)


class CacheInvalidationHook:
    """Evicts cache entries made stale by a committed write."""

    def __init__(self, cache: CacheService):
        self.cache = cache

    def register(self, bus: WriteEventBus) -> None:
        bus.subscribe(
            Review,
            self.on_review_written,
            (EntityEvent.CREATED, EntityEvent.UPDATED, EntityEvent.DELETED),
        )
        bus.subscribe(
            Book, self.on_book_written, (EntityEvent.UPDATED, EntityEvent.DELETED)
        )

    async def on_review_written(self, event: EntityEvent, review: Review) -> None:
        logger.debug(f"Review {review.id} {event.value}, evicting book {review.book_id}")
        await self.cache.forget(self.cache.detail_key(review.book_id))

    async def on_book_written(self, event: EntityEvent, book: Book) -> None:
        logger.debug(f"Book {book.id} {event.value}")
        await self.cache.forget(f"books:{book.id}")


cache_invalidation = CacheInvalidationHook(cache_service)
