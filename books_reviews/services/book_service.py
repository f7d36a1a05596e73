import logging
from datetime import datetime
from typing import List, Optional

from sqlmodel.ext.asyncio.session import AsyncSession

from books_reviews.core.exception_utils import raise_for_status
from books_reviews.core.exceptions import ResourceNotFound, ValidationError
from books_reviews.crud.book_crud import BookRepository, book_repository
from books_reviews.schemas.book_schema import BookDetail, BookListItem
from books_reviews.services.cache_service import CacheService, cache_service
from books_reviews.services.listing_resolver import resolve_listing

logger = logging.getLogger(__name__)


class BookService:
    """
    Read side of the book catalogue: listings and book details, both
    served through the read-through cache.
    """

    def __init__(
        self,
        repository: Optional[BookRepository] = None,
        cache: Optional[CacheService] = None,
    ):
        self.book_repository = repository or book_repository
        self.cache = cache or cache_service
        self._logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    # ======= READ OPERATIONS =======
    async def list_books(
        self,
        db: AsyncSession,
        *,
        title: Optional[str] = None,
        filter_name: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> List[BookListItem]:
        """List books for a title search and a named filter."""
        query = resolve_listing(title, filter_name, now=now)
        cache_key = self.cache.listing_key(title, filter_name)

        books = await self.cache.remember(
            cache_key,
            self.cache.CACHE_TTL,
            lambda: self.book_repository.get_many(db=db, query=query),
            schema=List[BookListItem],
        )

        self._logger.info(
            f"Book list retrieved : {len(books)} books returned",
            extra={"cache_key": cache_key},
        )
        return books

    async def get_book_details(self, db: AsyncSession, *, book_id: int) -> BookDetail:
        """
        Gets a book with its reviews and aggregates. Raises ResourceNotFound
        for an unknown ID; nothing is cached in that case.
        """
        if book_id <= 0:
            raise ValidationError("Book ID must be a positive integer")

        async def load_book() -> BookDetail:
            book = await self.book_repository.get_details(db=db, obj_id=book_id)
            raise_for_status(
                condition=book is None,
                exception=ResourceNotFound,
                resource_type="Book",
                resource_id=book_id,
            )
            return book

        return await self.cache.remember(
            self.cache.detail_key(book_id),
            self.cache.CACHE_TTL,
            load_book,
            schema=BookDetail,
        )


book_service = BookService()
