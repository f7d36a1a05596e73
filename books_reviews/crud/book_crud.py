import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import Row
from sqlmodel import delete, select
from sqlmodel.ext.asyncio.session import AsyncSession

from books_reviews.core.events import EntityEvent, WriteEventBus
from books_reviews.core.exception_utils import handle_exceptions
from books_reviews.core.exceptions import InternalServerError
from books_reviews.crud.base import BaseRepository
from books_reviews.crud.book_query import BookQuery
from books_reviews.crud.review_crud import ReviewRepository, review_repository
from books_reviews.models.book_model import Book
from books_reviews.schemas.book_schema import BookDetail, BookListItem
from books_reviews.schemas.review_schema import ReviewResponse

logger = logging.getLogger(__name__)


class BookRepository(BaseRepository[Book]):
    """Repository for all database operations related to the Book model."""

    def __init__(
        self,
        events: Optional[WriteEventBus] = None,
        reviews: Optional[ReviewRepository] = None,
    ):
        super().__init__(Book, events)
        self.reviews = reviews or review_repository
        self._logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    @handle_exceptions(
        default_exception=InternalServerError,
        message="An unexpected database error occurred.",
    )
    async def get(self, db: AsyncSession, *, obj_id: int) -> Optional[Book]:
        """Retrieves a book by its ID."""
        statement = select(self.model).where(self.model.id == obj_id)
        result = await db.execute(statement)
        return result.scalar_one_or_none()

    @handle_exceptions(
        default_exception=InternalServerError,
        message="An unexpected database error occurred.",
    )
    async def get_many(self, db: AsyncSession, *, query: BookQuery) -> List[BookListItem]:
        """Runs a composed ``BookQuery`` and returns the annotated rows in order."""
        result = await db.execute(query.compile())
        books = [self._to_list_item(row, query) for row in result.all()]

        self._logger.info(f"Retrieved {len(books)} books")
        return books

    @handle_exceptions(
        default_exception=InternalServerError,
        message="An unexpected database error occurred.",
    )
    async def get_details(self, db: AsyncSession, *, obj_id: int) -> Optional[BookDetail]:
        """
        Retrieves a book with both review aggregates and its reviews,
        newest first. Returns None when no book has this ID.
        """
        query = BookQuery().with_avg_rating().with_reviews_count()
        statement = query.compile().where(self.model.id == obj_id)
        row = (await db.execute(statement)).first()
        if row is None:
            return None

        reviews = await self.reviews.get_book_reviews(db, book_id=obj_id)

        return BookDetail(
            **self._to_list_item(row, query).model_dump(),
            reviews=[ReviewResponse.model_validate(review) for review in reviews],
        )

    @handle_exceptions(
        default_exception=InternalServerError,
        message="An unexpected database error occurred.",
    )
    async def create(self, db: AsyncSession, *, obj_in: Book) -> Book:
        """Create a new book. Expects a pre-constructed Book model object."""
        db.add(obj_in)
        await db.commit()
        await db.refresh(obj_in)
        self._logger.info(f"Book created: {obj_in.id}")

        await self._committed(EntityEvent.CREATED, obj_in)
        return obj_in

    @handle_exceptions(
        default_exception=InternalServerError,
        message="An unexpected database error occurred.",
    )
    async def update(
        self, db: AsyncSession, *, db_obj: Book, fields_to_update: Dict[str, Any]
    ) -> Book:
        """Updates specific fields of a book object."""
        for field, value in fields_to_update.items():
            setattr(db_obj, field, value)

        db.add(db_obj)
        await db.commit()
        await db.refresh(db_obj)

        self._logger.info(
            f"Book fields updated for {db_obj.id}: {list(fields_to_update.keys())}"
        )
        await self._committed(EntityEvent.UPDATED, db_obj)
        return db_obj

    @handle_exceptions(
        default_exception=InternalServerError,
        message="An unexpected database error occurred.",
    )
    async def delete(self, db: AsyncSession, *, obj_id: int) -> Optional[Book]:
        """Permanently delete a book by ID. Returns the deleted book, if any."""
        book = await self.get(db, obj_id=obj_id)
        if book is None:
            return None

        statement = delete(self.model).where(self.model.id == obj_id)
        await db.execute(statement)
        await db.commit()
        self._logger.info(f"Book hard deleted: {obj_id}")

        await self._committed(EntityEvent.DELETED, book)
        return book

    def _to_list_item(self, row: Row, query: BookQuery) -> BookListItem:
        book = row[0]
        aggregates = {name: row._mapping[name] for name in query.aggregate_names}
        return BookListItem(**book.model_dump(), **aggregates)


book_repository = BookRepository()
