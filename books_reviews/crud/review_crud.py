import logging
from typing import Any, Dict, List, Optional

from sqlmodel import delete, select
from sqlmodel.ext.asyncio.session import AsyncSession

from books_reviews.core.events import EntityEvent, WriteEventBus
from books_reviews.core.exception_utils import handle_exceptions
from books_reviews.core.exceptions import InternalServerError
from books_reviews.crud.base import BaseRepository
from books_reviews.models.review_model import Review

logger = logging.getLogger(__name__)


class ReviewRepository(BaseRepository[Review]):
    """Repository for all database operations related to the Review model."""

    def __init__(self, events: Optional[WriteEventBus] = None):
        super().__init__(Review, events)
        self._logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    @handle_exceptions(
        default_exception=InternalServerError,
        message="An unexpected database error occurred.",
    )
    async def get(self, db: AsyncSession, *, obj_id: int) -> Optional[Review]:
        """Get a review by its id"""
        statement = select(self.model).where(self.model.id == obj_id)
        result = await db.execute(statement)
        return result.scalar_one_or_none()

    @handle_exceptions(
        default_exception=InternalServerError,
        message="An unexpected database error occurred.",
    )
    async def get_book_reviews(self, db: AsyncSession, *, book_id: int) -> List[Review]:
        """Get reviews for a book, newest first"""
        statement = (
            select(self.model)
            .where(self.model.book_id == book_id)
            .order_by(self.model.created_at.desc(), self.model.id.desc())
        )
        result = await db.execute(statement)
        return list(result.scalars().all())

    @handle_exceptions(
        default_exception=InternalServerError,
        message="An unexpected database error occurred.",
    )
    async def create(self, db: AsyncSession, *, obj_in: Review) -> Review:
        """Create a review"""
        db.add(obj_in)
        await db.commit()
        await db.refresh(obj_in)
        self._logger.info(f"Review created: {obj_in.id}")

        await self._committed(EntityEvent.CREATED, obj_in)
        return obj_in

    @handle_exceptions(
        default_exception=InternalServerError,
        message="An unexpected database error occurred.",
    )
    async def update(
        self, db: AsyncSession, *, db_obj: Review, fields_to_update: Dict[str, Any]
    ) -> Review:
        """Update a review"""
        for field, value in fields_to_update.items():
            setattr(db_obj, field, value)

        db.add(db_obj)
        await db.commit()
        await db.refresh(db_obj)

        self._logger.info(
            f"Review fields updated for {db_obj.id}: {list(fields_to_update.keys())}"
        )
        await self._committed(EntityEvent.UPDATED, db_obj)
        return db_obj

    @handle_exceptions(
        default_exception=InternalServerError,
        message="An unexpected database error occurred.",
    )
    async def delete(self, db: AsyncSession, *, obj_id: int) -> Optional[Review]:
        """Delete a review. Returns the deleted review, if any."""
        review = await self.get(db, obj_id=obj_id)
        if review is None:
            return None

        statement = delete(self.model).where(self.model.id == obj_id)
        await db.execute(statement)
        await db.commit()
        self._logger.info(f"Review hard deleted: {obj_id}")

        await self._committed(EntityEvent.DELETED, review)
        return review


review_repository = ReviewRepository()
