import logging
from typing import Dict, Optional

from sqlmodel.ext.asyncio.session import AsyncSession

from books_reviews.core.exception_utils import raise_for_status
from books_reviews.core.exceptions import ResourceNotFound, ValidationError
from books_reviews.crud.book_crud import BookRepository, book_repository
from books_reviews.crud.review_crud import ReviewRepository, review_repository
from books_reviews.models.review_model import Review
from books_reviews.schemas.review_schema import ReviewCreate, ReviewUpdate

logger = logging.getLogger(__name__)


class ReviewService:
    """
    Write side for reviews. Cache invalidation is not done here: the
    repository publishes write events and the invalidation hook reacts.
    """

    def __init__(
        self,
        review_repo: Optional[ReviewRepository] = None,
        book_repo: Optional[BookRepository] = None,
    ):
        self.review_repository = review_repo or review_repository
        self.book_repository = book_repo or book_repository
        self._logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    async def get_review_by_id(self, db: AsyncSession, *, review_id: int) -> Review:
        """Get a review by its ID"""
        if review_id <= 0:
            raise ValidationError("Review ID must be a positive integer")

        review = await self.review_repository.get(db=db, obj_id=review_id)
        raise_for_status(
            condition=review is None,
            exception=ResourceNotFound,
            resource_type="Review",
            resource_id=review_id,
        )
        return review

    # ========CREATE======
    async def create_review(
        self, db: AsyncSession, *, book_id: int, review_data: ReviewCreate
    ) -> Review:
        """Create a review for an existing book"""
        book = await self.book_repository.get(db=db, obj_id=book_id)
        raise_for_status(
            condition=book is None,
            exception=ResourceNotFound,
            resource_type="Book",
            resource_id=book_id,
        )

        review_to_create = Review(**review_data.model_dump(), book_id=book.id)
        new_review = await self.review_repository.create(db=db, obj_in=review_to_create)

        self._logger.info(
            f"New review created: {new_review.id}", extra={"book_id": book_id}
        )
        return new_review

    # ========UPDATE======
    async def update_review(
        self, db: AsyncSession, *, review_id: int, review_data: ReviewUpdate
    ) -> Review:
        """Review update using review_id"""
        review_to_update = await self.get_review_by_id(db=db, review_id=review_id)

        update_dict = review_data.model_dump(exclude_unset=True, exclude_none=True)

        updated_review = await self.review_repository.update(
            db=db, db_obj=review_to_update, fields_to_update=update_dict
        )

        self._logger.info(
            f"Review {review_id} updated",
            extra={"updated_review_id": review_id, "updated_fields": list(update_dict)},
        )
        return updated_review

    # ========DELETE=======
    async def delete_review(self, db: AsyncSession, *, review_id: int) -> Dict[str, str]:
        """Delete review by its ID"""
        await self.get_review_by_id(db=db, review_id=review_id)
        await self.review_repository.delete(db=db, obj_id=review_id)

        self._logger.warning(
            f"Review {review_id} permanently deleted",
            extra={"deleted_review_id": review_id},
        )
        return {"message": "Review deleted successfully"}


review_service = ReviewService()
