# tests/services/test_review_service.py
import pytest

from books_reviews.core.exceptions import ResourceNotFound, ValidationError
from books_reviews.schemas.review_schema import ReviewCreate, ReviewUpdate
from books_reviews.services.review_service import ReviewService

# Mark all tests in this file as async
pytestmark = pytest.mark.asyncio


async def test_create_review_success(db_session, review_service: ReviewService, make_book):
    book = await make_book("Dune")

    review = await review_service.create_review(
        db=db_session,
        book_id=book.id,
        review_data=ReviewCreate(rating=5, review="  A  classic. "),
    )

    assert review.id is not None
    assert review.book_id == book.id
    assert review.review == "A classic."


async def test_create_review_for_missing_book(db_session, review_service: ReviewService):
    with pytest.raises(ResourceNotFound):
        await review_service.create_review(
            db=db_session,
            book_id=99999,
            review_data=ReviewCreate(rating=3, review="Never existed."),
        )


async def test_update_review_changes_only_given_fields(
    db_session, review_service: ReviewService, make_book, add_reviews
):
    book = await make_book("Dune")
    (review,) = await add_reviews(book, [2])

    updated = await review_service.update_review(
        db=db_session, review_id=review.id, review_data=ReviewUpdate(rating=4)
    )

    assert updated.rating == 4
    assert updated.review == "Rated 2 stars."


async def test_update_missing_review(db_session, review_service: ReviewService):
    with pytest.raises(ResourceNotFound):
        await review_service.update_review(
            db=db_session, review_id=99999, review_data=ReviewUpdate(rating=4)
        )


async def test_delete_review(db_session, review_service: ReviewService, review_repo, make_book, add_reviews):
    book = await make_book("Dune")
    (review,) = await add_reviews(book, [2])

    result = await review_service.delete_review(db=db_session, review_id=review.id)

    assert result == {"message": "Review deleted successfully"}
    assert await review_repo.get(db=db_session, obj_id=review.id) is None


async def test_get_review_rejects_non_positive_id(db_session, review_service: ReviewService):
    with pytest.raises(ValidationError):
        await review_service.get_review_by_id(db=db_session, review_id=0)


async def test_update_schema_requires_a_field():
    with pytest.raises(ValueError):
        ReviewUpdate()
