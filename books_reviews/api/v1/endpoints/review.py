import logging
from typing import Dict

from fastapi import APIRouter, Depends, status
from sqlmodel.ext.asyncio.session import AsyncSession

from books_reviews.core.config import settings
from books_reviews.db.session import get_session
from books_reviews.schemas.review_schema import (
    ReviewCreate,
    ReviewResponse,
    ReviewUpdate,
)
from books_reviews.services.review_service import ReviewService
from books_reviews.utils.deps import get_review_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Reviews"], prefix=settings.API_V1_STR)


@router.post(
    "/books/{book_id}/reviews",
    response_model=ReviewResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Review a book",
)
async def create_review(
    *,
    db: AsyncSession = Depends(get_session),
    service: ReviewService = Depends(get_review_service),
    book_id: int,
    review_data: ReviewCreate,
):
    """
    Create a review.

    - **rating**: 1 to 5
    - **review**: Review text
    """
    return await service.create_review(db=db, book_id=book_id, review_data=review_data)


@router.patch(
    "/reviews/{review_id}",
    response_model=ReviewResponse,
    status_code=status.HTTP_200_OK,
    summary="Update a review",
)
async def update_review(
    *,
    db: AsyncSession = Depends(get_session),
    service: ReviewService = Depends(get_review_service),
    review_id: int,
    review_data: ReviewUpdate,
):
    """Only provided fields will be updated."""
    return await service.update_review(
        db=db, review_id=review_id, review_data=review_data
    )


@router.delete(
    "/reviews/{review_id}",
    response_model=Dict[str, str],
    status_code=status.HTTP_200_OK,
    summary="Delete a review",
)
async def delete_review(
    *,
    db: AsyncSession = Depends(get_session),
    service: ReviewService = Depends(get_review_service),
    review_id: int,
):
    return await service.delete_review(db=db, review_id=review_id)
