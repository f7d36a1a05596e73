# books_reviews/schemas/book_schema.py
"""
Book schemas for response models.

``reviews_count`` and ``reviews_avg_rating`` are per-query aggregates:
``None`` means the aggregate was not requested, or, for the average,
that no qualifying review exists. Callers must check before arithmetic.
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from books_reviews.schemas.review_schema import ReviewResponse


class BookListingFilter(str, Enum):
    """Named listing filters accepted by ``GET /books``."""

    POPULAR_LAST_MONTH = "popular_last_month"
    POPULAR_LAST_6MONTHS = "popular_last_6months"
    HIGHEST_RATED_LAST_MONTH = "highest_rated_last_month"
    HIGHEST_RATED_LAST_6MONTHS = "highest_rated_last_6months"


class BookResponse(BaseModel):
    """Basic book data."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    created_at: datetime
    updated_at: datetime


class BookListItem(BookResponse):
    """A book row of a listing, with the aggregates the listing requested."""

    reviews_count: Optional[int] = Field(
        default=None, ge=0, description="Number of reviews in the query window"
    )
    reviews_avg_rating: Optional[float] = Field(
        default=None, description="Average rating in the query window"
    )


class BookDetail(BookListItem):
    """A single book with its reviews, newest first."""

    reviews: List[ReviewResponse] = Field(default_factory=list)
