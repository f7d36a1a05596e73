# books_reviews/schemas/review_schema.py
"""
Review schemas for request/response models.
"""

from datetime import datetime
from typing import Annotated, Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class ReviewBase(BaseModel):
    """Base schema for review data."""

    rating: Annotated[
        int, Field(ge=1, le=5, description="Rating from 1 to 5 stars", examples=[5])
    ]
    review: Annotated[
        str,
        Field(
            min_length=1,
            max_length=5000,
            description="Review text",
            examples=["A slow start but worth every page."],
        ),
    ]

    @field_validator("review")
    @classmethod
    def clean_review(cls, v: str) -> str:
        """Collapse excessive whitespace."""
        cleaned = " ".join(v.strip().split())
        if not cleaned:
            raise ValueError("Review text cannot be blank")
        return cleaned


class ReviewCreate(ReviewBase):
    """Schema for creating a review."""


class ReviewUpdate(BaseModel):
    """Schema for updating a review."""

    rating: Optional[
        Annotated[int, Field(ge=1, le=5, description="Updated rating", examples=[4])]
    ] = None
    review: Optional[
        Annotated[str, Field(min_length=1, max_length=5000, description="Updated text")]
    ] = None

    @model_validator(mode="before")
    @classmethod
    def validate_at_least_one_field(cls, values: Dict[str, Any]) -> Dict[str, Any]:
        """Ensure at least one field is provided for update."""
        if isinstance(values, dict) and not any(
            v is not None for v in values.values()
        ):
            raise ValueError("At least one field must be provided for update")
        return values


class ReviewResponse(ReviewBase):
    """Schema for review responses."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    book_id: int
    created_at: datetime
    updated_at: datetime
