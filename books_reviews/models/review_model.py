from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import CheckConstraint, Index, func
from sqlmodel import Column, DateTime, Field, Relationship, SQLModel, Text

from books_reviews.models.book_model import utcnow

if TYPE_CHECKING:
    from books_reviews.models.book_model import Book


class ReviewBase(SQLModel):
    rating: int = Field(
        ...,
        ge=1,
        le=5,
        description="Rating from 1 to 5 stars",
        schema_extra={"example": 5},
    )
    review: str = Field(
        ...,
        min_length=1,
        description="Review text",
        schema_extra={"example": "A slow start but worth every page."},
    )


class Review(ReviewBase, table=True):

    __tablename__ = "reviews"
    __table_args__ = (
        Index("idx_review_book_id", "book_id"),
        Index("idx_review_created_at", "created_at"),
        CheckConstraint("rating >= 1 AND rating <= 5", name="ck_review_rating"),
    )

    id: Optional[int] = Field(
        primary_key=True, default=None, description="Unique constraint for Review"
    )

    review: str = Field(sa_column=Column(Text, nullable=False))

    book_id: int = Field(
        foreign_key="books.id", nullable=False, description="ID of the reviewed book"
    )

    # Timestamps
    created_at: Optional[datetime] = Field(
        default=None,
        sa_column=Column(
            DateTime(timezone=True),
            default=utcnow,
            server_default=func.now(),
            nullable=False,
        ),
        description="Review creation timestamp",
    )
    updated_at: Optional[datetime] = Field(
        default=None,
        sa_column=Column(
            DateTime(timezone=True),
            default=utcnow,
            onupdate=utcnow,
            server_default=func.now(),
            nullable=False,
        ),
        description="Last update timestamp",
    )

    book: Optional["Book"] = Relationship(
        back_populates="reviews", sa_relationship_kwargs={"lazy": "raise"}
    )

    def __repr__(self) -> str:
        return f"<Review(id={self.id}, book_id={self.book_id}, rating={self.rating})>"
