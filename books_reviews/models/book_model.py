# books_reviews/models/book_model.py
"""
Book model definition.

A Book owns zero-or-more Reviews. Review aggregates (count, average
rating) are never stored on the row; they are computed per query, see
``books_reviews.crud.book_query``.
"""

from datetime import datetime, timezone
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import Index, func
from sqlmodel import Column, DateTime, Field, Relationship, SQLModel

if TYPE_CHECKING:
    from books_reviews.models.review_model import Review


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class BookBase(SQLModel):
    title: str = Field(
        min_length=1,
        max_length=255,
        description="The title of the book",
        schema_extra={"example": "Dune"},
    )


class Book(BookBase, table=True):
    __tablename__ = "books"
    __table_args__ = (
        Index("idx_book_title", "title"),
        Index("idx_book_created_at", "created_at"),
    )

    id: Optional[int] = Field(
        default=None, primary_key=True, description="A unique constraint for Book"
    )

    created_at: Optional[datetime] = Field(
        default=None,
        sa_column=Column(
            DateTime(timezone=True),
            default=utcnow,
            server_default=func.now(),
            nullable=False,
        ),
        description="Book creation timestamp",
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
        description="Book last updated timestamp",
    )

    # Loaded explicitly by the repository, never lazily.
    reviews: List["Review"] = Relationship(
        back_populates="book", sa_relationship_kwargs={"lazy": "raise"}
    )

    def __repr__(self) -> str:
        return f"<Book(id={self.id}, title='{self.title}')>"
