# books_reviews/utils/deps.py
"""
FastAPI dependencies.

Services are provided through these functions so tests can swap them
with ``app.dependency_overrides``.
"""

from books_reviews.services.book_service import BookService, book_service
from books_reviews.services.review_service import ReviewService, review_service


def get_book_service() -> BookService:
    return book_service


def get_review_service() -> ReviewService:
    return review_service
