import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlmodel.ext.asyncio.session import AsyncSession

from books_reviews.core.config import settings
from books_reviews.db.session import get_session
from books_reviews.schemas.book_schema import BookDetail, BookListItem
from books_reviews.services.book_service import BookService
from books_reviews.utils.deps import get_book_service

logger = logging.getLogger(__name__)

router = APIRouter(
    tags=["Books"],
    prefix=f"{settings.API_V1_STR}/books",
)


@router.get(
    "",
    response_model=List[BookListItem],
    status_code=status.HTTP_200_OK,
    summary="List books",
    description="List books, optionally searched by title and ranked by a named filter",
)
async def list_books(
    *,
    db: AsyncSession = Depends(get_session),
    service: BookService = Depends(get_book_service),
    title: Optional[str] = Query(None, description="Substring of the book title"),
    filter: str = Query(
        "",
        description=(
            "popular_last_month, popular_last_6months, highest_rated_last_month "
            "or highest_rated_last_6months. Anything else lists newest first."
        ),
    ),
):
    """
    List books.

    - **title**: Only books whose title contains this text
    - **filter**: Named ranking; unknown values fall back to newest first
    """
    return await service.list_books(db=db, title=title, filter_name=filter)


@router.get(
    "/{book_id}",
    response_model=BookDetail,
    status_code=status.HTTP_200_OK,
    summary="Get book by id",
    description="Get a book with its reviews, newest first, and rating aggregates.",
)
async def get_book(
    *,
    db: AsyncSession = Depends(get_session),
    service: BookService = Depends(get_book_service),
    book_id: int,
):
    """Get book by its ID"""
    return await service.get_book_details(db=db, book_id=book_id)
