import functools
import logging
from typing import Any, Callable, Optional, Type

from books_reviews.core.exceptions import BooksReviewsException, InternalServerError

logger = logging.getLogger(__name__)


def raise_for_status(
    *,
    condition: bool,
    exception: Type[BooksReviewsException],
    detail: Optional[str] = None,
    resource_type: Optional[str] = None,
    resource_id: Optional[Any] = None,
) -> None:
    """Raise ``exception`` when ``condition`` holds."""
    if condition:
        raise exception(
            detail, resource_type=resource_type, resource_id=resource_id
        )


def handle_exceptions(
    *,
    default_exception: Type[BooksReviewsException] = InternalServerError,
    message: Optional[str] = None,
) -> Callable:
    """
    Decorator for async repository methods.

    Application exceptions pass through untouched; anything else is logged
    and re-raised as ``default_exception``.
    """

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            try:
                return await func(*args, **kwargs)
            except BooksReviewsException:
                raise
            except Exception as e:
                logger.error(
                    f"Unhandled error in {func.__qualname__}: {e}",
                    exc_info=True,
                )
                raise default_exception(message) from e

        return wrapper

    return decorator
