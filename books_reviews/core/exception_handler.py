import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from books_reviews.core.exceptions import BooksReviewsException

logger = logging.getLogger(__name__)


async def books_reviews_exception_handler(
    request: Request, exc: BooksReviewsException
) -> JSONResponse:
    request_id = getattr(request.state, "request_id", None)
    log = logger.warning if exc.status_code < 500 else logger.error
    log(
        f"{exc.error_code}: {exc.detail}",
        extra={
            "request_id": request_id,
            "path": request.url.path,
            "status_code": exc.status_code,
        },
    )
    return JSONResponse(
        status_code=exc.status_code, content=exc.to_dict(), headers=exc.headers
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "Unhandled exception",
        exc_info=exc,
        extra={
            "request_id": getattr(request.state, "request_id", None),
            "path": request.url.path,
        },
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "detail": "An unexpected error occurred.",
            "error_code": "INTERNAL_ERROR",
        },
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Registers the application exception handlers."""
    app.add_exception_handler(BooksReviewsException, books_reviews_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
