from contextlib import asynccontextmanager
from fastapi import FastAPI

from books_reviews.core.config import settings
from books_reviews.core.events import write_events
from books_reviews.core.exception_handler import register_exception_handlers
from books_reviews.core.logging_config import configure_logging
from books_reviews.core.middleware import register_middlewares
from books_reviews.db.session import db
from books_reviews.services.invalidation import cache_invalidation

# Routers
from books_reviews.api.v1.endpoints import book, review


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Handles application startup and shutdown events.
    """
    await db.connect()

    yield

    await db.disconnect()


def create_application() -> FastAPI:
    """Create and configure the FastAPI application."""
    configure_logging()

    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        description=settings.DESCRIPTION,
        lifespan=lifespan,
    )

    register_middlewares(app)
    register_exception_handlers(app)

    # Review and Book writes evict the cache entries they make stale
    cache_invalidation.register(write_events)

    app.include_router(book.router)
    app.include_router(review.router)

    return app


app = create_application()


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}
