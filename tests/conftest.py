import os

# Configure before any books_reviews module reads settings
os.environ.setdefault("CACHE_BACKEND", "memory")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

from datetime import datetime, timedelta, timezone
from typing import AsyncGenerator, Callable, Iterable, List, Optional

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from books_reviews.core.events import WriteEventBus
from books_reviews.crud.book_crud import BookRepository
from books_reviews.crud.review_crud import ReviewRepository
from books_reviews.db import base  # noqa: F401
from books_reviews.db.session import get_session
from books_reviews.main import app
from books_reviews.models.book_model import Book
from books_reviews.models.review_model import Review
from books_reviews.services.book_service import BookService
from books_reviews.services.cache_service import CacheService
from books_reviews.services.invalidation import CacheInvalidationHook
from books_reviews.services.review_service import ReviewService
from books_reviews.utils.deps import get_book_service, get_review_service
from tests.mocks.fake_clock import FakeClock
from tests.mocks.recording_cache_store import RecordingCacheStore

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


# --- Database ---


@pytest_asyncio.fixture
async def engine():
    """A fresh in-memory database per test."""
    test_engine = create_async_engine(
        TEST_DATABASE_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with test_engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield test_engine
    await test_engine.dispose()


@pytest_asyncio.fixture
async def db_session(engine) -> AsyncGenerator[AsyncSession, None]:
    session_factory = async_sessionmaker(
        bind=engine, class_=AsyncSession, expire_on_commit=False
    )
    async with session_factory() as session:
        yield session


# --- Cache & events ---


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache_store(clock: FakeClock) -> RecordingCacheStore:
    return RecordingCacheStore(clock=clock)


@pytest.fixture
def cache(cache_store: RecordingCacheStore) -> CacheService:
    return CacheService(cache_store)


@pytest.fixture
def event_bus() -> WriteEventBus:
    return WriteEventBus()


@pytest.fixture
def invalidation_hook(cache: CacheService, event_bus: WriteEventBus) -> CacheInvalidationHook:
    hook = CacheInvalidationHook(cache)
    hook.register(event_bus)
    return hook


@pytest.fixture
def book_repo(
    event_bus: WriteEventBus, invalidation_hook, review_repo: ReviewRepository
) -> BookRepository:
    """Book repository publishing to the test bus, with invalidation wired."""
    return BookRepository(events=event_bus, reviews=review_repo)


@pytest.fixture
def review_repo(event_bus: WriteEventBus, invalidation_hook) -> ReviewRepository:
    return ReviewRepository(events=event_bus)


@pytest.fixture
def book_service(book_repo: BookRepository, cache: CacheService) -> BookService:
    return BookService(repository=book_repo, cache=cache)


@pytest.fixture
def review_service(
    review_repo: ReviewRepository, book_repo: BookRepository
) -> ReviewService:
    return ReviewService(review_repo=review_repo, book_repo=book_repo)


# --- HTTP ---


@pytest_asyncio.fixture
async def test_client(
    db_session: AsyncSession,
    book_service: BookService,
    review_service: ReviewService,
) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client for API tests, with the session and services overridden."""

    async def override_get_session():
        yield db_session

    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_book_service] = lambda: book_service
    app.dependency_overrides[get_review_service] = lambda: review_service

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://testserver"
    ) as client:
        yield client

    app.dependency_overrides.clear()


# --- Test data ---


@pytest.fixture
def now() -> datetime:
    return datetime.now(timezone.utc)


@pytest.fixture
def make_book(db_session: AsyncSession, now: datetime) -> Callable:
    """Inserts a book directly, bypassing repository events."""

    async def _make_book(title: str, *, created_at: Optional[datetime] = None) -> Book:
        book = Book(title=title, created_at=created_at or now, updated_at=now)
        db_session.add(book)
        await db_session.commit()
        await db_session.refresh(book)
        return book

    return _make_book


@pytest.fixture
def add_reviews(db_session: AsyncSession, now: datetime) -> Callable:
    """
    Inserts reviews for a book directly. ``days_ago`` is one value per
    rating, or a single value for all of them.
    """

    async def _add_reviews(
        book: Book, ratings: Iterable[int], *, days_ago: int | Iterable[int] = 1
    ) -> List[Review]:
        ratings = list(ratings)
        ages = [days_ago] * len(ratings) if isinstance(days_ago, int) else list(days_ago)
        reviews = [
            Review(
                book_id=book.id,
                rating=rating,
                review=f"Rated {rating} stars.",
                created_at=now - timedelta(days=age),
                updated_at=now - timedelta(days=age),
            )
            for rating, age in zip(ratings, ages)
        ]
        db_session.add_all(reviews)
        await db_session.commit()
        return reviews

    return _add_reviews
