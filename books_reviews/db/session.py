# books_reviews/db/session.py
import logging
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from books_reviews.core.config import settings

logger = logging.getLogger(__name__)


class Database:
    """Owns the async engine and the session factory."""

    def __init__(self, url: str, *, echo: bool = False):
        self.engine: AsyncEngine = create_async_engine(url, echo=echo)
        self.session_factory = async_sessionmaker(
            bind=self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    async def connect(self) -> None:
        """Create tables for every registered model."""
        # Populate SQLModel.metadata before create_all
        from books_reviews.db import base  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.create_all)
        logger.info("Database connected")

    async def disconnect(self) -> None:
        await self.engine.dispose()
        logger.info("Database disconnected")


db = Database(settings.DATABASE_URL, echo=settings.DB_ECHO)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency yielding one session per request."""
    async with db.session_factory() as session:
        yield session
