from abc import ABC, abstractmethod
from typing import Any, Generic, Optional, TypeVar

from sqlmodel.ext.asyncio.session import AsyncSession

from books_reviews.core.events import EntityEvent, WriteEventBus, write_events

T = TypeVar("T")


class BaseRepository(ABC, Generic[T]):
    """Abstract base repository providing consistent interface for database operations."""

    def __init__(self, model: type[T], events: Optional[WriteEventBus] = None):
        self.model = model
        self.events = events if events is not None else write_events

    @abstractmethod
    async def get(self, db: AsyncSession, *, obj_id: int) -> Optional[T]:
        """Get entity by its primary key."""
        pass

    @abstractmethod
    async def create(self, db: AsyncSession, *, obj_in: T) -> T:
        """Create a new entity."""
        pass

    @abstractmethod
    async def update(self, db: AsyncSession, *, db_obj: T, fields_to_update: Any) -> T:
        """Update an existing entity."""
        pass

    @abstractmethod
    async def delete(self, db: AsyncSession, *, obj_id: Any) -> Optional[T]:
        """Delete an entity by its primary key."""
        pass

    async def _committed(self, event: EntityEvent, instance: T) -> None:
        """Notify subscribers once the write for ``instance`` is committed."""
        await self.events.publish(event, instance)
