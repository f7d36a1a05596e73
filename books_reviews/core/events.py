# books_reviews/core/events.py
"""
Post-commit write events.

Repositories publish an ``EntityEvent`` for an instance after its write
has been committed. Subscribers run in registration order and are awaited
before the repository call returns, so their side effects are visible to
whoever performed the write.
"""

import logging
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Tuple, Type

logger = logging.getLogger(__name__)


class EntityEvent(str, Enum):
    CREATED = "created"
    UPDATED = "updated"
    DELETED = "deleted"


WriteHandler = Callable[[EntityEvent, Any], Awaitable[None]]


class WriteEventBus:
    """An observer list keyed by model type and event."""

    def __init__(self):
        self._handlers: Dict[Tuple[type, EntityEvent], List[WriteHandler]] = {}

    def subscribe(
        self,
        model_type: Type[Any],
        handler: WriteHandler,
        events: Iterable[EntityEvent] = tuple(EntityEvent),
    ) -> None:
        """Register ``handler``. Registering the same handler twice is a no-op."""
        for event in events:
            handlers = self._handlers.setdefault((model_type, event), [])
            if handler not in handlers:
                handlers.append(handler)

    def handlers_for(self, model_type: Type[Any], event: EntityEvent) -> List[WriteHandler]:
        return list(self._handlers.get((model_type, event), []))

    async def publish(self, event: EntityEvent, instance: Any) -> None:
        """Invoke every handler for ``type(instance)`` and ``event`` exactly once."""
        handlers = self.handlers_for(type(instance), event)
        logger.debug(
            f"Publishing {type(instance).__name__} {event.value}",
            extra={"event": event.value, "handlers": len(handlers)},
        )
        for handler in handlers:
            await handler(event, instance)


# Shared bus used by the application repositories
write_events = WriteEventBus()
