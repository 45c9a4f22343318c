"""
In-memory event bus used to deliver document events.

The document store publishes an event each time a new document appears;
the trigger registry subscribes and hands the event to the matching
record-creation handlers. On a managed platform this is the job of the
platform's event delivery.

Design decisions:
- Synchronous delivery in subscription order
- Type-based subscriptions
- A handler that raises is logged and skipped; the publisher never sees it
- Published events are kept in a log for inspection and tests
"""

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Optional
from uuid import uuid4

from shared.clock import utc_now

logger = logging.getLogger("event_bus")


class EventTypes:
    """Event type names published on the bus."""
    DOCUMENT_CREATED = "DocumentCreated"


@dataclass
class Event:
    """
    Something that happened, as delivered to subscribers.

    Attributes:
        event_type: Routing key (see EventTypes)
        payload: Event-specific data
        source: Component that published the event
        event_id: Unique id of this delivery
        timestamp: When the event was published
    """
    event_type: str
    payload: dict[str, Any]
    source: str
    event_id: str = field(default_factory=lambda: str(uuid4()))
    timestamp: datetime = field(default_factory=utc_now)

    def __str__(self) -> str:
        return f"Event({self.event_type}, id={self.event_id[:8]}, source={self.source})"


EventHandler = Callable[[Event], None]


def document_created(path: str, data: dict[str, Any], source: str = "document_store") -> Event:
    """Build the event published when a new document is written."""
    return Event(
        event_type=EventTypes.DOCUMENT_CREATED,
        source=source,
        payload={"path": path, "data": data},
    )


class EventBus:
    """
    Simple in-memory pub/sub.

    Example:
        bus = EventBus()
        bus.subscribe(EventTypes.DOCUMENT_CREATED, lambda e: print(e.payload["path"]))
        bus.publish(document_created("users/u1", {"email": "a@example.com"}))
    """

    def __init__(self):
        self._subscribers: dict[str, list[EventHandler]] = defaultdict(list)
        self._event_log: list[Event] = []

    def subscribe(self, event_type: str, handler: EventHandler) -> None:
        """Call ``handler`` for every event of ``event_type``."""
        self._subscribers[event_type].append(handler)
        logger.debug(f"Subscribed handler to '{event_type}' events")

    def unsubscribe(self, event_type: str, handler: EventHandler) -> bool:
        """
        Remove a handler.

        Returns:
            True if the handler was subscribed, False otherwise
        """
        try:
            self._subscribers[event_type].remove(handler)
            return True
        except ValueError:
            return False

    def publish(self, event: Event) -> int:
        """
        Deliver an event to its subscribers.

        Returns:
            Number of handlers the event was delivered to
        """
        self._event_log.append(event)

        logger.debug(f"Publishing: {event}")

        handlers = list(self._subscribers.get(event.event_type, []))
        for handler in handlers:
            try:
                handler(event)
            except Exception as e:
                logger.error(f"Handler raised exception for {event}: {e}")

        return len(handlers)

    def get_event_log(self, event_type: Optional[str] = None) -> list[Event]:
        """Published events, optionally filtered by type."""
        if event_type is None:
            return self._event_log.copy()
        return [e for e in self._event_log if e.event_type == event_type]

