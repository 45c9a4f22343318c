"""
Record-creation triggers.

A trigger binds a path pattern such as ``users/{userId}`` to a handler.
The registry listens for ``DocumentCreated`` events on the store's event bus
and calls every handler whose pattern matches the new document's path.

Design decisions:
- Patterns match whole paths only: ``users/{userId}`` fires for ``users/u1``
  but not for ``users/u1/cart/metadata``
- Handlers get the snapshot and a TriggerContext carrying the wildcard values
- Handler return values are logged and otherwise ignored; exceptions are
  logged by the event bus and never reach the writer
- Delivery is at-least-once in spirit: ``redeliver`` replays a past event
"""

import logging
import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Optional

from shared.clock import utc_now
from shared.document_store import DocumentSnapshot, split_path
from shared.event_bus import Event, EventBus, EventTypes

logger = logging.getLogger("triggers")

_WILDCARD = re.compile(r"^\{([A-Za-z_][A-Za-z0-9_]*)\}$")


@dataclass
class TriggerContext:
    """What a trigger handler knows about the event besides the document."""
    params: dict[str, str]
    event_id: str
    timestamp: datetime = field(default_factory=utc_now)


TriggerHandler = Callable[[DocumentSnapshot, TriggerContext], Any]


class PathPattern:
    """
    A document path with ``{name}`` wildcard segments.

    Example:
        PathPattern("orders/{orderId}").match("orders/o1")  # {"orderId": "o1"}
    """

    def __init__(self, pattern: str):
        self.pattern = pattern
        self.segments = split_path(pattern)
        if len(self.segments) % 2 != 0:
            raise ValueError(f"Trigger pattern must name a document: {pattern!r}")

    def match(self, path: str) -> Optional[dict[str, str]]:
        segments = split_path(path)
        if len(segments) != len(self.segments):
            return None
        params = {}
        for expected, actual in zip(self.segments, segments):
            wildcard = _WILDCARD.match(expected)
            if wildcard:
                params[wildcard.group(1)] = actual
            elif expected != actual:
                return None
        return params

    def __str__(self) -> str:
        return self.pattern


@dataclass
class Trigger:
    name: str
    pattern: PathPattern
    handler: TriggerHandler


class TriggerRegistry:
    """
    Routes document-created events to record-creation handlers.

    Example:
        registry = TriggerRegistry(store.event_bus)
        registry.on_create("users/{userId}", bootstrap.on_user_created, name="onUserCreated")
        registry.start()
    """

    def __init__(self, event_bus: EventBus):
        self.event_bus = event_bus
        self._triggers: list[Trigger] = []
        self._started = False

    def on_create(self, pattern: str, handler: TriggerHandler, name: Optional[str] = None) -> Trigger:
        trigger = Trigger(name=name or handler.__name__, pattern=PathPattern(pattern), handler=handler)
        self._triggers.append(trigger)
        logger.debug(f"Registered trigger {trigger.name} on {pattern}")
        return trigger

    @property
    def triggers(self) -> list[Trigger]:
        return list(self._triggers)

    def start(self) -> None:
        if self._started:
            logger.warning("TriggerRegistry already started")
            return
        self.event_bus.subscribe(EventTypes.DOCUMENT_CREATED, self._dispatch)
        self._started = True

    def stop(self) -> None:
        if not self._started:
            return
        self.event_bus.unsubscribe(EventTypes.DOCUMENT_CREATED, self._dispatch)
        self._started = False

    def redeliver(self, event: Event) -> list[Any]:
        """Deliver a past event again, as the platform may do."""
        return self._dispatch(event)

    def _dispatch(self, event: Event) -> list[Any]:
        path = event.payload["path"]
        results = []
        for trigger in self._triggers:
            params = trigger.pattern.match(path)
            if params is None:
                continue
            snapshot = DocumentSnapshot(path, event.payload.get("data"))
            context = TriggerContext(params=params, event_id=event.event_id, timestamp=event.timestamp)
            logger.info(f"{trigger.name} triggered for {path}")
            result = trigger.handler(snapshot, context)
            logger.info(f"{trigger.name} finished: {result}")
            results.append(result)
        return results
