"""
Shared infrastructure for the Farm2Home functions.

- Document models (User, Order, Product, Notification, ...)
- In-memory document store with batches, increments and queries
- Event bus used to deliver document-created events
- Settings, error types and message templates
"""

from shared.document_store import (
    DocumentSnapshot,
    DocumentStore,
    Increment,
    SERVER_TIMESTAMP,
    StoreError,
    DocumentNotFoundError,
)
from shared.event_bus import Event, EventBus, EventTypes
from shared.errors import FunctionError, InvalidArgumentError, InternalError, NotFoundError
from shared.models import (
    User,
    UserPreferences,
    CartMetadata,
    AnalyticsEvent,
    Product,
    Order,
    OrderItem,
    Notification,
    NotificationType,
)

__all__ = [
    "DocumentSnapshot",
    "DocumentStore",
    "Increment",
    "SERVER_TIMESTAMP",
    "StoreError",
    "DocumentNotFoundError",
    "Event",
    "EventBus",
    "EventTypes",
    "FunctionError",
    "InvalidArgumentError",
    "InternalError",
    "NotFoundError",
    "User",
    "UserPreferences",
    "CartMetadata",
    "AnalyticsEvent",
    "Product",
    "Order",
    "OrderItem",
    "Notification",
    "NotificationType",
]
