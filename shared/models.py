"""
Document models for the Farm2Home backend.

Each model describes the shape of one kind of document in the store.
Documents are stored with camelCase field names; the models expose them
with snake_case attributes via an alias generator.

Design decisions:
- Using Pydantic for validation and serialization
- Server-assigned timestamps (createdAt, lastUpdated, timestamp) are NOT model
  fields; ``to_document()`` adds the SERVER_TIMESTAMP sentinel so the store
  stamps them at commit time
- User, Order and Product allow extra fields since they are written by other
  parts of the app that this backend does not own
"""

from enum import Enum
from typing import Any, ClassVar, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from shared.document_store import SERVER_TIMESTAMP


# =============================================================================
# Enums
# =============================================================================

class NotificationType(str, Enum):
    """Kinds of notification documents written by the functions."""
    WELCOME = "welcome"
    ORDER_CONFIRMED = "order_confirmed"


class ImageFilter(str, Enum):
    """Filters accepted by the simulated image processor."""
    BLUR = "blur"
    GRAYSCALE = "grayscale"
    ENHANCE = "enhance"
    SHARPEN = "sharpen"


class AnalyticsEventName(str, Enum):
    USER_CREATED = "user_created"


# =============================================================================
# Base model
# =============================================================================

class DocumentModel(BaseModel):
    """
    Base for all stored documents.

    Subclasses list the field names (snake_case in Python) that the server
    stamps on write in ``server_timestamp_fields``.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=True,
    )

    server_timestamp_fields: ClassVar[tuple[str, ...]] = ()

    def to_document(self) -> dict[str, Any]:
        """Serialize to a store document (camelCase, None fields dropped)."""
        document = self.model_dump(by_alias=True, exclude_none=True)
        for name in self.server_timestamp_fields:
            document[to_camel(name)] = SERVER_TIMESTAMP
        return document

    @classmethod
    def from_document(cls, data: dict[str, Any]):
        return cls.model_validate(data)


# =============================================================================
# Users
# =============================================================================

class User(DocumentModel):
    """
    User profile document (``users/{userId}``).

    Created by the app's sign-up flow; creation fires the user bootstrap.
    Fields are written by the client and taken as they are.
    """
    model_config = ConfigDict(extra="allow")

    email: Any = None
    display_name: Any = None


class UserPreferences(DocumentModel):
    """
    Default preferences (``users/{userId}/preferences/settings``).

    Written once by the bootstrap and never overwritten by this backend.
    """
    theme: str = Field(default="light")
    notifications: bool = Field(default=True, description="Notifications enabled")
    language: str = Field(default="en")

    server_timestamp_fields: ClassVar[tuple[str, ...]] = ("created_at",)


class CartMetadata(DocumentModel):
    """Cart summary (``users/{userId}/cart/metadata``), zeroed by the bootstrap."""
    item_count: int = Field(default=0, ge=0)
    total_price: float = Field(default=0, ge=0)

    server_timestamp_fields: ClassVar[tuple[str, ...]] = ("last_updated",)


class AnalyticsEvent(DocumentModel):
    """Append-only analytics record (``analytics/{autoId}``)."""
    event: str
    user_id: str
    email: Any = None

    server_timestamp_fields: ClassVar[tuple[str, ...]] = ("timestamp",)


# =============================================================================
# Catalog and orders
# =============================================================================

class Product(DocumentModel):
    """
    Catalog product (``products/{productId}``).

    Stock is only ever changed by relative increments. Nothing keeps it
    from going below zero.
    """
    model_config = ConfigDict(extra="allow")

    name: Optional[str] = None
    stock: int = 0


class OrderItem(DocumentModel):
    """A single line of an order."""
    product_id: str = Field(..., min_length=1)
    quantity: int = Field(..., gt=0)


class Order(DocumentModel):
    """
    Customer order (``orders/{orderId}``).

    Created by the checkout flow; creation fires order fulfillment.
    A missing or null ``items`` field reads as an empty order.
    """
    model_config = ConfigDict(extra="allow")

    user_id: Optional[str] = None
    items: list[OrderItem] = Field(default_factory=list)
    total: Optional[float] = None

    @field_validator("items", mode="before")
    @classmethod
    def _null_items_are_empty(cls, value):
        return [] if value is None else value


# =============================================================================
# Notifications
# =============================================================================

class Notification(DocumentModel):
    """
    In-app notification (``notifications/{autoId}``).

    The ``read`` flag is flipped by the client app, never by this backend.
    Old notifications are removed by the retention sweep.
    """
    user_id: str
    type: NotificationType
    message: str
    read: bool = False
    data: Optional[dict[str, Any]] = None

    # Welcome notifications
    email: Optional[str] = None
    user_name: Optional[str] = None

    # Order notifications
    order_id: Optional[str] = None

    server_timestamp_fields: ClassVar[tuple[str, ...]] = ("created_at",)
