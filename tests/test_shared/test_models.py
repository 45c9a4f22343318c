"""
Tests for the document models.

These verify defaults, camelCase serialization and validation.
"""

import pytest
from pydantic import ValidationError

from shared.document_store import SERVER_TIMESTAMP
from shared.models import (
    AnalyticsEvent,
    CartMetadata,
    Notification,
    NotificationType,
    Order,
    User,
    UserPreferences,
)


class TestUserDocuments:
    """Tests for user-related models."""

    def test_preferences_defaults(self):
        document = UserPreferences().to_document()

        assert document == {
            "theme": "light",
            "notifications": True,
            "language": "en",
            "createdAt": SERVER_TIMESTAMP,
        }

    def test_cart_defaults(self):
        document = CartMetadata().to_document()

        assert document["itemCount"] == 0
        assert document["totalPrice"] == 0
        assert document["lastUpdated"] is SERVER_TIMESTAMP

    def test_user_keeps_extra_fields(self):
        user = User.from_document({"email": "a@example.com", "displayName": "A", "plan": "pro"})

        assert user.email == "a@example.com"
        assert user.display_name == "A"
        assert user.to_document()["plan"] == "pro"

    def test_analytics_event(self):
        document = AnalyticsEvent(event="user_created", user_id="u1", email="a@example.com").to_document()

        assert document["event"] == "user_created"
        assert document["userId"] == "u1"
        assert document["timestamp"] is SERVER_TIMESTAMP


class TestOrder:
    """Tests for the Order model."""

    def test_parse_order(self):
        order = Order.from_document({
            "userId": "u1",
            "items": [{"productId": "p1", "quantity": 3}],
            "total": 9.5,
        })

        assert order.user_id == "u1"
        assert order.items[0].product_id == "p1"
        assert order.items[0].quantity == 3

    def test_missing_items_is_empty(self):
        assert Order.from_document({"userId": "u1"}).items == []
        assert Order.from_document({"userId": "u1", "items": None}).items == []

    def test_quantity_must_be_positive(self):
        with pytest.raises(ValidationError):
            Order.from_document({"items": [{"productId": "p1", "quantity": 0}]})

    def test_item_needs_product_id(self):
        with pytest.raises(ValidationError):
            Order.from_document({"items": [{"quantity": 1}]})


class TestNotification:
    """Tests for the Notification model."""

    def test_order_notification_document(self):
        document = Notification(
            user_id="u1",
            type=NotificationType.ORDER_CONFIRMED,
            message="Your order #o1 has been confirmed",
            order_id="o1",
            data={"total": 10, "itemCount": 1},
        ).to_document()

        assert document["type"] == "order_confirmed"
        assert document["read"] is False
        assert document["orderId"] == "o1"
        assert document["createdAt"] is SERVER_TIMESTAMP
        assert "email" not in document
