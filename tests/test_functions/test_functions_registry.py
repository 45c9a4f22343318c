"""
Tests for wiring all functions together.
"""

import pytest

from shared.errors import InvalidArgumentError, NotFoundError


class TestBuildFunctions:
    """Tests for build_functions and Functions.call."""

    def test_catalog(self, functions):
        catalog = functions.describe()

        assert catalog["callable"] == [
            "sayHello(name)",
            "calculateSum(a, b)",
            "getServerTime()",
            "sendWelcomeMessage(userId, email, userName)",
            "processImage(imageUrl, filter)",
        ]
        assert catalog["triggers"] == [
            "onUserCreated (users/{userId} onCreate)",
            "onOrderCreated (orders/{orderId} onCreate)",
        ]
        assert catalog["scheduled"] == ["cleanupOldNotifications (every day 02:00 (UTC))"]

    def test_call_by_name(self, functions):
        assert functions.call("calculateSum", {"a": 1, "b": 2}).sum == 3

    def test_unknown_function(self, functions):
        with pytest.raises(NotFoundError):
            functions.call("deleteEverything", {})

    def test_non_object_data_is_treated_as_empty(self, functions):
        with pytest.raises(InvalidArgumentError):
            functions.call("sayHello", "Ada")

    def test_get_server_time_without_data(self, functions):
        assert functions.call("getServerTime").success is True

    def test_triggers_are_live(self, functions, store, products, user_data):
        store.set("users/u1", user_data)
        store.set("orders/o1", {"userId": "u1", "items": [{"productId": "p2", "quantity": 2}]})

        assert store.exists("users/u1/cart/metadata")
        assert store.get("products/p2").get("stock") == 48
        assert store.count("notifications") == 1
