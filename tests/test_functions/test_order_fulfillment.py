"""
Tests for onOrderCreated.
"""

from runtime.triggers import TriggerContext
from shared.document_store import DocumentSnapshot


def order(*items, user_id="u1", total=9.5) -> dict:
    return {
        "userId": user_id,
        "items": [{"productId": p, "quantity": q} for p, q in items],
        "total": total,
    }


def stock(store, product_id: str) -> int:
    return store.get(f"products/{product_id}").get("stock")


def fire(functions, order_id: str, data: dict):
    return functions.order_fulfillment.on_order_created(
        DocumentSnapshot(f"orders/{order_id}", data),
        TriggerContext(params={"orderId": order_id}, event_id=f"evt-{order_id}"),
    )


class TestOnOrderCreated:
    """Tests for stock decrements and order confirmations."""

    def test_decrements_stock_and_confirms(self, functions, store, products, fixed_now):
        store.set("orders/o1", order(("p1", 1), ("p2", 4)))

        assert stock(store, "p1") == 0
        assert stock(store, "p2") == 46

        [notification] = store.list_documents("notifications")
        assert notification.to_dict() == {
            "orderId": "o1",
            "userId": "u1",
            "type": "order_confirmed",
            "message": "Your order #o1 has been confirmed",
            "read": False,
            "data": {"total": 9.5, "itemCount": 2},
            "createdAt": fixed_now,
        }

    def test_overselling_goes_negative(self, functions, store, products):
        store.set("orders/o1", order(("p1", 3)))

        assert stock(store, "p1") == -2

    def test_repeated_product_lines(self, functions, store, products):
        store.set("orders/o1", order(("p2", 2), ("p2", 3)))

        assert stock(store, "p2") == 45

    def test_empty_order_only_confirms(self, functions, store, products):
        store.set("orders/o1", {"userId": "u1", "total": 0})

        assert stock(store, "p1") == 1
        [notification] = store.list_documents("notifications")
        assert notification.get("data") == {"total": 0, "itemCount": 0}

    def test_missing_product_changes_nothing(self, functions, store, products):
        """Test that one unknown product aborts the whole batch and the confirmation."""
        result = fire(functions, "o1", order(("p2", 5), ("ghost", 1)))

        assert result.success is False
        assert "products/ghost" in result.error
        assert stock(store, "p2") == 50
        assert store.count("notifications") == 0

    def test_commit_failure_changes_nothing(self, functions, store, products):
        store.fail_next("commit")

        result = fire(functions, "o1", order(("p1", 1)))

        assert result.success is False
        assert stock(store, "p1") == 1
        assert store.count("notifications") == 0

    def test_notification_failure_keeps_stock_change(self, functions, store, products):
        store.fail_next("add")

        result = fire(functions, "o1", order(("p2", 10)))

        assert result.success is False
        assert stock(store, "p2") == 40
        assert store.count("notifications") == 0

    def test_order_without_user_keeps_stock_change(self, functions, store, products):
        result = fire(functions, "o1", {"items": [{"productId": "p2", "quantity": 1}]})

        assert result.success is False
        assert stock(store, "p2") == 49
        assert store.count("notifications") == 0

    def test_malformed_item_writes_nothing(self, functions, store, products):
        result = fire(functions, "o1", {"userId": "u1", "items": [{"productId": "p2", "quantity": 0}]})

        assert result.success is False
        assert stock(store, "p2") == 50

    def test_success_result(self, functions, store, products):
        result = fire(functions, "o7", order(("p2", 1)))

        assert result.success is True
        assert result.message == "Order o7 processed"
