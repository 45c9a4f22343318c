"""
Tests for record-creation trigger routing.
"""

import pytest

from runtime.triggers import PathPattern, TriggerContext, TriggerRegistry
from shared.document_store import DocumentSnapshot, DocumentStore


class TestPathPattern:
    """Tests for wildcard path matching."""

    def test_match_extracts_params(self):
        assert PathPattern("orders/{orderId}").match("orders/o1") == {"orderId": "o1"}

    def test_nested_pattern(self):
        pattern = PathPattern("users/{userId}/cart/{docId}")

        assert pattern.match("users/u1/cart/metadata") == {"userId": "u1", "docId": "metadata"}
        assert pattern.match("users/u1/preferences/settings") is None

    def test_different_depth_does_not_match(self):
        pattern = PathPattern("users/{userId}")

        assert pattern.match("users/u1/cart/metadata") is None
        assert pattern.match("orders/o1") is None

    def test_collection_pattern_rejected(self):
        with pytest.raises(ValueError):
            PathPattern("users")


class TestTriggerRegistry:
    """Tests for dispatching store events to handlers."""

    @pytest.fixture
    def calls(self):
        return []

    @pytest.fixture
    def registry(self, store: DocumentStore, calls):
        registry = TriggerRegistry(store.event_bus)

        def on_user(snapshot: DocumentSnapshot, context: TriggerContext):
            calls.append((snapshot.path, snapshot.data, context.params))
            return "ok"

        registry.on_create("users/{userId}", on_user, name="onUser")
        registry.start()
        yield registry
        registry.stop()

    def test_fires_on_new_document(self, store: DocumentStore, registry, calls):
        store.set("users/u1", {"email": "a@example.com"})

        assert calls == [("users/u1", {"email": "a@example.com"}, {"userId": "u1"})]

    def test_does_not_fire_on_overwrite(self, store: DocumentStore, registry, calls):
        store.set("users/u1", {"email": "a@example.com"})
        store.set("users/u1", {"email": "b@example.com"})

        assert len(calls) == 1

    def test_does_not_fire_for_subcollections(self, store: DocumentStore, registry, calls):
        store.set("users/u1/preferences/settings", {"theme": "light"})

        assert calls == []

    def test_handler_errors_do_not_reach_writer(self, store: DocumentStore):
        registry = TriggerRegistry(store.event_bus)

        def broken(snapshot, context):
            raise RuntimeError("boom")

        registry.on_create("orders/{orderId}", broken)
        registry.start()

        snapshot = store.set("orders/o1", {"items": []})

        assert snapshot.exists

    def test_redeliver(self, store: DocumentStore, registry, calls):
        """Test that a past event can be delivered again (at-least-once)."""
        store.set("users/u1", {"email": "a@example.com"})
        event = store.event_bus.get_event_log()[0]

        results = registry.redeliver(event)

        assert results == ["ok"]
        assert len(calls) == 2

    def test_stop_unsubscribes(self, store: DocumentStore, registry, calls):
        registry.stop()
        store.set("users/u1", {"email": "a@example.com"})

        assert calls == []

    def test_triggers_listed(self, registry):
        assert [(t.name, str(t.pattern)) for t in registry.triggers] == [("onUser", "users/{userId}")]
