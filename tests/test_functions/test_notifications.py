"""
Tests for sendWelcomeMessage.
"""

import pytest

from shared.errors import InternalError, InvalidArgumentError

WELCOME = {"userId": "u1", "email": "ada@farm2home.test", "userName": "Ada"}


class TestSendWelcomeMessage:
    """Tests for the welcome notification writer."""

    def test_stores_one_notification(self, functions, store, fixed_now):
        response = functions.notifications.send_welcome_message(WELCOME)

        assert response.message == "Welcome email prepared for ada@farm2home.test"
        assert response.timestamp == "2026-03-01T09:30:00.123Z"

        [notification] = store.list_documents("notifications")
        assert notification.to_dict() == {
            "userId": "u1",
            "type": "welcome",
            "email": "ada@farm2home.test",
            "userName": "Ada",
            "message": "Welcome to Farm2Home, Ada! We're excited to have you.",
            "read": False,
            "createdAt": fixed_now,
        }

    def test_not_deduplicated(self, functions, store):
        functions.notifications.send_welcome_message(WELCOME)
        functions.notifications.send_welcome_message(WELCOME)

        assert store.count("notifications") == 2

    @pytest.mark.parametrize("missing", ["userId", "email", "userName"])
    def test_all_fields_required(self, functions, store, missing):
        data = {k: v for k, v in WELCOME.items() if k != missing}

        with pytest.raises(InvalidArgumentError) as exc_info:
            functions.notifications.send_welcome_message(data)

        assert exc_info.value.message == "userId, email, and userName are required"
        assert store.count("notifications") == 0

    def test_store_failure_is_internal(self, functions, store):
        store.fail_next("add")

        with pytest.raises(InternalError) as exc_info:
            functions.notifications.send_welcome_message(WELCOME)

        assert exc_info.value.message == "Failed to send welcome message"
        assert store.count("notifications") == 0
