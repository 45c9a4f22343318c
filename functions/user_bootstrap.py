"""
User bootstrap: the onUserCreated trigger (``users/{userId}``).

When a user document appears, three independent writes run in order:

1. ``users/{userId}/preferences/settings`` with default preferences
2. ``users/{userId}/cart/metadata`` with an empty cart
3. a ``user_created`` event in ``analytics``

The writes are not grouped. If write 2 fails, write 1 stays in place and the
user is left without a cart record. Failures are logged and reported in the
returned TriggerResult; they are never raised, so the platform treats the
event as handled and does not retry it.

Redelivery of the same event repeats all three writes: the two documents are
overwritten and a second analytics event is appended.
"""

import logging

from functions.models import TriggerResult
from runtime.triggers import TriggerContext
from shared.collections import ANALYTICS, cart_metadata_path, user_preferences_path
from shared.document_store import DocumentSnapshot, DocumentStore
from shared.models import AnalyticsEvent, AnalyticsEventName, CartMetadata, User, UserPreferences
from shared.templates import MessageKey, render_message

logger = logging.getLogger("functions.user_bootstrap")


class UserBootstrap:
    """Initializes per-user documents for new users."""

    def __init__(self, store: DocumentStore):
        self.store = store

    def on_user_created(self, snapshot: DocumentSnapshot, context: TriggerContext) -> TriggerResult:
        user_id = context.params["userId"]
        logger.info(f"onUserCreated triggered for user: {user_id}")

        try:
            user = User.from_document(snapshot.to_dict() or {})

            self.store.set(user_preferences_path(user_id), UserPreferences().to_document())
            self.store.set(cart_metadata_path(user_id), CartMetadata().to_document())
            self.store.add(
                ANALYTICS,
                AnalyticsEvent(
                    event=AnalyticsEventName.USER_CREATED.value,
                    user_id=user_id,
                    email=user.email,
                ).to_document(),
            )
        except Exception as e:
            logger.error(f"Error in onUserCreated for {user_id}: {e}")
            return TriggerResult(success=False, error=str(e))

        logger.info(f"User initialization completed: userId={user_id} email={user.email}")
        return TriggerResult(
            success=True,
            message=render_message(MessageKey.USER_INITIALIZED, user_id=user_id),
        )
