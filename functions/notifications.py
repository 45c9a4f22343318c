"""
Notification writer: the sendWelcomeMessage callable.

Appends one welcome notification document per call. There is no
deduplication, so calling it twice for the same user writes two documents.
No email is actually sent; the document is what the app displays.
"""

import logging
from typing import Any, Optional

from functions.models import WelcomeMessageResponse
from functions.requests import is_non_empty_string
from shared.clock import Clock, iso_timestamp, utc_now
from shared.collections import NOTIFICATIONS
from shared.config import Settings, get_settings
from shared.document_store import DocumentStore
from shared.errors import InternalError, InvalidArgumentError
from shared.models import Notification, NotificationType
from shared.templates import MessageKey, render_message

logger = logging.getLogger("functions.notifications")


class NotificationWriter:
    """
    Writes welcome notifications.

    Args:
        store: Document store the notifications go to
        clock: Source of the response timestamp
        settings: App settings (app name for the message text)
    """

    def __init__(
        self,
        store: DocumentStore,
        clock: Optional[Clock] = None,
        settings: Optional[Settings] = None,
    ):
        self.store = store
        self.clock = clock or utc_now
        self.settings = settings or get_settings()

    def send_welcome_message(self, data: dict[str, Any]) -> WelcomeMessageResponse:
        """
        Store a welcome notification for a user.

        Args:
            data: {"userId", "email", "userName"}, all non-empty strings
        """
        user_id, email, user_name = data.get("userId"), data.get("email"), data.get("userName")
        if not all(is_non_empty_string(v) for v in (user_id, email, user_name)):
            raise InvalidArgumentError("userId, email, and userName are required")

        logger.info(f"sendWelcomeMessage called for user: {user_id}")

        try:
            notification = Notification(
                user_id=user_id,
                type=NotificationType.WELCOME,
                email=email,
                user_name=user_name,
                message=render_message(
                    MessageKey.WELCOME, app_name=self.settings.app_name, user_name=user_name
                ),
            )
            snapshot = self.store.add(NOTIFICATIONS, notification.to_document())
        except Exception as e:
            logger.error(f"Error in sendWelcomeMessage: {e}")
            raise InternalError("Failed to send welcome message") from e

        logger.info(
            f"sendWelcomeMessage notification created: id={snapshot.id} "
            f"userId={user_id} email={email} userName={user_name}"
        )

        return WelcomeMessageResponse(
            message=render_message(MessageKey.WELCOME_PREPARED, email=email),
            timestamp=iso_timestamp(self.clock()),
        )
