"""
Message templates.

Every user-facing string the functions produce lives here, with {variable}
placeholders filled in by ``render_message``.

Design decisions:
- Templates are plain format strings keyed by MessageKey
- The app name is a variable so the same templates work for any deployment
- A missing variable is a programming error and raises KeyError
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class MessageKey(str, Enum):
    """Identifies one template."""
    # Callable responses
    GREETING = "greeting"
    WELCOME_PREPARED = "welcome_prepared"

    # Notification documents
    WELCOME = "welcome"
    ORDER_CONFIRMED = "order_confirmed"

    # Trigger results
    USER_INITIALIZED = "user_initialized"
    ORDER_PROCESSED = "order_processed"


@dataclass(frozen=True)
class MessageTemplate:
    key: MessageKey
    text: str

    def render(self, **kwargs) -> str:
        return self.text.format(**kwargs)


TEMPLATES: dict[MessageKey, MessageTemplate] = {
    MessageKey.GREETING: MessageTemplate(
        key=MessageKey.GREETING,
        text="Hello, {name}! Welcome to {app_name}.",
    ),
    MessageKey.WELCOME_PREPARED: MessageTemplate(
        key=MessageKey.WELCOME_PREPARED,
        text="Welcome email prepared for {email}",
    ),
    MessageKey.WELCOME: MessageTemplate(
        key=MessageKey.WELCOME,
        text="Welcome to {app_name}, {user_name}! We're excited to have you.",
    ),
    MessageKey.ORDER_CONFIRMED: MessageTemplate(
        key=MessageKey.ORDER_CONFIRMED,
        text="Your order #{order_id} has been confirmed",
    ),
    MessageKey.USER_INITIALIZED: MessageTemplate(
        key=MessageKey.USER_INITIALIZED,
        text="User {user_id} initialized",
    ),
    MessageKey.ORDER_PROCESSED: MessageTemplate(
        key=MessageKey.ORDER_PROCESSED,
        text="Order {order_id} processed",
    ),
}


def get_template(key: MessageKey) -> Optional[MessageTemplate]:
    """Get a template by key."""
    return TEMPLATES.get(key)


def render_message(key: MessageKey, **context) -> str:
    """
    Render a template.

    Raises:
        ValueError: If no template exists for ``key``
        KeyError: If a placeholder has no value in ``context``
    """
    template = get_template(key)
    if template is None:
        raise ValueError(f"No template for message: {key}")
    return template.render(**context)
