"""
Farm2Home backend functions.

Callable functions:
- sayHello(name)
- calculateSum(a, b)
- getServerTime()
- sendWelcomeMessage(userId, email, userName)
- processImage(imageUrl, filter)

Record-creation triggers:
- onUserCreated (users/{userId})
- onOrderCreated (orders/{orderId})

Scheduled functions:
- cleanupOldNotifications (every day 02:00 UTC by default)

``build_functions`` wires every handler around one injected DocumentStore,
registers the triggers on the store's event bus and the cleanup job on a
scheduler.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from functions.models import FunctionResponse
from functions.notifications import NotificationWriter
from functions.order_fulfillment import OrderFulfillment
from functions.requests import RequestHandlers
from functions.retention import RetentionSweep
from functions.user_bootstrap import UserBootstrap
from runtime.scheduler import DailySchedule, Scheduler
from runtime.triggers import TriggerRegistry
from shared.clock import Clock
from shared.collections import ORDER_DOCUMENT, USER_DOCUMENT
from shared.config import Settings, get_settings
from shared.document_store import DocumentStore
from shared.errors import NotFoundError

logger = logging.getLogger("functions")

CallableFunction = Callable[[dict[str, Any]], FunctionResponse]

CALLABLE_SIGNATURES: dict[str, str] = {
    "sayHello": "sayHello(name)",
    "calculateSum": "calculateSum(a, b)",
    "getServerTime": "getServerTime()",
    "sendWelcomeMessage": "sendWelcomeMessage(userId, email, userName)",
    "processImage": "processImage(imageUrl, filter)",
}


@dataclass
class Functions:
    """Everything the host needs to serve the backend."""
    store: DocumentStore
    settings: Settings
    requests: RequestHandlers
    notifications: NotificationWriter
    user_bootstrap: UserBootstrap
    order_fulfillment: OrderFulfillment
    retention: RetentionSweep
    triggers: TriggerRegistry
    scheduler: Scheduler
    callables: dict[str, CallableFunction] = field(default_factory=dict)

    def call(self, name: str, data: Optional[Any] = None) -> FunctionResponse:
        """
        Invoke a callable function by name.

        Non-dict ``data`` is treated as an empty object, so validation
        reports the missing fields.

        Raises:
            NotFoundError: If there is no callable named ``name``
            FunctionError: Whatever the function raises
        """
        function = self.callables.get(name)
        if function is None:
            raise NotFoundError(f"Function not found: {name}")
        return function(data if isinstance(data, dict) else {})

    def describe(self) -> dict[str, list[str]]:
        """Catalog of everything that is deployed."""
        return {
            "callable": [CALLABLE_SIGNATURES.get(name, name) for name in self.callables],
            "triggers": [f"{t.name} ({t.pattern} onCreate)" for t in self.triggers.triggers],
            "scheduled": [f"{job.name} ({job.schedule})" for job in self.scheduler.jobs],
        }


def build_functions(
    store: Optional[DocumentStore] = None,
    settings: Optional[Settings] = None,
    clock: Optional[Clock] = None,
) -> Functions:
    """
    Wire all functions around one store.

    Args:
        store: Document store (a fresh in-memory one if omitted)
        settings: App settings (process settings if omitted)
        clock: Time source for handlers and the scheduler (the store's clock if omitted)
    """
    store = store or DocumentStore()
    settings = settings or get_settings()
    clock = clock or store.clock

    requests = RequestHandlers(clock=clock, settings=settings)
    notifications = NotificationWriter(store, clock=clock, settings=settings)
    user_bootstrap = UserBootstrap(store)
    order_fulfillment = OrderFulfillment(store)
    retention = RetentionSweep(store, clock=clock, settings=settings)

    triggers = TriggerRegistry(store.event_bus)
    triggers.on_create(USER_DOCUMENT, user_bootstrap.on_user_created, name="onUserCreated")
    triggers.on_create(ORDER_DOCUMENT, order_fulfillment.on_order_created, name="onOrderCreated")
    triggers.start()

    scheduler = Scheduler(clock=clock)
    scheduler.register(
        "cleanupOldNotifications",
        DailySchedule.parse(settings.cleanup_schedule, settings.cleanup_time_zone),
        retention.cleanup_old_notifications,
    )

    functions = Functions(
        store=store,
        settings=settings,
        requests=requests,
        notifications=notifications,
        user_bootstrap=user_bootstrap,
        order_fulfillment=order_fulfillment,
        retention=retention,
        triggers=triggers,
        scheduler=scheduler,
        callables={
            "sayHello": requests.say_hello,
            "calculateSum": requests.calculate_sum,
            "getServerTime": requests.get_server_time,
            "sendWelcomeMessage": notifications.send_welcome_message,
            "processImage": requests.process_image,
        },
    )
    return functions


def log_catalog(functions: Functions) -> None:
    """Log the deployed functions, one per line."""
    catalog = functions.describe()
    logger.info(f"{functions.settings.app_name} functions initialized")
    logger.info("Available callable functions:")
    for entry in catalog["callable"]:
        logger.info(f"  - {entry}")
    logger.info("Available triggers:")
    for entry in catalog["triggers"] + catalog["scheduled"]:
        logger.info(f"  - {entry}")


__all__ = [
    "Functions",
    "build_functions",
    "log_catalog",
]
