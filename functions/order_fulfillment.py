"""
Order fulfillment: the onOrderCreated trigger (``orders/{orderId}``).

Steps, in order:

1. Parse the order. A missing ``items`` field means an empty order; a
   malformed item fails the run before anything is written.
2. Decrement ``stock`` of every ordered product by its quantity in ONE batch.
   The batch is all-or-nothing: if any product is missing, no stock changes.
3. Only after the batch committed, add an ``order_confirmed`` notification.

The notification is not part of the batch. If step 3 fails, stock stays
decremented with no confirmation. There is no availability check, so stock
can go negative (overselling is possible). Failures are logged and reported
in the returned TriggerResult, never raised.
"""

import logging

from functions.models import TriggerResult
from runtime.triggers import TriggerContext
from shared.collections import NOTIFICATIONS, product_path
from shared.document_store import DocumentSnapshot, DocumentStore, Increment
from shared.models import Notification, NotificationType, Order
from shared.templates import MessageKey, render_message

logger = logging.getLogger("functions.order_fulfillment")


class OrderFulfillment:
    """Applies stock changes and confirms new orders."""

    def __init__(self, store: DocumentStore):
        self.store = store

    def on_order_created(self, snapshot: DocumentSnapshot, context: TriggerContext) -> TriggerResult:
        order_id = context.params["orderId"]
        logger.info(f"onOrderCreated triggered for order: {order_id}")

        try:
            order = Order.from_document(snapshot.to_dict() or {})

            batch = self.store.batch()
            for item in order.items:
                batch.update(product_path(item.product_id), {"stock": Increment(-item.quantity)})
            batch.commit()

            notification = Notification(
                order_id=order_id,
                user_id=order.user_id,
                type=NotificationType.ORDER_CONFIRMED,
                message=render_message(MessageKey.ORDER_CONFIRMED, order_id=order_id),
                data={"total": order.total, "itemCount": len(order.items)},
            )
            self.store.add(NOTIFICATIONS, notification.to_document())
        except Exception as e:
            logger.error(f"Error in onOrderCreated for {order_id}: {e}")
            return TriggerResult(success=False, error=str(e))

        logger.info(
            f"Order processing completed: orderId={order_id} "
            f"userId={order.user_id} itemCount={len(order.items)}"
        )
        return TriggerResult(
            success=True,
            message=render_message(MessageKey.ORDER_PROCESSED, order_id=order_id),
        )
