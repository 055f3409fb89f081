# orders/services/order_lifecycle.py

"""
ORDER STATUS RULES

- The owner may cancel only while the order is pending or processing
  (see cancellation.cancel_order, which also reverses stock + coupon).
- Admins may set any enumerated status directly. That overwrite has no stock
  or coupon side effects.
"""

from __future__ import annotations

import logging

from django.db import transaction

from orders.models import Order
from orders.services.exceptions import InvalidOrderStatusError, OrderNotFoundError

logger = logging.getLogger(__name__)

CANCELLABLE_STATES = {
    Order.STATUS_PENDING,
    Order.STATUS_PROCESSING,
}


def can_cancel(order: Order) -> bool:
    return order.status in CANCELLABLE_STATES


@transaction.atomic
def set_order_status(*, order_id, status: str) -> Order:
    target = (status or "").strip().lower()
    if target not in Order.status_values():
        raise InvalidOrderStatusError(f"Invalid status: {status}")

    order = Order.objects.select_for_update().filter(pk=order_id).first()
    if order is None:
        raise OrderNotFoundError("Order not found")

    previous = order.status
    order.status = target
    order.save(update_fields=["status", "cancelled_at", "updated_at"])

    logger.info(
        "Order status updated",
        extra={
            "order_id": str(order.id),
            "from_status": previous,
            "to_status": target,
        },
    )
    return order
