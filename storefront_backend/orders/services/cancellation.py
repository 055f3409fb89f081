# orders/services/cancellation.py

"""
ORDER CANCELLATION

Reverses a checkout for the order's owner:
- only from pending / processing
- every item's quantity goes back to stock (products deleted since are
  skipped)
- the coupon use is released (floor zero; deleted coupons are skipped)

Runs in one transaction so a failure cannot leave a half-reversed order.
"""

from __future__ import annotations

import logging

from django.db import transaction
from django.utils import timezone

from coupons.services.usage import release_coupon_usage
from orders.models import Order
from orders.services.exceptions import (
    InvalidOrderTransitionError,
    OrderForbiddenError,
    OrderNotFoundError,
)
from orders.services.order_lifecycle import can_cancel
from products.services.inventory import restore_stock

logger = logging.getLogger(__name__)


@transaction.atomic
def cancel_order(*, order_id, user) -> Order:
    order = Order.objects.select_for_update().filter(pk=order_id).first()
    if order is None:
        raise OrderNotFoundError("Order not found")

    if order.user_id != getattr(user, "pk", None):
        raise OrderForbiddenError("Not authorized to cancel this order")

    if not can_cancel(order):
        raise InvalidOrderTransitionError(f"Cannot cancel order with status: {order.status}")

    restored = 0
    for item in order.items.all():
        if restore_stock(product_id=item.product_id, quantity=item.quantity):
            restored += 1

    if order.coupon_code:
        release_coupon_usage(order.coupon_code)

    order.status = Order.STATUS_CANCELLED
    order.cancelled_at = timezone.now()
    order.save(update_fields=["status", "cancelled_at", "updated_at"])

    logger.info(
        "Order cancelled",
        extra={
            "order_id": str(order.id),
            "order_code": order.order_code,
            "restored_lines": restored,
            "coupon_code": order.coupon_code,
        },
    )
    return order
