# orders/services/checkout_orchestrator.py

"""
CHECKOUT ORCHESTRATOR (APPLICATION SERVICE)

Purpose:
- Turn a list of {product_id, quantity, attributes_selected} into a priced,
  stock-committed Order, or fail with no partial effects.

Hard rules:
- One transaction: stock decrements, the coupon use and the Order rows
  commit together or roll back together.
- Items are processed in input order. For each: lock + load the product,
  reject missing / inactive / short products, snapshot the price, then
  decrement with a conditional UPDATE (stock >= quantity).
- The coupon is evaluated against the accumulated subtotal and consumed with
  a conditional UPDATE (used_count < usage_limit). Losing that race fails the
  whole checkout with "Coupon usage limit exceeded".
- Money is server-owned: order_total_price = max(subtotal - discount, 0).
"""

from __future__ import annotations

import logging
from decimal import ROUND_HALF_UP, Decimal

from django.db import transaction

from coupons.services.evaluator import MSG_USAGE_EXCEEDED, evaluate_coupon
from coupons.services.usage import consume_coupon_usage
from orders.models import Order, OrderItem
from orders.services.exceptions import (
    CouponInvalidError,
    EmptyOrderError,
    InsufficientStockError,
    InvalidOrderItemError,
    ProductNotFoundError,
    ProductUnavailableError,
)
from products.services.inventory import current_stock, get_product_for_update, reserve_stock

logger = logging.getLogger(__name__)

TWOPLACES = Decimal("0.01")


def _money(v) -> Decimal:
    if v is None or v == "":
        return Decimal("0.00")
    return Decimal(str(v)).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def _to_int_qty(value) -> int:
    if isinstance(value, bool):
        raise InvalidOrderItemError("quantity must be a whole integer unit")

    if isinstance(value, int):
        qty = value
    elif isinstance(value, str) and value.strip().isdigit():
        qty = int(value.strip())
    else:
        raise InvalidOrderItemError("quantity must be a whole integer unit")

    if qty <= 0:
        raise InvalidOrderItemError("quantity must be at least 1")
    return qty


def _normalize_payment_method(method: str | None) -> str:
    return (method or "").strip().lower()


def _normalize_coupon_code(code) -> str:
    return str(code or "").strip().upper()


@transaction.atomic
def place_order(
    *,
    user,
    items,
    payment_method: str,
    shipping_address: dict,
    coupon_code: str | None = None,
    notes: str = "",
) -> Order:
    if not items:
        raise EmptyOrderError("Order must have at least one item")

    subtotal = Decimal("0.00")
    lines = []

    for item in items:
        product_id = item["product_id"]
        qty = _to_int_qty(item["quantity"])

        product = get_product_for_update(product_id)
        if product is None:
            raise ProductNotFoundError(product_id)

        if not product.is_active:
            raise ProductUnavailableError(product.name)

        if int(product.stock) < qty:
            raise InsufficientStockError(product.name, available=int(product.stock), requested=qty)

        price = _money(product.effective_price)
        subtotal += _money(price * Decimal(qty))

        if not reserve_stock(product_id=product.pk, quantity=qty):
            raise InsufficientStockError(
                product.name,
                available=current_stock(product.pk),
                requested=qty,
            )

        lines.append(
            {
                "product_id": product.pk,
                "product_name": product.name,
                "quantity": qty,
                "price_at_purchase": price,
                "attributes_selected": dict(item.get("attributes_selected") or {}),
            }
        )

    subtotal = _money(subtotal)
    discount = Decimal("0.00")
    discount_value = None
    applied_code = None

    code = _normalize_coupon_code(coupon_code)
    if code:
        result = evaluate_coupon(code, subtotal)
        if not result.is_valid:
            raise CouponInvalidError(result.message)

        if not consume_coupon_usage(result.coupon.pk):
            raise CouponInvalidError(MSG_USAGE_EXCEEDED)

        discount = result.discount_amount
        discount_value = result.coupon.value
        applied_code = result.coupon.code

    total = max(_money(subtotal - discount), Decimal("0.00"))

    order = Order.objects.create(
        user=user,
        subtotal=subtotal,
        coupon_code=applied_code,
        discount_value=discount_value,
        discount_amount=discount,
        order_total_price=total,
        status=Order.STATUS_PENDING,
        payment_method=_normalize_payment_method(payment_method),
        shipping_address=dict(shipping_address or {}),
        notes=(notes or "").strip(),
    )

    OrderItem.objects.bulk_create([OrderItem(order=order, **line) for line in lines])

    logger.info(
        "Order placed",
        extra={
            "order_id": str(order.id),
            "order_code": order.order_code,
            "user_id": str(getattr(user, "pk", "") or ""),
            "item_count": len(lines),
            "order_total": str(total),
            "coupon_code": applied_code,
        },
    )
    return order


@transaction.atomic
def checkout_cart(
    *,
    user,
    cart,
    payment_method: str,
    shipping_address: dict,
    coupon_code: str | None = None,
    notes: str = "",
) -> Order:
    """
    Place an order from the cart's lines, then empty the cart.
    """
    # Lock the cart row so a double-click cannot check it out twice.
    cart = cart.__class__.objects.select_for_update().get(pk=cart.pk)

    cart_items = list(cart.items.all().order_by("created_at"))
    if not cart_items:
        raise EmptyOrderError("Cart is empty")

    order = place_order(
        user=user,
        items=[
            {
                "product_id": ci.product_id,
                "quantity": ci.quantity,
                "attributes_selected": ci.attributes,
            }
            for ci in cart_items
        ],
        payment_method=payment_method,
        shipping_address=shipping_address,
        coupon_code=coupon_code,
        notes=notes,
    )

    cart.items.all().delete()
    return order
