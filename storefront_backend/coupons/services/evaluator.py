# coupons/services/evaluator.py

"""
COUPON EVALUATOR

Purpose:
- Decide whether a coupon code applies to an order subtotal and how much it
  takes off.

Hard rules:
- Read-only. used_count is consumed by the checkout workflow, after every
  other part of the order is known to succeed.
- Checks run in a fixed order and the first failure wins:
  unknown code -> inactive -> expired -> usage exhausted -> minimum amount.
- discount = subtotal * value / 100, clamped to max_discount_amount when set,
  quantized to 0.01 with ROUND_HALF_UP.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from django.utils import timezone

from coupons.models import Coupon
from coupons.services.usage import find_coupon_by_code

TWOPLACES = Decimal("0.01")

MSG_INVALID_CODE = "Invalid coupon code"
MSG_NOT_ACTIVE = "Coupon is not active"
MSG_EXPIRED = "Coupon has expired"
MSG_USAGE_EXCEEDED = "Coupon usage limit exceeded"
MSG_VALID = "Coupon is valid"


def _money(v) -> Decimal:
    if v is None or v == "":
        return Decimal("0.00")
    return Decimal(str(v)).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class CouponEvaluation:
    is_valid: bool
    message: str
    coupon: Coupon | None = None
    discount_amount: Decimal = Decimal("0.00")


def _invalid(message: str, coupon: Coupon | None = None) -> CouponEvaluation:
    return CouponEvaluation(is_valid=False, message=message, coupon=coupon)


def evaluate_coupon_for(coupon: Coupon | None, subtotal, *, now=None) -> CouponEvaluation:
    """
    Evaluate an already-loaded coupon (or None when the lookup missed).
    """
    if coupon is None:
        return _invalid(MSG_INVALID_CODE)

    now = now or timezone.now()
    subtotal = _money(subtotal)

    if not coupon.is_active:
        return _invalid(MSG_NOT_ACTIVE, coupon)

    if coupon.expires_at is not None and coupon.expires_at < now:
        return _invalid(MSG_EXPIRED, coupon)

    if coupon.usage_limit is not None and int(coupon.used_count or 0) >= int(coupon.usage_limit):
        return _invalid(MSG_USAGE_EXCEEDED, coupon)

    if coupon.min_order_amount is not None and subtotal < _money(coupon.min_order_amount):
        return _invalid(
            f"Minimum order amount of {_money(coupon.min_order_amount)} required",
            coupon,
        )

    discount = subtotal * Decimal(str(coupon.value)) / Decimal("100")

    if coupon.max_discount_amount is not None:
        discount = min(discount, _money(coupon.max_discount_amount))

    return CouponEvaluation(
        is_valid=True,
        message=MSG_VALID,
        coupon=coupon,
        discount_amount=_money(discount),
    )


def evaluate_coupon(code, subtotal, *, now=None) -> CouponEvaluation:
    """
    Look up `code` (trimmed, case-insensitive) and evaluate it against `subtotal`.
    """
    return evaluate_coupon_for(find_coupon_by_code(code), subtotal, now=now)
