# coupons/services/usage.py

"""
COUPON STORE (USAGE COUNTER)

Purpose:
- Single write path for Coupon.used_count.

Rules:
- consume_coupon_usage() is ONE conditional UPDATE: it increments only while
  the coupon is under its usage_limit (or has none). Two checkouts racing for
  the last use cannot both win.
- release_coupon_usage() decrements with a floor at zero and tolerates a
  coupon that was deleted after the order was placed.
"""

from __future__ import annotations

import logging

from django.db.models import F, Q

from coupons.models import Coupon

logger = logging.getLogger(__name__)


def find_coupon_by_code(code) -> Coupon | None:
    normalized = Coupon.normalize_code(code)
    if not normalized:
        return None
    return Coupon.objects.filter(code__iexact=normalized).first()


def consume_coupon_usage(coupon_id) -> bool:
    """
    used_count += 1 where usage_limit IS NULL OR used_count < usage_limit.

    Returns False when the guard rejected the increment.
    """
    updated = (
        Coupon.objects.filter(pk=coupon_id)
        .filter(Q(usage_limit__isnull=True) | Q(used_count__lt=F("usage_limit")))
        .update(used_count=F("used_count") + 1)
    )
    return updated == 1


def release_coupon_usage(code) -> bool:
    """
    used_count -= 1 (never below zero) for the coupon matching `code`.

    Returns False if the coupon no longer exists or was already at zero.
    """
    normalized = Coupon.normalize_code(code)
    if not normalized:
        return False

    updated = Coupon.objects.filter(code__iexact=normalized, used_count__gt=0).update(
        used_count=F("used_count") - 1
    )
    if not updated:
        logger.warning(
            "Coupon usage release skipped",
            extra={"coupon_code": normalized},
        )
        return False
    return True
