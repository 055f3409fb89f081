# carts/services/cart_merge.py

"""
GUEST -> USER CART MERGE

Called right after login with the guest token the browser was using.

Rules:
- Missing / inactive products are dropped.
- Quantities are clamped to live stock; lines for sold-out products are
  dropped (a cart line always holds at least one unit).
- A product already in the user cart gets the summed quantity (clamped).
- The guest cart is deleted afterwards.
"""

from __future__ import annotations

import logging

from django.db import transaction

from carts.models import Cart, CartItem

logger = logging.getLogger(__name__)


@transaction.atomic
def merge_guest_cart_into_user(*, guest_id: str, user) -> Cart | None:
    """
    Returns the user's cart, or None when there was no non-empty guest cart.
    """
    guest_cart = Cart.objects.select_for_update().filter(guest_id=guest_id).first()
    if guest_cart is None:
        return None

    guest_items = list(guest_cart.items.select_related("product"))
    if not guest_items:
        guest_cart.delete()
        return None

    user_cart, _ = Cart.objects.get_or_create(user=user)
    merged = 0

    for guest_item in guest_items:
        product = guest_item.product
        if not product.is_active:
            continue

        stock = int(product.stock or 0)
        existing = CartItem.objects.filter(cart=user_cart, product=product).first()

        if existing is not None:
            existing.quantity = min(int(existing.quantity) + int(guest_item.quantity), stock)
            if existing.quantity <= 0:
                existing.delete()
                continue
            existing.save(update_fields=["quantity", "updated_at"])
        else:
            quantity = min(int(guest_item.quantity), stock)
            if quantity <= 0:
                continue
            CartItem.objects.create(
                cart=user_cart,
                product=product,
                quantity=quantity,
                unit_price=guest_item.unit_price,
                attributes=guest_item.attributes,
            )
        merged += 1

    guest_cart.delete()

    logger.info(
        "Guest cart merged",
        extra={
            "user_id": str(user.pk),
            "cart_id": str(user_cart.id),
            "merged_lines": merged,
        },
    )
    return user_cart
