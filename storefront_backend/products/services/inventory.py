# products/services/inventory.py

"""
INVENTORY SERVICE (CATALOG STORE)

Purpose:
- Single write path for Product.stock.
- Every mutation is ONE conditional UPDATE with an F() expression, so the
  "check stock, then write stock" window does not exist in application code.

Rules:
- reserve_stock() decrements only when the resulting stock stays >= 0.
- restore_stock() increments; a missing product is reported, not raised
  (cancellation tolerates orphaned order lines).
- Quantities are whole integer units (> 0).
"""

from __future__ import annotations

import logging

from django.db import transaction
from django.db.models import F

from products.models import Product

logger = logging.getLogger(__name__)


class InventoryError(Exception):
    """Domain error for invalid stock operations."""


def _to_int_qty(value) -> int:
    if isinstance(value, bool):
        # guardrail: bool is an int subclass in Python
        raise InventoryError("quantity must be a whole integer unit")

    if isinstance(value, int):
        qty = value
    elif isinstance(value, str) and value.strip().isdigit():
        qty = int(value.strip())
    else:
        raise InventoryError("quantity must be a whole integer unit")

    if qty <= 0:
        raise InventoryError("quantity must be at least 1")

    return qty


def get_product_for_update(product_id) -> Product | None:
    """
    Load a product and lock its row for the rest of the current transaction.

    Must be called inside transaction.atomic(). Backends without row locks
    (SQLite) ignore the lock; reserve_stock() stays correct regardless.
    """
    return Product.objects.select_for_update().filter(pk=product_id).first()


def reserve_stock(*, product_id, quantity) -> bool:
    """
    Atomically decrement stock by `quantity` only if enough stock remains.

    Returns False when the guard rejected the decrement (insufficient stock
    or product gone). The caller decides which error to raise.
    """
    qty = _to_int_qty(quantity)

    updated = Product.objects.filter(pk=product_id, stock__gte=qty).update(
        stock=F("stock") - qty
    )
    return updated == 1


def restore_stock(*, product_id, quantity) -> bool:
    """
    Atomically increment stock by `quantity`.

    Returns False if the product no longer exists.
    """
    qty = _to_int_qty(quantity)

    updated = Product.objects.filter(pk=product_id).update(stock=F("stock") + qty)
    if not updated:
        logger.warning(
            "Stock restore skipped: product missing",
            extra={"product_id": str(product_id), "quantity": qty},
        )
        return False
    return True


def current_stock(product_id) -> int:
    value = Product.objects.filter(pk=product_id).values_list("stock", flat=True).first()
    return int(value or 0)


@transaction.atomic
def restock_product(*, product: Product, quantity, user=None) -> Product:
    """
    Admin restock: add units to a product and return the refreshed row.
    """
    qty = _to_int_qty(quantity)

    if not restore_stock(product_id=product.pk, quantity=qty):
        raise InventoryError("Product not found")

    product.refresh_from_db(fields=["stock", "updated_at"])

    logger.info(
        "Product restocked",
        extra={
            "product_id": str(product.pk),
            "quantity": qty,
            "stock": product.stock,
            "user_id": str(getattr(user, "pk", "") or ""),
        },
    )
    return product
