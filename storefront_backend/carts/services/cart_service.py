# carts/services/cart_service.py

"""
CART SERVICE

Purpose:
- Resolve the caller's cart (user cart or guest cart, created on demand).
- Add / update / remove / clear lines with server-owned pricing.

Rules:
- Products must exist and be active to be added.
- A line's quantity never exceeds the product's current stock at the time
  of the change. Stock is only reserved at checkout.
- unit_price is snapshotted from Product.effective_price on add and refreshed on re-add.
"""

from __future__ import annotations

import logging

from django.db import IntegrityError, transaction

from carts.models import Cart, CartItem
from carts.services.exceptions import (
    CartItemNotFoundError,
    CartProductNotFoundError,
    CartProductUnavailableError,
    CartStockError,
)
from products.models import Product

logger = logging.getLogger(__name__)


def get_or_create_cart(*, user=None, guest_id: str | None = None) -> Cart:
    """
    Canonical cart resolver: one cart per user, one per guest id.
    """
    if user is not None and getattr(user, "is_authenticated", False):
        cart, _ = Cart.objects.get_or_create(user=user)
        return cart

    if not guest_id:
        raise ValueError("guest_id is required for anonymous carts")

    cart, _ = Cart.objects.get_or_create(guest_id=guest_id)
    return cart


def _normalize_attributes(attributes) -> dict:
    return {str(k): str(v) for k, v in (attributes or {}).items()}


def _locked_line(cart: Cart, product: Product) -> CartItem | None:
    return CartItem.objects.select_for_update().filter(cart=cart, product=product).first()


def _increase_line(item: CartItem, product: Product, quantity: int, attributes) -> CartItem:
    new_quantity = int(item.quantity) + quantity
    if product.stock < new_quantity:
        raise CartStockError(product.stock)

    item.quantity = new_quantity
    item.unit_price = product.effective_price
    if attributes:
        item.attributes = _normalize_attributes(attributes)
    item.save(update_fields=["quantity", "unit_price", "attributes", "updated_at"])
    return item


@transaction.atomic
def add_item(*, cart: Cart, product_id, quantity: int, attributes=None) -> CartItem:
    product = Product.objects.filter(pk=product_id).first()
    if product is None:
        raise CartProductNotFoundError("Product not found")

    if not product.is_active:
        raise CartProductUnavailableError("Product is not available")

    quantity = int(quantity)
    if product.stock < quantity:
        raise CartStockError(product.stock)

    # Adds to the same cart run one at a time.
    Cart.objects.select_for_update().filter(pk=cart.pk).first()

    item = _locked_line(cart, product)

    if item is None:
        try:
            with transaction.atomic():
                item = CartItem.objects.create(
                    cart=cart,
                    product=product,
                    quantity=quantity,
                    unit_price=product.effective_price,
                    attributes=_normalize_attributes(attributes),
                )
        except IntegrityError:
            # Another request inserted this line first (unique per cart).
            item = _locked_line(cart, product)
            if item is None:
                raise
            item = _increase_line(item, product, quantity, attributes)
    else:
        item = _increase_line(item, product, quantity, attributes)

    logger.info(
        "Cart item added",
        extra={
            "cart_id": str(cart.id),
            "product_id": str(product.id),
            "quantity": item.quantity,
        },
    )
    return item


def _get_item(*, cart: Cart, item_id) -> CartItem:
    item = CartItem.objects.select_related("product").filter(cart=cart, pk=item_id).first()
    if item is None:
        raise CartItemNotFoundError("Item not found in cart")
    return item


@transaction.atomic
def update_item_quantity(*, cart: Cart, item_id, quantity: int) -> CartItem:
    item = _get_item(cart=cart, item_id=item_id)

    quantity = int(quantity)
    if item.product.stock < quantity:
        raise CartStockError(item.product.stock)

    item.quantity = quantity
    item.save(update_fields=["quantity", "updated_at"])
    return item


def remove_item(*, cart: Cart, item_id) -> None:
    _get_item(cart=cart, item_id=item_id).delete()


def clear_cart(*, cart: Cart) -> None:
    cart.items.all().delete()
