from .cart import CartItemDetailView, CartItemsView, CartView, CheckoutCartView, MergeCartView

__all__ = [
    "CartItemDetailView",
    "CartItemsView",
    "CartView",
    "CheckoutCartView",
    "MergeCartView",
]
