from .cart import (
    AddCartItemInputSerializer,
    CartItemSerializer,
    CartSerializer,
    UpdateCartItemInputSerializer,
)

__all__ = [
    "AddCartItemInputSerializer",
    "CartItemSerializer",
    "CartSerializer",
    "UpdateCartItemInputSerializer",
]
