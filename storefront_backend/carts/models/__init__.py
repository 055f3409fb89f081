"""
PATH: carts/models/__init__.py
"""

from .cart import Cart
from .cart_item import CartItem

__all__ = [
    "Cart",
    "CartItem",
]
