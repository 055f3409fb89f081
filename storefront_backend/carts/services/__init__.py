from .cart_merge import merge_guest_cart_into_user
from .cart_service import add_item, clear_cart, get_or_create_cart, remove_item, update_item_quantity
from .guest import generate_guest_id, is_valid_guest_id

__all__ = [
    "add_item",
    "clear_cart",
    "generate_guest_id",
    "get_or_create_cart",
    "is_valid_guest_id",
    "merge_guest_cart_into_user",
    "remove_item",
    "update_item_quantity",
]
