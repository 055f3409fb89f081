from .inventory import (
    InventoryError,
    current_stock,
    get_product_for_update,
    reserve_stock,
    restock_product,
    restore_stock,
)

__all__ = [
    "InventoryError",
    "current_stock",
    "get_product_for_update",
    "reserve_stock",
    "restock_product",
    "restore_stock",
]
