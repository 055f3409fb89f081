# carts/services/exceptions.py

from rest_framework import status


class CartServiceError(Exception):
    code = "CART_ERROR"
    http_status = status.HTTP_400_BAD_REQUEST


class CartProductNotFoundError(CartServiceError):
    code = "PRODUCT_NOT_FOUND"
    http_status = status.HTTP_404_NOT_FOUND


class CartProductUnavailableError(CartServiceError):
    code = "PRODUCT_UNAVAILABLE"


class CartStockError(CartServiceError):
    code = "INSUFFICIENT_STOCK"

    def __init__(self, available: int):
        self.available = available
        super().__init__(f"Only {available} items available in stock")


class CartItemNotFoundError(CartServiceError):
    code = "CART_ITEM_NOT_FOUND"
    http_status = status.HTTP_404_NOT_FOUND
