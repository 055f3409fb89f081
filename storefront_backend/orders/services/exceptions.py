# orders/services/exceptions.py

"""
Order domain errors.

Every error carries a stable `code` and the HTTP status the API answers with,
so views can render them uniformly through backend.responses.
"""

from rest_framework import status


class OrderServiceError(Exception):
    code = "ORDER_ERROR"
    http_status = status.HTTP_400_BAD_REQUEST


class ProductNotFoundError(OrderServiceError):
    code = "PRODUCT_NOT_FOUND"
    http_status = status.HTTP_404_NOT_FOUND

    def __init__(self, product_id):
        self.product_id = product_id
        super().__init__(f"Product not found: {product_id}")


class ProductUnavailableError(OrderServiceError):
    code = "PRODUCT_UNAVAILABLE"

    def __init__(self, product_name):
        self.product_name = product_name
        super().__init__(f"Product is not available: {product_name}")


class InsufficientStockError(OrderServiceError):
    code = "INSUFFICIENT_STOCK"

    def __init__(self, product_name, *, available: int, requested: int):
        self.product_name = product_name
        self.available = available
        self.requested = requested
        super().__init__(
            f"Insufficient stock for {product_name}. "
            f"Available: {available}, Requested: {requested}"
        )


class CouponInvalidError(OrderServiceError):
    code = "COUPON_INVALID"


class EmptyOrderError(OrderServiceError):
    code = "EMPTY_ORDER"


class OrderNotFoundError(OrderServiceError):
    code = "ORDER_NOT_FOUND"
    http_status = status.HTTP_404_NOT_FOUND


class OrderForbiddenError(OrderServiceError):
    code = "FORBIDDEN"
    http_status = status.HTTP_403_FORBIDDEN


class InvalidOrderTransitionError(OrderServiceError):
    code = "INVALID_STATE_TRANSITION"


class InvalidOrderStatusError(OrderServiceError):
    code = "INVALID_STATUS"


class InvalidOrderItemError(OrderServiceError):
    code = "INVALID_ITEM"
