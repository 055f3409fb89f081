from .order import (
    CheckoutDetailsSerializer,
    OrderItemSerializer,
    OrderSerializer,
    OrderStatusInputSerializer,
    PlaceOrderInputSerializer,
    ShippingAddressSerializer,
)

__all__ = [
    "CheckoutDetailsSerializer",
    "OrderItemSerializer",
    "OrderSerializer",
    "OrderStatusInputSerializer",
    "PlaceOrderInputSerializer",
    "ShippingAddressSerializer",
]
