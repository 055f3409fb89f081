from .cancellation import cancel_order
from .checkout_orchestrator import checkout_cart, place_order
from .order_lifecycle import CANCELLABLE_STATES, can_cancel, set_order_status

__all__ = [
    "CANCELLABLE_STATES",
    "can_cancel",
    "cancel_order",
    "checkout_cart",
    "place_order",
    "set_order_status",
]
