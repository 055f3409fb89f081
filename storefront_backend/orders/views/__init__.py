from .order import OrderViewSet

__all__ = [
    "OrderViewSet",
]
