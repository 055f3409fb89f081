from .coupon import CouponViewSet, ValidateCouponView

__all__ = [
    "CouponViewSet",
    "ValidateCouponView",
]
