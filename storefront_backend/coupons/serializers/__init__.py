from .coupon import CouponPreviewSerializer, CouponSerializer, CouponValidateInputSerializer

__all__ = [
    "CouponPreviewSerializer",
    "CouponSerializer",
    "CouponValidateInputSerializer",
]
