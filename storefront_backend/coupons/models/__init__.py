"""
PATH: coupons/models/__init__.py
"""

from .coupon import Coupon

__all__ = [
    "Coupon",
]
