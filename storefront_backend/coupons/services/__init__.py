from .evaluator import CouponEvaluation, evaluate_coupon, evaluate_coupon_for
from .usage import consume_coupon_usage, find_coupon_by_code, release_coupon_usage

__all__ = [
    "CouponEvaluation",
    "consume_coupon_usage",
    "evaluate_coupon",
    "evaluate_coupon_for",
    "find_coupon_by_code",
    "release_coupon_usage",
]
