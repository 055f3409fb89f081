# coupons/tests/test_evaluator.py

from datetime import timedelta
from decimal import Decimal

from django.test import TestCase
from django.utils import timezone

from coupons.models import Coupon
from coupons.services.evaluator import evaluate_coupon, evaluate_coupon_for


class CouponEvaluatorTests(TestCase):
    """
    GUARANTEES:
    - Checks run in a fixed order; the first failure wins
    - Discount is percentage-based, capped, rounded half-up to 2dp
    - Evaluation never consumes a use
    """

    def setUp(self):
        self.coupon = Coupon.objects.create(
            code="SAVE20",
            value=Decimal("20"),
            min_order_amount=Decimal("50.00"),
            usage_limit=1,
        )

    def test_valid_coupon_returns_discount(self):
        result = evaluate_coupon("SAVE20", Decimal("200.00"))

        self.assertTrue(result.is_valid)
        self.assertEqual(result.coupon, self.coupon)
        self.assertEqual(result.discount_amount, Decimal("40.00"))

    def test_code_lookup_is_trimmed_and_case_insensitive(self):
        result = evaluate_coupon("  save20 ", Decimal("200.00"))
        self.assertTrue(result.is_valid)

    def test_unknown_code(self):
        result = evaluate_coupon("NOPE", Decimal("200.00"))

        self.assertFalse(result.is_valid)
        self.assertEqual(result.message, "Invalid coupon code")
        self.assertIsNone(result.coupon)

    def test_inactive_coupon(self):
        self.coupon.is_active = False
        self.coupon.save()

        result = evaluate_coupon("SAVE20", Decimal("200.00"))
        self.assertEqual(result.message, "Coupon is not active")

    def test_expired_coupon(self):
        self.coupon.expires_at = timezone.now() - timedelta(minutes=1)
        self.coupon.save()

        result = evaluate_coupon("SAVE20", Decimal("200.00"))
        self.assertEqual(result.message, "Coupon has expired")

    def test_future_expiry_is_valid(self):
        self.coupon.expires_at = timezone.now() + timedelta(days=1)
        self.coupon.save()

        self.assertTrue(evaluate_coupon("SAVE20", Decimal("200.00")).is_valid)

    def test_usage_limit_exceeded(self):
        self.coupon.used_count = 1
        self.coupon.save()

        result = evaluate_coupon("SAVE20", Decimal("200.00"))
        self.assertEqual(result.message, "Coupon usage limit exceeded")

    def test_minimum_order_amount(self):
        result = evaluate_coupon("SAVE20", Decimal("49.99"))

        self.assertFalse(result.is_valid)
        self.assertEqual(result.message, "Minimum order amount of 50.00 required")

    def test_first_failure_wins(self):
        """Inactive and expired and exhausted: the inactive message is reported."""
        self.coupon.is_active = False
        self.coupon.expires_at = timezone.now() - timedelta(days=1)
        self.coupon.used_count = 1
        self.coupon.save()

        result = evaluate_coupon("SAVE20", Decimal("10.00"))
        self.assertEqual(result.message, "Coupon is not active")

    def test_discount_is_capped(self):
        coupon = Coupon(
            code="BIG50",
            value=Decimal("50"),
            max_discount_amount=Decimal("30.00"),
        )

        result = evaluate_coupon_for(coupon, Decimal("200.00"))
        self.assertEqual(result.discount_amount, Decimal("30.00"))

    def test_discount_rounds_half_up(self):
        coupon = Coupon(code="ODD15", value=Decimal("15"))

        # 0.30 * 15% = 0.045 -> 0.05
        result = evaluate_coupon_for(coupon, Decimal("0.30"))
        self.assertEqual(result.discount_amount, Decimal("0.05"))

    def test_discount_never_exceeds_subtotal(self):
        coupon = Coupon(code="FREE", value=Decimal("100"))

        result = evaluate_coupon_for(coupon, Decimal("80.00"))
        self.assertEqual(result.discount_amount, Decimal("80.00"))

    def test_evaluation_does_not_consume_usage(self):
        evaluate_coupon("SAVE20", Decimal("200.00"))
        evaluate_coupon("SAVE20", Decimal("200.00"))

        self.coupon.refresh_from_db()
        self.assertEqual(self.coupon.used_count, 0)
