# orders/tests/test_checkout.py

from decimal import Decimal
import uuid

from django.contrib.auth import get_user_model
from django.test import TestCase

from coupons.models import Coupon
from orders.models import Order, OrderItem
from orders.services.checkout_orchestrator import place_order
from orders.services.exceptions import (
    CouponInvalidError,
    EmptyOrderError,
    InsufficientStockError,
    ProductNotFoundError,
    ProductUnavailableError,
)
from products.models import Product

User = get_user_model()

ADDRESS = {"city": "Cairo", "street": "Tahrir St"}


class CheckoutTests(TestCase):
    """
    Checkout workflow tests.

    GUARANTEES:
    - Totals are computed server-side from price snapshots
    - Stock and coupon usage move exactly once per successful order
    - Any failure leaves stock, coupon usage and orders untouched
    """

    def setUp(self):
        self.user = User.objects.create_user(email="buyer@example.com", password="pass12345")

        self.p1 = Product.objects.create(sku="P1", name="Phone", price=Decimal("100.00"), stock=5)
        self.p2 = Product.objects.create(sku="P2", name="Case", price=Decimal("15.50"), stock=10)

        self.coupon = Coupon.objects.create(
            code="SAVE20",
            value=Decimal("20"),
            min_order_amount=Decimal("50.00"),
            usage_limit=1,
        )

    # -----------------------------------------------------
    # Helpers
    # -----------------------------------------------------

    def _place(self, items, coupon_code=None):
        return place_order(
            user=self.user,
            items=items,
            payment_method="cash_on_delivery",
            shipping_address=ADDRESS,
            coupon_code=coupon_code,
        )

    def _stock(self, product):
        product.refresh_from_db()
        return product.stock

    # -----------------------------------------------------
    # Happy path
    # -----------------------------------------------------

    def test_coupon_checkout_then_second_checkout_rejected(self):
        """
        P1 stock 5 @ 100, SAVE20 (20%, min 50, limit 1):
        2 x P1 -> subtotal 200, discount 40, total 160, stock 3, used 1.
        A second checkout with the coupon fails and leaves stock at 3.
        """
        order = self._place([{"product_id": self.p1.id, "quantity": 2}], coupon_code="SAVE20")

        self.assertEqual(order.subtotal, Decimal("200.00"))
        self.assertEqual(order.discount_amount, Decimal("40.00"))
        self.assertEqual(order.order_total_price, Decimal("160.00"))
        self.assertEqual(order.coupon_code, "SAVE20")
        self.assertEqual(order.discount_value, Decimal("20"))
        self.assertEqual(order.status, Order.STATUS_PENDING)
        self.assertEqual(self._stock(self.p1), 3)

        self.coupon.refresh_from_db()
        self.assertEqual(self.coupon.used_count, 1)

        with self.assertRaises(CouponInvalidError) as ctx:
            self._place([{"product_id": self.p1.id, "quantity": 1}], coupon_code="SAVE20")

        self.assertEqual(str(ctx.exception), "Coupon usage limit exceeded")
        self.assertEqual(self._stock(self.p1), 3)
        self.assertEqual(Order.objects.count(), 1)

    def test_items_snapshot_price_and_name(self):
        order = self._place(
            [
                {"product_id": self.p1.id, "quantity": 1, "attributes_selected": {"color": "black"}},
                {"product_id": self.p2.id, "quantity": 3},
            ]
        )

        self.assertEqual(order.subtotal, Decimal("146.50"))
        self.assertEqual(order.discount_amount, Decimal("0.00"))
        self.assertEqual(order.order_total_price, Decimal("146.50"))
        self.assertIsNone(order.coupon_code)

        items = list(order.items.order_by("price_at_purchase"))
        self.assertEqual(items[0].product_name, "Case")
        self.assertEqual(items[1].attributes_selected, {"color": "black"})

        # later price change does not rewrite history
        self.p1.price = Decimal("999.00")
        self.p1.save()
        self.assertEqual(
            OrderItem.objects.get(order=order, product_id=self.p1.id).price_at_purchase,
            Decimal("100.00"),
        )

    def test_sale_price_is_charged_and_snapshotted(self):
        self.p1.sale_price = Decimal("75.00")
        self.p1.save()

        order = self._place([{"product_id": self.p1.id, "quantity": 2}], coupon_code="SAVE20")

        self.assertEqual(order.subtotal, Decimal("150.00"))
        self.assertEqual(order.discount_amount, Decimal("30.00"))
        self.assertEqual(order.order_total_price, Decimal("120.00"))
        self.assertEqual(order.items.get().price_at_purchase, Decimal("75.00"))

    def test_order_code_is_generated(self):
        order = self._place([{"product_id": self.p2.id, "quantity": 1}])
        self.assertTrue(order.order_code.startswith("ORD"))

    def test_exact_stock_can_be_bought(self):
        self._place([{"product_id": self.p1.id, "quantity": 5}])
        self.assertEqual(self._stock(self.p1), 0)

    def test_sequential_orders_stop_when_stock_runs_out(self):
        """Stock 5, quantity 2: exactly two orders succeed."""
        succeeded = 0
        for _ in range(4):
            try:
                self._place([{"product_id": self.p1.id, "quantity": 2}])
                succeeded += 1
            except InsufficientStockError:
                pass

        self.assertEqual(succeeded, 2)
        self.assertEqual(self._stock(self.p1), 1)

    # -----------------------------------------------------
    # Failures roll back everything
    # -----------------------------------------------------

    def test_missing_product(self):
        with self.assertRaises(ProductNotFoundError):
            self._place(
                [
                    {"product_id": self.p1.id, "quantity": 1},
                    {"product_id": uuid.uuid4(), "quantity": 1},
                ]
            )

        self.assertEqual(self._stock(self.p1), 5)
        self.assertEqual(Order.objects.count(), 0)

    def test_inactive_product(self):
        self.p2.is_active = False
        self.p2.save()

        with self.assertRaises(ProductUnavailableError):
            self._place([{"product_id": self.p2.id, "quantity": 1}])

    def test_insufficient_stock_reports_available(self):
        with self.assertRaises(InsufficientStockError) as ctx:
            self._place(
                [
                    {"product_id": self.p2.id, "quantity": 2},
                    {"product_id": self.p1.id, "quantity": 6},
                ]
            )

        self.assertEqual(ctx.exception.available, 5)
        self.assertEqual(self._stock(self.p2), 10)

    def test_same_product_twice_counts_against_stock(self):
        with self.assertRaises(InsufficientStockError):
            self._place(
                [
                    {"product_id": self.p1.id, "quantity": 3},
                    {"product_id": self.p1.id, "quantity": 3},
                ]
            )

        self.assertEqual(self._stock(self.p1), 5)

    def test_invalid_coupon_rolls_back_stock(self):
        with self.assertRaises(CouponInvalidError) as ctx:
            self._place([{"product_id": self.p2.id, "quantity": 1}], coupon_code="SAVE20")

        self.assertEqual(str(ctx.exception), "Minimum order amount of 50.00 required")
        self.assertEqual(self._stock(self.p2), 10)

        self.coupon.refresh_from_db()
        self.assertEqual(self.coupon.used_count, 0)

    def test_unknown_coupon(self):
        with self.assertRaises(CouponInvalidError) as ctx:
            self._place([{"product_id": self.p1.id, "quantity": 1}], coupon_code="NOPE")

        self.assertEqual(str(ctx.exception), "Invalid coupon code")
        self.assertEqual(self._stock(self.p1), 5)

    def test_coupon_code_is_case_insensitive(self):
        order = self._place([{"product_id": self.p1.id, "quantity": 1}], coupon_code=" save20 ")
        self.assertEqual(order.coupon_code, "SAVE20")

    def test_empty_items(self):
        with self.assertRaises(EmptyOrderError):
            self._place([])

    def test_total_never_negative(self):
        Coupon.objects.create(code="FREE100", value=Decimal("100"))

        order = self._place([{"product_id": self.p2.id, "quantity": 1}], coupon_code="FREE100")
        self.assertEqual(order.order_total_price, Decimal("0.00"))
