# orders/tests/test_cancellation.py

from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import TestCase

from coupons.models import Coupon
from orders.models import Order
from orders.services.cancellation import cancel_order
from orders.services.checkout_orchestrator import place_order
from orders.services.exceptions import (
    InvalidOrderTransitionError,
    OrderForbiddenError,
    OrderNotFoundError,
)
from orders.services.order_lifecycle import can_cancel, set_order_status
from products.models import Product

User = get_user_model()


class CancellationTests(TestCase):
    """
    GUARANTEES:
    - Cancelling restores stock and releases the coupon use
    - Only the owner can cancel, and only from pending / processing
    - Cancelling twice is rejected
    """

    def setUp(self):
        self.owner = User.objects.create_user(email="owner@example.com", password="pass12345")
        self.stranger = User.objects.create_user(email="stranger@example.com", password="pass12345")

        self.product = Product.objects.create(sku="P1", name="Phone", price=Decimal("100.00"), stock=5)
        self.coupon = Coupon.objects.create(code="SAVE20", value=Decimal("20"), usage_limit=1)

        self.order = place_order(
            user=self.owner,
            items=[{"product_id": self.product.id, "quantity": 2}],
            payment_method="cash_on_delivery",
            shipping_address={"city": "Cairo", "street": "Tahrir St"},
            coupon_code="SAVE20",
        )

    def test_cancel_restores_stock_and_coupon(self):
        order = cancel_order(order_id=self.order.id, user=self.owner)

        self.assertEqual(order.status, Order.STATUS_CANCELLED)
        self.assertIsNotNone(order.cancelled_at)

        self.product.refresh_from_db()
        self.assertEqual(self.product.stock, 5)

        self.coupon.refresh_from_db()
        self.assertEqual(self.coupon.used_count, 0)

    def test_processing_order_can_be_cancelled(self):
        set_order_status(order_id=self.order.id, status=Order.STATUS_PROCESSING)

        order = cancel_order(order_id=self.order.id, user=self.owner)
        self.assertEqual(order.status, Order.STATUS_CANCELLED)

    def test_shipped_order_cannot_be_cancelled(self):
        set_order_status(order_id=self.order.id, status=Order.STATUS_SHIPPED)

        with self.assertRaises(InvalidOrderTransitionError) as ctx:
            cancel_order(order_id=self.order.id, user=self.owner)

        self.assertEqual(str(ctx.exception), "Cannot cancel order with status: shipped")
        self.product.refresh_from_db()
        self.assertEqual(self.product.stock, 3)

    def test_double_cancel_rejected(self):
        cancel_order(order_id=self.order.id, user=self.owner)

        with self.assertRaises(InvalidOrderTransitionError):
            cancel_order(order_id=self.order.id, user=self.owner)

        self.product.refresh_from_db()
        self.assertEqual(self.product.stock, 5)

    def test_non_owner_forbidden(self):
        with self.assertRaises(OrderForbiddenError):
            cancel_order(order_id=self.order.id, user=self.stranger)

    def test_unknown_order(self):
        with self.assertRaises(OrderNotFoundError):
            cancel_order(order_id="00000000-0000-4000-8000-000000000000", user=self.owner)

    def test_deleted_product_is_skipped(self):
        self.product.delete()

        order = cancel_order(order_id=self.order.id, user=self.owner)
        self.assertEqual(order.status, Order.STATUS_CANCELLED)

    def test_deleted_coupon_is_skipped(self):
        self.coupon.delete()

        order = cancel_order(order_id=self.order.id, user=self.owner)
        self.assertEqual(order.status, Order.STATUS_CANCELLED)

    def test_coupon_usage_never_below_zero(self):
        Coupon.objects.filter(pk=self.coupon.pk).update(used_count=0)

        cancel_order(order_id=self.order.id, user=self.owner)

        self.coupon.refresh_from_db()
        self.assertEqual(self.coupon.used_count, 0)


class OrderStatusTests(TestCase):
    def setUp(self):
        self.user = User.objects.create_user(email="buyer@example.com", password="pass12345")
        self.product = Product.objects.create(sku="P1", name="Phone", price=Decimal("10.00"), stock=5)
        self.order = place_order(
            user=self.user,
            items=[{"product_id": self.product.id, "quantity": 1}],
            payment_method="card",
            shipping_address={"city": "Giza", "street": "Pyramids Rd"},
        )

    def test_admin_status_has_no_stock_side_effects(self):
        set_order_status(order_id=self.order.id, status=Order.STATUS_CANCELLED)

        self.product.refresh_from_db()
        self.assertEqual(self.product.stock, 4)

    def test_any_enumerated_status_allowed(self):
        for value in Order.status_values():
            order = set_order_status(order_id=self.order.id, status=value)
            self.assertEqual(order.status, value)

    def test_only_pending_and_processing_are_cancellable(self):
        cancellable = {
            value: can_cancel(set_order_status(order_id=self.order.id, status=value))
            for value in Order.status_values()
        }

        self.assertEqual(
            cancellable,
            {
                Order.STATUS_PENDING: True,
                Order.STATUS_PROCESSING: True,
                Order.STATUS_SHIPPED: False,
                Order.STATUS_DELIVERED: False,
                Order.STATUS_CANCELLED: False,
            },
        )
