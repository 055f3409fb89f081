# orders/tests/test_api.py

from decimal import Decimal
import uuid

from django.contrib.auth import get_user_model
from django.test import TestCase
from rest_framework.test import APIClient

from coupons.models import Coupon
from orders.models import Order
from products.models import Product

User = get_user_model()


class OrderApiTests(TestCase):
    """
    Order endpoint tests.

    GUARANTEES:
    - Checkout requires authentication and answers 201 / 400 / 404
    - Domain errors use the {"error": {"code", "message"}} envelope
    - Owners see their orders; admins see everything
    """

    def setUp(self):
        self.client = APIClient()

        self.customer = User.objects.create_user(email="buyer@example.com", password="pass12345")
        self.other = User.objects.create_user(email="other@example.com", password="pass12345")
        self.admin = User.objects.create_user(
            email="admin@example.com",
            password="pass12345",
            role="admin",
        )

        self.product = Product.objects.create(
            sku="P1",
            name="Phone",
            price=Decimal("100.00"),
            stock=5,
        )
        Coupon.objects.create(
            code="SAVE20",
            value=Decimal("20"),
            min_order_amount=Decimal("50.00"),
            usage_limit=1,
        )

    # -----------------------------------------------------
    # Helpers
    # -----------------------------------------------------

    def _payload(self, quantity=2, coupon_code=None, product_id=None):
        payload = {
            "items": [
                {
                    "product_id": str(product_id or self.product.id),
                    "quantity": quantity,
                    "attributes_selected": {"color": "black"},
                }
            ],
            "payment_method": "cash_on_delivery",
            "shipping_address": {"city": "Cairo", "street": "Tahrir St", "floor": "3"},
            "notes": "Ring twice",
        }
        if coupon_code:
            payload["coupon_code"] = coupon_code
        return payload

    def _checkout(self, user=None, **kwargs):
        self.client.force_authenticate(user or self.customer)
        return self.client.post("/api/orders/", self._payload(**kwargs), format="json")

    # -----------------------------------------------------
    # Checkout
    # -----------------------------------------------------

    def test_checkout_requires_authentication(self):
        res = self.client.post("/api/orders/", self._payload(), format="json")
        self.assertEqual(res.status_code, 401)

    def test_checkout_with_coupon(self):
        res = self._checkout(coupon_code="save20")

        self.assertEqual(res.status_code, 201)
        self.assertEqual(res.data["subtotal"], "200.00")
        self.assertEqual(res.data["discount_amount"], "40.00")
        self.assertEqual(res.data["order_total_price"], "160.00")
        self.assertEqual(res.data["status"], "pending")
        self.assertEqual(res.data["notes"], "Ring twice")
        self.assertEqual(res.data["shipping_address"]["floor"], "3")
        self.assertEqual(len(res.data["items"]), 1)
        self.assertEqual(res.data["items"][0]["price_at_purchase"], "100.00")

    def test_second_coupon_use_rejected(self):
        self._checkout(coupon_code="SAVE20")
        res = self._checkout(quantity=1, coupon_code="SAVE20")

        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.data["error"]["code"], "COUPON_INVALID")
        self.assertEqual(res.data["error"]["message"], "Coupon usage limit exceeded")

        self.product.refresh_from_db()
        self.assertEqual(self.product.stock, 3)

    def test_insufficient_stock(self):
        res = self._checkout(quantity=6)

        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.data["error"]["code"], "INSUFFICIENT_STOCK")

    def test_unknown_product_is_404(self):
        res = self._checkout(product_id=uuid.uuid4())

        self.assertEqual(res.status_code, 404)
        self.assertEqual(res.data["error"]["code"], "PRODUCT_NOT_FOUND")

    def test_shipping_address_requires_city_and_street(self):
        self.client.force_authenticate(self.customer)
        payload = self._payload()
        payload["shipping_address"] = {"city": "Cairo"}

        res = self.client.post("/api/orders/", payload, format="json")
        self.assertEqual(res.status_code, 400)
        self.assertIn("shipping_address", res.data)

    def test_empty_items_rejected(self):
        self.client.force_authenticate(self.customer)
        payload = self._payload()
        payload["items"] = []

        res = self.client.post("/api/orders/", payload, format="json")
        self.assertEqual(res.status_code, 400)

    def test_zero_quantity_rejected(self):
        res = self._checkout(quantity=0)
        self.assertEqual(res.status_code, 400)

    # -----------------------------------------------------
    # Reads
    # -----------------------------------------------------

    def test_my_orders_only_lists_own(self):
        self._checkout(quantity=1)
        self._checkout(user=self.other, quantity=1)

        self.client.force_authenticate(self.customer)
        res = self.client.get("/api/orders/my-orders/")

        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["count"], 1)

    def test_detail_owner_or_admin(self):
        order_id = self._checkout(quantity=1).data["id"]

        self.client.force_authenticate(self.other)
        self.assertEqual(self.client.get(f"/api/orders/{order_id}/").status_code, 403)

        self.client.force_authenticate(self.admin)
        self.assertEqual(self.client.get(f"/api/orders/{order_id}/").status_code, 200)

        self.client.force_authenticate(self.customer)
        self.assertEqual(self.client.get(f"/api/orders/{order_id}/").status_code, 200)

    # -----------------------------------------------------
    # Cancel
    # -----------------------------------------------------

    def test_owner_cancels(self):
        order_id = self._checkout(quantity=2).data["id"]

        res = self.client.put(f"/api/orders/{order_id}/cancel/")

        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["status"], "cancelled")
        self.product.refresh_from_db()
        self.assertEqual(self.product.stock, 5)

    def test_other_user_cannot_cancel(self):
        order_id = self._checkout(quantity=1).data["id"]

        self.client.force_authenticate(self.other)
        res = self.client.put(f"/api/orders/{order_id}/cancel/")

        self.assertEqual(res.status_code, 403)
        self.assertEqual(res.data["error"]["code"], "FORBIDDEN")

    def test_cancel_delivered_order_rejected(self):
        order_id = self._checkout(quantity=1).data["id"]
        Order.objects.filter(pk=order_id).update(status=Order.STATUS_DELIVERED)

        res = self.client.put(f"/api/orders/{order_id}/cancel/")

        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.data["error"]["code"], "INVALID_STATE_TRANSITION")

    def test_cancel_unknown_order_is_404(self):
        self.client.force_authenticate(self.customer)
        res = self.client.put(f"/api/orders/{uuid.uuid4()}/cancel/")

        self.assertEqual(res.status_code, 404)
        self.assertEqual(res.data["error"]["code"], "ORDER_NOT_FOUND")

    # -----------------------------------------------------
    # Admin
    # -----------------------------------------------------

    def test_admin_sets_status(self):
        order_id = self._checkout(quantity=1).data["id"]

        self.client.force_authenticate(self.admin)
        res = self.client.put(
            f"/api/orders/{order_id}/status/",
            {"status": "shipped"},
            format="json",
        )

        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["status"], "shipped")

    def test_unknown_status_rejected(self):
        order_id = self._checkout(quantity=1).data["id"]

        self.client.force_authenticate(self.admin)
        res = self.client.put(
            f"/api/orders/{order_id}/status/",
            {"status": "lost"},
            format="json",
        )
        self.assertEqual(res.status_code, 400)

    def test_customer_cannot_set_status(self):
        order_id = self._checkout(quantity=1).data["id"]

        res = self.client.put(
            f"/api/orders/{order_id}/status/",
            {"status": "delivered"},
            format="json",
        )
        self.assertEqual(res.status_code, 403)

    def test_admin_lists_all_with_status_filter(self):
        first = self._checkout(quantity=1).data["id"]
        self._checkout(user=self.other, quantity=1)
        Order.objects.filter(pk=first).update(status=Order.STATUS_PROCESSING)

        self.client.force_authenticate(self.admin)
        everything = self.client.get("/api/orders/admin/all/")
        processing = self.client.get("/api/orders/admin/all/", {"status": "processing"})

        self.assertEqual(everything.data["count"], 2)
        self.assertEqual(processing.data["count"], 1)

    def test_customer_cannot_list_all(self):
        self.client.force_authenticate(self.customer)
        res = self.client.get("/api/orders/admin/all/")
        self.assertEqual(res.status_code, 403)
