# coupons/tests/test_api.py

from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import TestCase
from rest_framework.test import APIClient

from coupons.models import Coupon

User = get_user_model()


class CouponApiTests(TestCase):
    """
    GUARANTEES:
    - Coupon management is admin-only
    - Codes are unique case-insensitively and immutable
    - The public preview never consumes a use
    """

    def setUp(self):
        self.client = APIClient()
        self.admin = User.objects.create_user(
            email="admin@example.com",
            password="pass12345",
            role="admin",
        )
        self.customer = User.objects.create_user(
            email="customer@example.com",
            password="pass12345",
        )
        self.coupon = Coupon.objects.create(
            code="SAVE20",
            value=Decimal("20"),
            min_order_amount=Decimal("50.00"),
            usage_limit=5,
        )

    def test_customer_cannot_list_coupons(self):
        self.client.force_authenticate(self.customer)
        res = self.client.get("/api/coupons/")
        self.assertEqual(res.status_code, 403)

    def test_admin_creates_coupon(self):
        self.client.force_authenticate(self.admin)
        res = self.client.post(
            "/api/coupons/",
            {"code": " welcome10 ", "value": "10", "usage_limit": 100},
            format="json",
        )

        self.assertEqual(res.status_code, 201)
        self.assertEqual(res.data["code"], "WELCOME10")
        self.assertEqual(res.data["used_count"], 0)

    def test_duplicate_code_rejected_case_insensitively(self):
        self.client.force_authenticate(self.admin)
        res = self.client.post(
            "/api/coupons/",
            {"code": "save20", "value": "5"},
            format="json",
        )
        self.assertEqual(res.status_code, 400)

    def test_value_above_100_rejected(self):
        self.client.force_authenticate(self.admin)
        res = self.client.post(
            "/api/coupons/",
            {"code": "TOOMUCH", "value": "150"},
            format="json",
        )
        self.assertEqual(res.status_code, 400)

    def test_code_is_immutable(self):
        self.client.force_authenticate(self.admin)
        res = self.client.patch(
            f"/api/coupons/{self.coupon.id}/",
            {"code": "OTHER"},
            format="json",
        )
        self.assertEqual(res.status_code, 400)

    def test_admin_list_filters(self):
        Coupon.objects.create(code="OLD10", value=Decimal("10"), is_active=False)
        self.client.force_authenticate(self.admin)

        active = self.client.get("/api/coupons/", {"is_active": "true"})
        self.assertEqual([c["code"] for c in active.data["results"]], ["SAVE20"])

        searched = self.client.get("/api/coupons/", {"search": "old"})
        self.assertEqual([c["code"] for c in searched.data["results"]], ["OLD10"])

    def test_public_preview(self):
        res = self.client.post(
            "/api/coupons/validate/",
            {"coupon_code": "save20", "subtotal": "200.00"},
            format="json",
        )

        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["discount_amount"], "40.00")
        self.assertEqual(res.data["total"], "160.00")

        self.coupon.refresh_from_db()
        self.assertEqual(self.coupon.used_count, 0)

    def test_public_preview_rejects_small_subtotal(self):
        res = self.client.post(
            "/api/coupons/validate/",
            {"coupon_code": "SAVE20", "subtotal": "10.00"},
            format="json",
        )

        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.data["error"]["code"], "COUPON_INVALID")
        self.assertEqual(res.data["error"]["message"], "Minimum order amount of 50.00 required")
