# orders/models/order.py

import uuid
from decimal import Decimal

from django.conf import settings
from django.db import models
from django.db.models import Q
from django.utils import timezone

User = settings.AUTH_USER_MODEL


class Order(models.Model):
    """
    A customer order (the order ledger).

    GUARANTEES:
    - Created ONLY by the checkout workflow, together with its stock and
      coupon side effects (one transaction).
    - Money fields are server-computed:
        order_total_price = max(subtotal - discount_amount, 0)
    - Item price snapshots never change after creation.
    - Never hard-deleted; cancellation is a status.
    """

    STATUS_PENDING = "pending"
    STATUS_PROCESSING = "processing"
    STATUS_SHIPPED = "shipped"
    STATUS_DELIVERED = "delivered"
    STATUS_CANCELLED = "cancelled"

    STATUS_CHOICES = [
        (STATUS_PENDING, "Pending"),
        (STATUS_PROCESSING, "Processing"),
        (STATUS_SHIPPED, "Shipped"),
        (STATUS_DELIVERED, "Delivered"),
        (STATUS_CANCELLED, "Cancelled"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    order_code = models.CharField(
        max_length=64,
        unique=True,
        blank=True,
        help_text="System-generated public order code",
    )

    user = models.ForeignKey(
        User,
        on_delete=models.PROTECT,
        related_name="orders",
    )

    subtotal = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))

    coupon_code = models.CharField(max_length=20, null=True, blank=True)
    discount_value = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        null=True,
        blank=True,
        help_text="Coupon percentage applied at checkout",
    )
    discount_amount = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal("0.00")
    )
    order_total_price = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal("0.00")
    )

    status = models.CharField(
        max_length=32,
        choices=STATUS_CHOICES,
        default=STATUS_PENDING,
    )

    payment_method = models.CharField(max_length=64)

    # {"city", "street", "building", "floor", "apartment", "additional_info"}
    shipping_address = models.JSONField(default=dict)

    notes = models.TextField(blank=True, default="")

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    cancelled_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["user", "created_at"], name="order_user_created_idx"),
            models.Index(fields=["status"], name="order_status_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(order_total_price__gte=0),
                name="chk_order_total_gte_zero",
            ),
            models.CheckConstraint(
                condition=Q(discount_amount__gte=0),
                name="chk_order_discount_gte_zero",
            ),
        ]

    @classmethod
    def status_values(cls):
        return [value for value, _ in cls.STATUS_CHOICES]

    def save(self, *args, **kwargs):
        if not self.order_code:
            prefix = timezone.now().strftime("ORD%Y%m%d")
            self.order_code = f"{prefix}-{uuid.uuid4().hex[:8].upper()}"

        if self.status == self.STATUS_CANCELLED and not self.cancelled_at:
            self.cancelled_at = timezone.now()

        super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.order_code} | {self.order_total_price} | {self.status}"
