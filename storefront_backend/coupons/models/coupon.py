# coupons/models/coupon.py

import uuid
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Q


class Coupon(models.Model):
    """
    Percentage discount code.

    USAGE COUNTER (IMPORTANT):
    - used_count moves ONLY through coupons.services.usage (conditional
      UPDATEs), never through save(). It never exceeds usage_limit and never
      drops below zero.
    - Evaluating a coupon never touches used_count.
    """

    CODE_MIN_LENGTH = 3
    CODE_MAX_LENGTH = 20

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    # Stored trimmed + uppercase; lookups are case-insensitive
    code = models.CharField(max_length=CODE_MAX_LENGTH, unique=True)

    # Percentage 0..100
    value = models.DecimalField(max_digits=5, decimal_places=2)

    min_order_amount = models.DecimalField(
        max_digits=12, decimal_places=2, null=True, blank=True
    )
    max_discount_amount = models.DecimalField(
        max_digits=12, decimal_places=2, null=True, blank=True
    )

    # NULL = unlimited
    usage_limit = models.PositiveIntegerField(null=True, blank=True)
    used_count = models.PositiveIntegerField(default=0)

    expires_at = models.DateTimeField(null=True, blank=True)
    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["is_active", "expires_at"], name="coupon_active_expiry_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(used_count__gte=0),
                name="chk_coupon_used_count_gte_zero",
            ),
            models.CheckConstraint(
                condition=Q(value__gte=0) & Q(value__lte=100),
                name="chk_coupon_value_percentage",
            ),
            models.CheckConstraint(
                condition=Q(usage_limit__isnull=True) | Q(usage_limit__gte=1),
                name="chk_coupon_usage_limit_gte_one",
            ),
        ]

    def __str__(self):
        return f"{self.code} ({self.value}%)"

    @staticmethod
    def normalize_code(code) -> str:
        return str(code or "").strip().upper()

    def clean(self):
        self.code = self.normalize_code(self.code)
        if not (self.CODE_MIN_LENGTH <= len(self.code) <= self.CODE_MAX_LENGTH):
            raise ValidationError(
                {"code": f"Code must be {self.CODE_MIN_LENGTH}-{self.CODE_MAX_LENGTH} characters"}
            )

        if self.value is None or not (Decimal("0") <= Decimal(self.value) <= Decimal("100")):
            raise ValidationError({"value": "Value must be between 0 and 100"})

        for field in ("min_order_amount", "max_discount_amount"):
            amount = getattr(self, field)
            if amount is not None and Decimal(amount) < Decimal("0.00"):
                raise ValidationError({field: "Amount must be non-negative"})

        if self.usage_limit is not None and int(self.usage_limit) < 1:
            raise ValidationError({"usage_limit": "Usage limit must be at least 1"})

    def save(self, *args, **kwargs):
        self.code = self.normalize_code(self.code)
        return super().save(*args, **kwargs)

    @property
    def remaining_uses(self):
        if self.usage_limit is None:
            return None
        return max(int(self.usage_limit) - int(self.used_count or 0), 0)
