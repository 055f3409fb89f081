"""
PATH: carts/models/cart.py

CART MODEL

Purpose:
- Shopping cart owned by EITHER a registered user OR a guest token
  ("guest_<uuid4>", sent in the X-Guest-Id header).
- Derive subtotal + item count from CartItems.

Rules:
- Exactly one owner (DB check constraint).
- One cart per user, one cart per guest id.
- cart_type is derived from the owner on save.
"""

import uuid
from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import F, Q, Sum

User = settings.AUTH_USER_MODEL


class Cart(models.Model):
    TYPE_USER = "user"
    TYPE_GUEST = "guest"

    TYPE_CHOICES = [
        (TYPE_USER, "User"),
        (TYPE_GUEST, "Guest"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    user = models.OneToOneField(
        User,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="cart",
    )

    guest_id = models.CharField(max_length=64, unique=True, null=True, blank=True)

    cart_type = models.CharField(max_length=10, choices=TYPE_CHOICES)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["cart_type", "updated_at"], name="cart_type_updated_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=(
                    Q(user__isnull=False, guest_id__isnull=True)
                    | Q(user__isnull=True, guest_id__isnull=False)
                ),
                name="chk_cart_single_owner",
            ),
        ]

    def clean(self):
        if self.user_id is None and not self.guest_id:
            raise ValidationError("Either user or guest_id must be provided")
        if self.user_id is not None and self.guest_id:
            raise ValidationError("Cannot have both user and guest_id")

    def save(self, *args, **kwargs):
        self.guest_id = self.guest_id or None
        self.cart_type = self.TYPE_USER if self.user_id else self.TYPE_GUEST
        self.full_clean()
        return super().save(*args, **kwargs)

    @property
    def item_count(self) -> int:
        total = self.items.aggregate(total=Sum("quantity")).get("total")
        return int(total or 0)

    @property
    def total_amount(self) -> Decimal:
        total = (
            self.items.annotate(line_total=F("quantity") * F("unit_price"))
            .aggregate(total=Sum("line_total"))
            .get("total")
        )
        return total or Decimal("0.00")

    @property
    def is_empty(self) -> bool:
        return not self.items.exists()

    def __str__(self):
        owner = self.user if self.user_id else self.guest_id
        return f"Cart {self.id} | {self.cart_type} | {owner}"
