# products/models/product.py

import uuid
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Q


class Product(models.Model):
    """
    Represents a sellable product.

    STOCK MODEL (IMPORTANT):
    - Product.stock is the single source of truth for available units.
    - stock is decremented ONLY by checkout (conditional UPDATE, never below zero)
      and incremented ONLY by order cancellation or admin restock.
    - Order lines keep their own price snapshot, so editing price here never
      rewrites order history.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    sku = models.CharField(max_length=128, unique=True, db_index=True)
    name = models.CharField(max_length=255, db_index=True)
    description = models.TextField(blank=True, default="")

    # List price; effective_price (sale price when set) is what carts and
    # orders snapshot.
    price = models.DecimalField(max_digits=12, decimal_places=2)
    sale_price = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)

    stock = models.PositiveIntegerField(default=0)

    # Open value bag: {"color": "red", "size": 42, "wireless": true}
    attributes = models.JSONField(default=dict, blank=True)

    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["sku"], name="product_sku_idx"),
            models.Index(fields=["name"], name="product_name_idx"),
            models.Index(fields=["is_active", "created_at"], name="product_active_created_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(stock__gte=0),
                name="chk_product_stock_gte_zero",
            ),
            models.CheckConstraint(
                condition=Q(price__gte=0),
                name="chk_product_price_gte_zero",
            ),
            models.CheckConstraint(
                condition=Q(sale_price__isnull=True) | Q(sale_price__gte=0),
                name="chk_product_sale_price_gte_zero",
            ),
        ]

    def __str__(self):
        return f"{self.name} ({self.sku})"

    def clean(self):
        if self.price is None or Decimal(self.price) < Decimal("0.00"):
            raise ValidationError({"price": "Price must be non-negative"})

        if self.sale_price is not None and Decimal(self.sale_price) < Decimal("0.00"):
            raise ValidationError({"sale_price": "Sale price must be non-negative"})

        if self.stock is None or int(self.stock) < 0:
            raise ValidationError({"stock": "Stock cannot be negative"})

        if not isinstance(self.attributes, dict):
            raise ValidationError({"attributes": "attributes must be an object"})

    @property
    def effective_price(self) -> Decimal:
        # A zero or missing sale price means "not on sale".
        if self.sale_price:
            return self.sale_price
        return self.price

    @property
    def is_in_stock(self) -> bool:
        return int(self.stock or 0) > 0
