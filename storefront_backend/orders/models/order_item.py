# orders/models/order_item.py

import uuid
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models

from .order import Order


class OrderItem(models.Model):
    """
    Order line snapshot.

    RULES:
    - product_id is a plain reference, not a foreign key: the catalog row may
      be deleted later and the order still reads correctly.
    - product_name and price_at_purchase are copied at checkout and never
      rewritten.
    """

    _IMMUTABLE_FIELDS = ("product_id", "product_name", "quantity", "price_at_purchase")

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    order = models.ForeignKey(
        Order,
        on_delete=models.CASCADE,
        related_name="items",
    )

    product_id = models.UUIDField(db_index=True)
    product_name = models.CharField(max_length=255)

    quantity = models.PositiveIntegerField()
    price_at_purchase = models.DecimalField(max_digits=12, decimal_places=2)

    attributes_selected = models.JSONField(default=dict, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["created_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity__gte=1),
                name="chk_order_item_quantity_gte_one",
            ),
        ]

    def clean(self):
        if self.quantity is None or int(self.quantity) <= 0:
            raise ValidationError({"quantity": "Quantity must be greater than zero"})
        if self.price_at_purchase is None or self.price_at_purchase < 0:
            raise ValidationError({"price_at_purchase": "Price must be non-negative"})

    def save(self, *args, **kwargs):
        if self.pk and not self._state.adding:
            previous = OrderItem.objects.filter(pk=self.pk).first()
            if previous is not None:
                for field in self._IMMUTABLE_FIELDS:
                    if getattr(self, field) != getattr(previous, field):
                        raise ValueError(f"Order item field '{field}' cannot be changed.")
        super().save(*args, **kwargs)

    @property
    def line_total(self) -> Decimal:
        return (self.price_at_purchase or Decimal("0.00")) * Decimal(int(self.quantity or 0))

    def __str__(self):
        return f"{self.product_name} x {self.quantity}"
