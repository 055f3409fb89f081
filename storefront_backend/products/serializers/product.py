# products/serializers/product.py

"""
PRODUCT SERIALIZER

Purpose:
- Canonical Product serializer for storefront reads and admin writes.
- stock is writable on create only; afterwards it moves through the
  inventory service (checkout, cancellation, restock).
"""

from rest_framework import serializers

from products.models import Product


def validate_attribute_bag(value, *, allow_scalars=(str, int, float, bool)):
    """
    Attribute bags are flat JSON objects: string keys, scalar values.
    """
    if value in (None, ""):
        return {}

    if not isinstance(value, dict):
        raise serializers.ValidationError("attributes must be an object")

    cleaned = {}
    for key, raw in value.items():
        if not isinstance(key, str) or not key.strip():
            raise serializers.ValidationError("attribute names must be non-empty strings")
        if raw is None or not isinstance(raw, allow_scalars):
            raise serializers.ValidationError(f"Invalid value for attribute '{key}'")
        cleaned[key.strip()] = raw
    return cleaned


class ProductSerializer(serializers.ModelSerializer):
    """
    GUARANTEES:
    - SKU is normalized uppercase and unique
    - price is non-negative
    - sale_price is optional and non-negative; effective_price is what
      carts and checkout charge
    - stock cannot be edited through updates (use restock)
    """

    is_in_stock = serializers.BooleanField(read_only=True)
    effective_price = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)

    class Meta:
        model = Product
        fields = [
            "id",
            "sku",
            "name",
            "description",
            "price",
            "sale_price",
            "effective_price",
            "stock",
            "is_in_stock",
            "attributes",
            "is_active",
            "created_at",
            "updated_at",
        ]
        read_only_fields = [
            "id",
            "is_in_stock",
            "effective_price",
            "created_at",
            "updated_at",
        ]

    def validate_sku(self, value):
        value = (value or "").strip().upper()
        if not value:
            raise serializers.ValidationError("SKU is required")

        qs = Product.objects.filter(sku__iexact=value)
        if self.instance is not None:
            qs = qs.exclude(pk=self.instance.pk)
        if qs.exists():
            raise serializers.ValidationError("A product with this SKU already exists")
        return value

    def validate_price(self, value):
        if value is None or value < 0:
            raise serializers.ValidationError("Price must be non-negative")
        return value

    def validate_sale_price(self, value):
        if value is not None and value < 0:
            raise serializers.ValidationError("Sale price must be non-negative")
        return value

    def validate_stock(self, value):
        if self.instance is not None and value != self.instance.stock:
            raise serializers.ValidationError(
                "Stock cannot be edited directly; use the restock endpoint."
            )
        return value

    def validate_attributes(self, value):
        return validate_attribute_bag(value)


class RestockInputSerializer(serializers.Serializer):
    quantity = serializers.IntegerField(min_value=1)
