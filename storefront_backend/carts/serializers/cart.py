# carts/serializers/cart.py

from rest_framework import serializers

from carts.models import Cart, CartItem
from products.serializers import validate_attribute_bag


class CartProductSerializer(serializers.Serializer):
    id = serializers.UUIDField()
    sku = serializers.CharField()
    name = serializers.CharField()
    price = serializers.DecimalField(max_digits=12, decimal_places=2)
    sale_price = serializers.DecimalField(max_digits=12, decimal_places=2, allow_null=True)
    effective_price = serializers.DecimalField(max_digits=12, decimal_places=2)
    stock = serializers.IntegerField()
    is_active = serializers.BooleanField()


class CartItemSerializer(serializers.ModelSerializer):
    product = CartProductSerializer(read_only=True)
    line_total = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)

    class Meta:
        model = CartItem
        fields = [
            "id",
            "product",
            "quantity",
            "unit_price",
            "line_total",
            "attributes",
            "created_at",
        ]
        read_only_fields = fields


class CartSerializer(serializers.ModelSerializer):
    items = serializers.SerializerMethodField()
    item_count = serializers.IntegerField(read_only=True)
    total_amount = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)

    class Meta:
        model = Cart
        fields = [
            "id",
            "cart_type",
            "guest_id",
            "items",
            "item_count",
            "total_amount",
            "updated_at",
        ]
        read_only_fields = fields

    def get_items(self, obj):
        qs = obj.items.select_related("product").order_by("created_at")
        return CartItemSerializer(qs, many=True).data


# =====================================================
# INPUT SERIALIZERS
# =====================================================


class AddCartItemInputSerializer(serializers.Serializer):
    product_id = serializers.UUIDField()
    quantity = serializers.IntegerField(min_value=1, default=1)
    attributes = serializers.JSONField(required=False, default=dict)

    def validate_attributes(self, value):
        return validate_attribute_bag(value, allow_scalars=(str,))


class UpdateCartItemInputSerializer(serializers.Serializer):
    quantity = serializers.IntegerField(min_value=1)
