# orders/serializers/order.py

from rest_framework import serializers

from orders.models import Order, OrderItem
from products.serializers import validate_attribute_bag

# =====================================================
# READ SERIALIZERS
# =====================================================


class OrderItemSerializer(serializers.ModelSerializer):
    """
    Order line (read-only snapshot).
    """

    line_total = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)

    class Meta:
        model = OrderItem
        fields = [
            "id",
            "product_id",
            "product_name",
            "quantity",
            "price_at_purchase",
            "line_total",
            "attributes_selected",
        ]
        read_only_fields = fields


class OrderSerializer(serializers.ModelSerializer):
    items = OrderItemSerializer(many=True, read_only=True)
    user_email = serializers.EmailField(source="user.email", read_only=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "order_code",
            "user",
            "user_email",
            "items",
            "subtotal",
            "coupon_code",
            "discount_value",
            "discount_amount",
            "order_total_price",
            "status",
            "payment_method",
            "shipping_address",
            "notes",
            "created_at",
            "updated_at",
            "cancelled_at",
        ]
        read_only_fields = fields


# =====================================================
# INPUT SERIALIZERS
# =====================================================


class ShippingAddressSerializer(serializers.Serializer):
    city = serializers.CharField(max_length=120)
    street = serializers.CharField(max_length=255)
    building = serializers.CharField(max_length=60, required=False, allow_blank=True)
    floor = serializers.CharField(max_length=30, required=False, allow_blank=True)
    apartment = serializers.CharField(max_length=30, required=False, allow_blank=True)
    additional_info = serializers.CharField(max_length=500, required=False, allow_blank=True)


class OrderItemInputSerializer(serializers.Serializer):
    product_id = serializers.UUIDField()
    quantity = serializers.IntegerField(min_value=1)
    attributes_selected = serializers.JSONField(required=False, default=dict)

    def validate_attributes_selected(self, value):
        return validate_attribute_bag(value)


class CheckoutDetailsSerializer(serializers.Serializer):
    payment_method = serializers.CharField(max_length=64)
    shipping_address = ShippingAddressSerializer()
    notes = serializers.CharField(required=False, allow_blank=True, default="")
    coupon_code = serializers.CharField(
        required=False, allow_blank=True, allow_null=True, default=None
    )

    def validate_coupon_code(self, value):
        value = (value or "").strip().upper()
        if value and not (3 <= len(value) <= 20):
            raise serializers.ValidationError("Coupon code must be 3-20 characters")
        return value or None


class PlaceOrderInputSerializer(CheckoutDetailsSerializer):
    items = OrderItemInputSerializer(many=True, allow_empty=False)


class OrderStatusInputSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Order.STATUS_CHOICES)
