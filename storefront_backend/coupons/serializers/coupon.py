# coupons/serializers/coupon.py

"""
COUPON SERIALIZERS

- CouponSerializer: admin CRUD. code is normalized uppercase, unique
  case-insensitively and cannot change after creation.
- CouponValidateInputSerializer / CouponPreviewSerializer: public preview.
"""

from decimal import Decimal

from rest_framework import serializers

from coupons.models import Coupon


class CouponSerializer(serializers.ModelSerializer):
    remaining_uses = serializers.IntegerField(read_only=True, allow_null=True)

    class Meta:
        model = Coupon
        fields = [
            "id",
            "code",
            "value",
            "min_order_amount",
            "max_discount_amount",
            "usage_limit",
            "used_count",
            "remaining_uses",
            "expires_at",
            "is_active",
            "created_at",
            "updated_at",
        ]
        read_only_fields = [
            "id",
            "used_count",
            "remaining_uses",
            "created_at",
            "updated_at",
        ]

    def validate_code(self, value):
        value = Coupon.normalize_code(value)

        if self.instance is not None:
            if value != self.instance.code:
                raise serializers.ValidationError("Coupon code cannot be changed")
            return value

        if not (Coupon.CODE_MIN_LENGTH <= len(value) <= Coupon.CODE_MAX_LENGTH):
            raise serializers.ValidationError(
                f"Code must be {Coupon.CODE_MIN_LENGTH}-{Coupon.CODE_MAX_LENGTH} characters"
            )
        if Coupon.objects.filter(code__iexact=value).exists():
            raise serializers.ValidationError("Coupon code already exists")
        return value

    def validate_value(self, value):
        if value is None or not (Decimal("0") <= value <= Decimal("100")):
            raise serializers.ValidationError("Value must be between 0 and 100")
        return value

    def validate_min_order_amount(self, value):
        if value is not None and value < 0:
            raise serializers.ValidationError("Minimum order amount must be at least 0")
        return value

    def validate_max_discount_amount(self, value):
        if value is not None and value < 0:
            raise serializers.ValidationError("Maximum discount amount must be at least 0")
        return value

    def validate_usage_limit(self, value):
        if value is not None and value < 1:
            raise serializers.ValidationError("Usage limit must be at least 1")
        return value

    def validate(self, attrs):
        usage_limit = attrs.get("usage_limit", getattr(self.instance, "usage_limit", None))
        used_count = int(getattr(self.instance, "used_count", 0) or 0)
        if usage_limit is not None and usage_limit < used_count:
            raise serializers.ValidationError(
                {"usage_limit": f"Usage limit cannot be below the current usage ({used_count})"}
            )
        return attrs


class CouponValidateInputSerializer(serializers.Serializer):
    coupon_code = serializers.CharField(max_length=64)
    subtotal = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal("0"))


class CouponPreviewSerializer(serializers.Serializer):
    is_valid = serializers.BooleanField()
    message = serializers.CharField()
    coupon_code = serializers.CharField(allow_null=True)
    discount_value = serializers.DecimalField(max_digits=5, decimal_places=2, allow_null=True)
    discount_amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    subtotal = serializers.DecimalField(max_digits=12, decimal_places=2)
    total = serializers.DecimalField(max_digits=12, decimal_places=2)
