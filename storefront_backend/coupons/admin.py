# coupons/admin.py

from django.contrib import admin

from coupons.models import Coupon


@admin.register(Coupon)
class CouponAdmin(admin.ModelAdmin):
    list_display = ("code", "value", "usage_limit", "used_count", "expires_at", "is_active")
    list_filter = ("is_active",)
    search_fields = ("code",)
    readonly_fields = ("used_count", "created_at", "updated_at")
