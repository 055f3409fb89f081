# carts/admin.py

from django.contrib import admin

from carts.models import Cart, CartItem


class CartItemInline(admin.TabularInline):
    model = CartItem
    extra = 0
    readonly_fields = ("unit_price", "created_at")


@admin.register(Cart)
class CartAdmin(admin.ModelAdmin):
    list_display = ("id", "cart_type", "user", "guest_id", "updated_at")
    list_filter = ("cart_type",)
    search_fields = ("user__email", "guest_id")
    readonly_fields = ("cart_type", "created_at", "updated_at")
    inlines = [CartItemInline]
