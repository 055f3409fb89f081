# orders/admin.py

"""
Admin rules:
- Orders are read-only here. Money, items and stock effects come from the
  checkout workflow; status changes go through the API so cancellation can
  reverse stock.
"""

from django.contrib import admin

from orders.models import Order, OrderItem


class OrderItemInline(admin.TabularInline):
    model = OrderItem
    extra = 0
    can_delete = False
    readonly_fields = (
        "product_id",
        "product_name",
        "quantity",
        "price_at_purchase",
        "attributes_selected",
    )


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = ("order_code", "user", "order_total_price", "status", "created_at")
    list_filter = ("status",)
    search_fields = ("order_code", "user__email", "coupon_code")
    inlines = [OrderItemInline]

    def get_readonly_fields(self, request, obj=None):
        return [f.name for f in self.model._meta.fields]

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
