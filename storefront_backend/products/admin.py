# products/admin.py

"""
Admin rules:
- stock is read-only in the change form; restocks go through the API
  (atomic increment) so admin edits never race checkout decrements.
"""

from __future__ import annotations

from django.contrib import admin

from products.models import Product


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ("name", "sku", "price", "sale_price", "stock", "is_active", "created_at")
    list_filter = ("is_active",)
    search_fields = ("name", "sku")

    def get_readonly_fields(self, request, obj=None):
        if obj is None:
            return ("created_at", "updated_at")
        return ("stock", "created_at", "updated_at")
