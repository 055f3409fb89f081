# carts/urls.py

"""
Mounted under /api/cart/.
"""

from django.urls import path

from carts.views import CartItemDetailView, CartItemsView, CartView, CheckoutCartView, MergeCartView

app_name = "carts"

urlpatterns = [
    path("", CartView.as_view(), name="cart"),
    path("items/", CartItemsView.as_view(), name="cart-items"),
    path("items/<uuid:item_id>/", CartItemDetailView.as_view(), name="cart-item-detail"),
    path("merge/", MergeCartView.as_view(), name="cart-merge"),
    path("checkout/", CheckoutCartView.as_view(), name="cart-checkout"),
]
