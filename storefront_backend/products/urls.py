# products/urls.py

"""
PRODUCTS URLS

Mounted under /api/products/:
- /api/products/               list/create
- /api/products/<uuid>/        retrieve/update/delete
- /api/products/<uuid>/restock/ (admin)
"""

from django.urls import include, path
from rest_framework.routers import SimpleRouter

from products.views import ProductViewSet

router = SimpleRouter()

router.register(r"", ProductViewSet, basename="products")

urlpatterns = [
    path("", include(router.urls)),
]
