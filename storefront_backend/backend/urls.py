# backend/urls.py
"""
PROJECT URLS

All API routes live under /api/:
- auth/       register, me, JWT create/refresh
- products/   catalog (public read, admin write)
- coupons/    admin CRUD + public validate/
- cart/       user or guest cart (X-Guest-Id)
- orders/     checkout, history, cancellation, admin status

The Django admin path is configurable (ADMIN_PATH) to keep it off the
default scanner target.
"""

from __future__ import annotations

from django.conf import settings
from django.contrib import admin
from django.db import connections
from django.db.utils import DatabaseError
from django.urls import include, path
from django.views.generic import RedirectView
from drf_spectacular.utils import extend_schema, inline_serializer
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView
from rest_framework import serializers
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView


API_LINKS = {
    "auth": {
        "register": "/api/auth/register/",
        "me": "/api/auth/me/",
        "jwt_create": "/api/auth/jwt/create/",
        "jwt_refresh": "/api/auth/jwt/refresh/",
    },
    "docs": {"swagger": "/api/docs/", "schema": "/api/schema/"},
    "modules": {
        "products": "/api/products/",
        "coupons": "/api/coupons/",
        "cart": "/api/cart/",
        "orders": "/api/orders/",
    },
}

HealthSerializer = inline_serializer(
    name="HealthStatus",
    fields={"status": serializers.CharField(), "db": serializers.CharField()},
)


@extend_schema(
    responses=inline_serializer(
        name="ApiRoot",
        fields={
            "message": serializers.CharField(),
            "auth": serializers.DictField(child=serializers.CharField()),
            "docs": serializers.DictField(child=serializers.CharField()),
            "modules": serializers.DictField(child=serializers.CharField()),
        },
    ),
)
@api_view(["GET"])
@permission_classes([AllowAny])
def api_root(request):
    return Response({"message": "Storefront Backend API is running", **API_LINKS})


@extend_schema(responses={200: HealthSerializer, 503: HealthSerializer})
@api_view(["GET"])
@permission_classes([AllowAny])
def health_check(request):
    """
    Confirms the app responds and the default database answers SELECT 1.
    """
    try:
        with connections["default"].cursor() as cursor:
            cursor.execute("SELECT 1;")
            cursor.fetchone()
    except DatabaseError:
        return Response({"status": "degraded", "db": "down"}, status=503)

    return Response({"status": "ok", "db": "ok"})


# ------------------ ADMIN PATH ------------------
ADMIN_PATH = getattr(settings, "ADMIN_PATH", "admin/")
if not ADMIN_PATH.endswith("/"):
    ADMIN_PATH = f"{ADMIN_PATH}/"


# ------------------ API ROUTES (ALL UNDER /api/) ------------------
api_urlpatterns = [
    path("", api_root, name="api-root"),
    path("health/", health_check, name="health-check"),
    # OpenAPI / Swagger
    path("schema/", SpectacularAPIView.as_view(), name="schema"),
    path("docs/", SpectacularSwaggerView.as_view(url_name="schema"), name="swagger-ui"),
    # JWT (SimpleJWT)
    path("auth/jwt/create/", TokenObtainPairView.as_view(), name="jwt-create"),
    path("auth/jwt/refresh/", TokenRefreshView.as_view(), name="jwt-refresh"),
    # Auth & Users
    path("auth/", include("users.urls")),
    # Storefront
    path("products/", include("products.urls")),
    path("coupons/", include("coupons.urls")),
    path("cart/", include("carts.urls")),
    path("orders/", include("orders.urls")),
]

urlpatterns = [
    path(ADMIN_PATH, admin.site.urls),
    path("", RedirectView.as_view(url="/api/docs/", permanent=False), name="root"),
    path("api/", include(api_urlpatterns)),
]
