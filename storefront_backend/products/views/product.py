# products/views/product.py

"""
PRODUCT VIEWSET

Purpose:
- Storefront product browsing (AllowAny, active products only)
- Admin product management (CRUD + restock)

Key rules:
- Non-admin callers never see inactive products.
- Stock only grows through the restock action; checkout and cancellation
  own every other stock movement.
"""

from django.db.models import Q
from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response
from rest_framework.throttling import AnonRateThrottle

from backend.responses import error_response
from products.models import Product
from products.serializers import ProductSerializer, RestockInputSerializer
from products.services.inventory import InventoryError, restock_product
from users.permissions import IsAdmin, IsAdminOrReadOnly


class PublicCatalogThrottle(AnonRateThrottle):
    scope = "public_catalog"


class ProductViewSet(viewsets.ModelViewSet):
    """
    Product endpoints.

    Public:
    - GET /products/?q=<search>
    - GET /products/<id>/

    Admin:
    - POST/PUT/PATCH/DELETE /products/...
    - POST /products/<id>/restock/  {"quantity": N}
    """

    serializer_class = ProductSerializer
    permission_classes = [IsAdminOrReadOnly]
    throttle_classes = [PublicCatalogThrottle]

    def _is_admin(self) -> bool:
        user = self.request.user
        return bool(user and user.is_authenticated and getattr(user, "role", None) == "admin")

    def get_queryset(self):
        qs = Product.objects.all().order_by("-created_at")

        if not self._is_admin():
            qs = qs.filter(is_active=True)

        q = (self.request.query_params.get("q") or "").strip()
        if q:
            qs = qs.filter(
                Q(name__icontains=q) | Q(sku__icontains=q) | Q(description__icontains=q)
            )

        in_stock = (self.request.query_params.get("in_stock") or "").strip().lower()
        if in_stock in {"1", "true", "yes"}:
            qs = qs.filter(stock__gt=0)

        return qs

    @extend_schema(
        parameters=[
            OpenApiParameter(name="q", required=False, type=str),
            OpenApiParameter(name="in_stock", required=False, type=bool),
        ],
        responses={200: ProductSerializer(many=True)},
        description="Browse products. Anonymous callers only see active products.",
    )
    def list(self, request, *args, **kwargs):
        return super().list(request, *args, **kwargs)

    @extend_schema(
        request=RestockInputSerializer,
        responses={
            200: ProductSerializer,
            400: OpenApiResponse(description="Invalid quantity"),
        },
        description="Admin restock: add units to product stock.",
    )
    @action(detail=True, methods=["post"], permission_classes=[IsAdmin])
    def restock(self, request, pk=None):
        product = self.get_object()

        s = RestockInputSerializer(data=request.data)
        s.is_valid(raise_exception=True)

        try:
            product = restock_product(
                product=product,
                quantity=s.validated_data["quantity"],
                user=request.user,
            )
        except InventoryError as exc:
            return error_response(
                code="RESTOCK_FAILED",
                message=str(exc),
                http_status=status.HTTP_400_BAD_REQUEST,
            )

        return Response(ProductSerializer(product).data, status=status.HTTP_200_OK)
