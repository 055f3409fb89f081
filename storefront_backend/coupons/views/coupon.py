# coupons/views/coupon.py

"""
COUPON VIEWS

Admin:
- /coupons/            list (filters: is_active, search) / create
- /coupons/<id>/       retrieve / update / delete

Public:
- POST /coupons/validate/  {"coupon_code": "...", "subtotal": "..."}
  Preview only: evaluation never consumes a use.
"""

from __future__ import annotations

import logging
from decimal import Decimal

from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status, viewsets
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.throttling import AnonRateThrottle
from rest_framework.views import APIView

from backend.responses import error_response
from coupons.models import Coupon
from coupons.serializers import (
    CouponPreviewSerializer,
    CouponSerializer,
    CouponValidateInputSerializer,
)
from coupons.services.evaluator import evaluate_coupon
from users.permissions import IsAdmin

logger = logging.getLogger(__name__)


class PublicWriteThrottle(AnonRateThrottle):
    scope = "public_write"


class CouponViewSet(viewsets.ModelViewSet):
    serializer_class = CouponSerializer
    permission_classes = [IsAdmin]
    filterset_fields = ["is_active"]

    def get_queryset(self):
        qs = Coupon.objects.all().order_by("-created_at")

        search = (self.request.query_params.get("search") or "").strip()
        if search:
            qs = qs.filter(code__icontains=search)

        return qs

    @extend_schema(
        parameters=[
            OpenApiParameter(name="is_active", required=False, type=bool),
            OpenApiParameter(name="search", required=False, type=str),
        ],
        responses={200: CouponSerializer(many=True)},
    )
    def list(self, request, *args, **kwargs):
        return super().list(request, *args, **kwargs)

    def perform_create(self, serializer):
        coupon = serializer.save()
        logger.info(
            "Coupon created",
            extra={"coupon_id": str(coupon.id), "coupon_code": coupon.code},
        )

    def perform_destroy(self, instance):
        logger.info(
            "Coupon deleted",
            extra={"coupon_id": str(instance.id), "coupon_code": instance.code},
        )
        instance.delete()


class ValidateCouponView(APIView):
    """
    Storefront coupon preview (AllowAny).
    """

    permission_classes = [AllowAny]
    throttle_classes = [PublicWriteThrottle]

    @extend_schema(
        request=CouponValidateInputSerializer,
        responses={
            200: CouponPreviewSerializer,
            400: OpenApiResponse(description="Coupon not applicable"),
        },
        description="Preview a coupon against a subtotal. Does not consume a use.",
    )
    def post(self, request):
        s = CouponValidateInputSerializer(data=request.data)
        s.is_valid(raise_exception=True)

        subtotal = s.validated_data["subtotal"]
        result = evaluate_coupon(s.validated_data["coupon_code"], subtotal)

        if not result.is_valid:
            return error_response(
                code="COUPON_INVALID",
                message=result.message,
                http_status=status.HTTP_400_BAD_REQUEST,
            )

        payload = {
            "is_valid": True,
            "message": result.message,
            "coupon_code": result.coupon.code,
            "discount_value": result.coupon.value,
            "discount_amount": result.discount_amount,
            "subtotal": subtotal,
            "total": max(subtotal - result.discount_amount, Decimal("0.00")),
        }
        return Response(CouponPreviewSerializer(payload).data, status=status.HTTP_200_OK)
