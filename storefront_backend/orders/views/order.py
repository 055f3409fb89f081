# orders/views/order.py

"""
ORDER VIEWSET

Customer:
- POST /orders/                 checkout (items + optional coupon)
- GET  /orders/my-orders/       own orders
- GET  /orders/<id>/            owner or admin
- PUT  /orders/<id>/cancel/     owner; restores stock + coupon use

Admin:
- PUT  /orders/<id>/status/     direct status overwrite, no side effects
- GET  /orders/admin/all/       every order, ?status= filter

Domain failures are rendered as {"error": {"code", "message"}} with the
status carried by the exception.
"""

from __future__ import annotations

import logging

from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from backend.responses import domain_error_response, unexpected_error_response
from orders.models import Order
from orders.serializers import (
    OrderSerializer,
    OrderStatusInputSerializer,
    PlaceOrderInputSerializer,
)
from orders.services.cancellation import cancel_order
from orders.services.checkout_orchestrator import place_order
from orders.services.exceptions import OrderServiceError
from orders.services.order_lifecycle import set_order_status
from users.permissions import IsAdmin, IsOwnerOrAdmin

logger = logging.getLogger(__name__)


class OrderViewSet(mixins.RetrieveModelMixin, viewsets.GenericViewSet):
    serializer_class = OrderSerializer
    permission_classes = [IsAuthenticated, IsOwnerOrAdmin]
    lookup_value_regex = "[0-9a-fA-F-]{36}"

    def get_queryset(self):
        return (
            Order.objects.select_related("user")
            .prefetch_related("items")
            .order_by("-created_at")
        )

    def _paginated(self, qs):
        page = self.paginate_queryset(qs)
        if page is not None:
            return self.get_paginated_response(OrderSerializer(page, many=True).data)
        return Response(OrderSerializer(qs, many=True).data)

    # -------------------------------------------------
    # CHECKOUT
    # -------------------------------------------------

    @extend_schema(
        request=PlaceOrderInputSerializer,
        responses={
            201: OrderSerializer,
            400: OpenApiResponse(description="Invalid item, stock or coupon"),
            404: OpenApiResponse(description="Product not found"),
        },
        description="Place an order. Stock and coupon usage are committed atomically.",
    )
    def create(self, request, *args, **kwargs):
        s = PlaceOrderInputSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = s.validated_data

        try:
            order = place_order(
                user=request.user,
                items=data["items"],
                payment_method=data["payment_method"],
                shipping_address=data["shipping_address"],
                coupon_code=data.get("coupon_code"),
                notes=data.get("notes", ""),
            )
        except OrderServiceError as exc:
            return domain_error_response(exc)
        except Exception:
            logger.exception("Checkout failed", extra={"user_id": str(request.user.pk)})
            return unexpected_error_response()

        return Response(OrderSerializer(order).data, status=status.HTTP_201_CREATED)

    # -------------------------------------------------
    # CUSTOMER READS
    # -------------------------------------------------

    @extend_schema(responses={200: OrderSerializer(many=True)})
    @action(detail=False, methods=["get"], url_path="my-orders")
    def my_orders(self, request):
        return self._paginated(self.get_queryset().filter(user=request.user))

    # -------------------------------------------------
    # CANCEL (OWNER)
    # -------------------------------------------------

    @extend_schema(
        request=None,
        responses={
            200: OrderSerializer,
            400: OpenApiResponse(description="Order can no longer be cancelled"),
            403: OpenApiResponse(description="Not the order owner"),
            404: OpenApiResponse(description="Order not found"),
        },
    )
    @action(detail=True, methods=["put"], permission_classes=[IsAuthenticated])
    def cancel(self, request, pk=None):
        try:
            order = cancel_order(order_id=pk, user=request.user)
        except OrderServiceError as exc:
            return domain_error_response(exc)
        except Exception:
            logger.exception("Order cancellation failed", extra={"order_id": str(pk)})
            return unexpected_error_response()

        return Response(OrderSerializer(order).data, status=status.HTTP_200_OK)

    # -------------------------------------------------
    # ADMIN
    # -------------------------------------------------

    @extend_schema(
        request=OrderStatusInputSerializer,
        responses={200: OrderSerializer, 404: OpenApiResponse(description="Order not found")},
    )
    @action(detail=True, methods=["put"], url_path="status", permission_classes=[IsAdmin])
    def set_status(self, request, pk=None):
        s = OrderStatusInputSerializer(data=request.data)
        s.is_valid(raise_exception=True)

        try:
            order = set_order_status(order_id=pk, status=s.validated_data["status"])
        except OrderServiceError as exc:
            return domain_error_response(exc)

        return Response(OrderSerializer(order).data, status=status.HTTP_200_OK)

    @extend_schema(
        parameters=[
            OpenApiParameter(
                name="status",
                required=False,
                type=str,
                enum=Order.status_values(),
            )
        ],
        responses={200: OrderSerializer(many=True)},
    )
    @action(detail=False, methods=["get"], url_path="admin/all", permission_classes=[IsAdmin])
    def admin_all(self, request):
        qs = self.get_queryset()

        status_filter = (request.query_params.get("status") or "").strip().lower()
        if status_filter:
            qs = qs.filter(status=status_filter)

        return self._paginated(qs)
