# carts/views/cart.py

"""
CART API VIEWS

Identity:
- Authenticated (JWT) callers use their user cart.
- Everyone else is a guest identified by the X-Guest-Id header
  ("guest_<uuid4>"). A missing or malformed id is replaced by a fresh one,
  and the id in use is always echoed back in the response header.

Money rule:
- Unit price is OWNED by Product and snapshotted server-side.
"""

from __future__ import annotations

import logging

from django.conf import settings
from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.throttling import AnonRateThrottle
from rest_framework.views import APIView

from backend.responses import domain_error_response, error_response, unexpected_error_response
from carts.authentication import OptionalJWTAuthentication
from carts.serializers import (
    AddCartItemInputSerializer,
    CartSerializer,
    UpdateCartItemInputSerializer,
)
from carts.services.cart_merge import merge_guest_cart_into_user
from carts.services.cart_service import (
    add_item,
    clear_cart,
    get_or_create_cart,
    remove_item,
    update_item_quantity,
)
from carts.services.exceptions import CartServiceError
from carts.services.guest import generate_guest_id, is_valid_guest_id
from orders.serializers import CheckoutDetailsSerializer, OrderSerializer
from orders.services.checkout_orchestrator import checkout_cart
from orders.services.exceptions import OrderServiceError

logger = logging.getLogger(__name__)

GUEST_HEADER_PARAM = OpenApiParameter(
    name=settings.GUEST_CART_HEADER,
    location=OpenApiParameter.HEADER,
    required=False,
    type=str,
    description="Guest cart token (guest_<uuid4>). Ignored for authenticated users.",
)


class PublicWriteThrottle(AnonRateThrottle):
    scope = "public_write"


# =====================================================
# IDENTITY
# =====================================================


class CartIdentityMixin:
    """
    Resolves `self.guest_id` for anonymous callers and echoes it back.
    """

    authentication_classes = [OptionalJWTAuthentication]
    permission_classes = [AllowAny]

    guest_id = None

    def initial(self, request, *args, **kwargs):
        super().initial(request, *args, **kwargs)

        if not request.user.is_authenticated:
            raw = (request.headers.get(settings.GUEST_CART_HEADER) or "").strip()
            self.guest_id = raw if is_valid_guest_id(raw) else generate_guest_id()

    def finalize_response(self, request, response, *args, **kwargs):
        response = super().finalize_response(request, response, *args, **kwargs)
        if self.guest_id:
            response[settings.GUEST_CART_HEADER] = self.guest_id
        return response

    def get_cart(self):
        return get_or_create_cart(user=self.request.user, guest_id=self.guest_id)

    def cart_response(self, cart, http_status=status.HTTP_200_OK):
        return Response(CartSerializer(cart).data, status=http_status)


# =====================================================
# CART
# =====================================================


class CartView(CartIdentityMixin, APIView):
    serializer_class = CartSerializer

    @extend_schema(
        parameters=[GUEST_HEADER_PARAM],
        responses={200: CartSerializer},
        description="Get (or create) the caller's cart",
    )
    def get(self, request):
        return self.cart_response(self.get_cart())

    @extend_schema(
        parameters=[GUEST_HEADER_PARAM],
        responses={200: CartSerializer},
        description="Remove every line from the caller's cart",
    )
    def delete(self, request):
        cart = self.get_cart()
        clear_cart(cart=cart)
        return self.cart_response(cart)


class CartItemsView(CartIdentityMixin, APIView):
    serializer_class = CartSerializer
    throttle_classes = [PublicWriteThrottle]

    @extend_schema(
        parameters=[GUEST_HEADER_PARAM],
        request=AddCartItemInputSerializer,
        responses={
            200: CartSerializer,
            400: OpenApiResponse(description="Unavailable product or not enough stock"),
            404: OpenApiResponse(description="Product not found"),
        },
        description="Add a product to the cart (increments quantity if already present)",
    )
    def post(self, request):
        s = AddCartItemInputSerializer(data=request.data)
        s.is_valid(raise_exception=True)

        cart = self.get_cart()
        try:
            add_item(
                cart=cart,
                product_id=s.validated_data["product_id"],
                quantity=s.validated_data["quantity"],
                attributes=s.validated_data.get("attributes"),
            )
        except CartServiceError as exc:
            return domain_error_response(exc)

        return self.cart_response(cart)


class CartItemDetailView(CartIdentityMixin, APIView):
    serializer_class = CartSerializer

    @extend_schema(
        parameters=[GUEST_HEADER_PARAM],
        request=UpdateCartItemInputSerializer,
        responses={200: CartSerializer, 404: OpenApiResponse(description="Item not in cart")},
        description="Set the quantity of a cart line",
    )
    def put(self, request, item_id):
        s = UpdateCartItemInputSerializer(data=request.data)
        s.is_valid(raise_exception=True)

        cart = self.get_cart()
        try:
            update_item_quantity(cart=cart, item_id=item_id, quantity=s.validated_data["quantity"])
        except CartServiceError as exc:
            return domain_error_response(exc)

        return self.cart_response(cart)

    @extend_schema(
        parameters=[GUEST_HEADER_PARAM],
        responses={200: CartSerializer, 404: OpenApiResponse(description="Item not in cart")},
        description="Remove a line from the cart",
    )
    def delete(self, request, item_id):
        cart = self.get_cart()
        try:
            remove_item(cart=cart, item_id=item_id)
        except CartServiceError as exc:
            return domain_error_response(exc)

        return self.cart_response(cart)


# =====================================================
# AUTHENTICATED ONLY
# =====================================================


class MergeCartView(APIView):
    """
    Fold the guest cart named by X-Guest-Id into the caller's user cart.
    """

    permission_classes = [IsAuthenticated]
    serializer_class = CartSerializer

    @extend_schema(
        parameters=[GUEST_HEADER_PARAM],
        request=None,
        responses={200: CartSerializer, 400: OpenApiResponse(description="Invalid guest id")},
    )
    def post(self, request):
        guest_id = (request.headers.get(settings.GUEST_CART_HEADER) or "").strip()
        if not is_valid_guest_id(guest_id):
            return error_response(
                code="INVALID_GUEST_ID",
                message="A valid guest id header is required to merge carts",
                http_status=status.HTTP_400_BAD_REQUEST,
            )

        cart = merge_guest_cart_into_user(guest_id=guest_id, user=request.user)
        if cart is None:
            cart = get_or_create_cart(user=request.user)

        return Response(CartSerializer(cart).data, status=status.HTTP_200_OK)


class CheckoutCartView(APIView):
    """
    Turn the caller's user cart into an order and empty the cart.
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        request=CheckoutDetailsSerializer,
        responses={
            201: OrderSerializer,
            400: OpenApiResponse(description="Empty cart, stock or coupon problem"),
            404: OpenApiResponse(description="Product not found"),
        },
    )
    def post(self, request):
        s = CheckoutDetailsSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = s.validated_data

        cart = get_or_create_cart(user=request.user)

        try:
            order = checkout_cart(
                user=request.user,
                cart=cart,
                payment_method=data["payment_method"],
                shipping_address=data["shipping_address"],
                coupon_code=data.get("coupon_code"),
                notes=data.get("notes", ""),
            )
        except OrderServiceError as exc:
            return domain_error_response(exc)
        except Exception:
            logger.exception("Cart checkout failed", extra={"user_id": str(request.user.pk)})
            return unexpected_error_response()

        return Response(OrderSerializer(order).data, status=status.HTTP_201_CREATED)
