# backend/responses.py

"""
API ERROR NORMALIZATION

Every domain failure leaves the API as:
    {"error": {"code": "<STABLE_CODE>", "message": "<human readable>"}}

Request-shape failures stay DRF ValidationErrors (field-aggregated 400s).
"""

from __future__ import annotations

from rest_framework import status
from rest_framework.response import Response


def error_response(*, code: str, message: str, http_status: int):
    return Response(
        {"error": {"code": code, "message": message}},
        status=http_status,
    )


def domain_error_response(exc):
    """
    Render an exception that carries `code` / `http_status` class attributes.
    """
    return error_response(
        code=getattr(exc, "code", "ERROR"),
        message=str(exc),
        http_status=getattr(exc, "http_status", status.HTTP_400_BAD_REQUEST),
    )


def unexpected_error_response():
    return error_response(
        code="UNKNOWN_ERROR",
        message="An unexpected error occurred. Please try again later.",
        http_status=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
