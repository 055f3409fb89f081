# products/serializers/__init__.py

from .product import ProductSerializer, RestockInputSerializer, validate_attribute_bag

__all__ = [
    "ProductSerializer",
    "RestockInputSerializer",
    "validate_attribute_bag",
]
