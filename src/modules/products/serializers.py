"""Product DRF serializers for API input/output.

Input serializers validate the request shape; business logic lives in
the Service Layer, which receives Pydantic DTOs from ``dtos.py``.
"""

from __future__ import annotations

from rest_framework import serializers

from modules.categories.models import Category
from modules.products.models import Product


class ProductInputSerializer(serializers.Serializer):
    """Validates create (full) and update (``partial=True``) payloads."""

    name = serializers.CharField(min_length=2, max_length=150)
    description = serializers.CharField(allow_blank=True, default="")
    price = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0)
    stock = serializers.IntegerField(min_value=0, default=0)
    category_id = serializers.UUIDField(required=False, allow_null=True)


class StockAdjustmentSerializer(serializers.Serializer):
    """Signed stock delta: positive adds units, negative removes them."""

    delta = serializers.IntegerField()


class ProductCategorySerializer(serializers.ModelSerializer):
    class Meta:
        model = Category
        fields = ["id", "name"]
        read_only_fields = fields


class ProductSerializer(serializers.ModelSerializer):
    """Read serializer for the Product resource."""

    category = ProductCategorySerializer(read_only=True)

    class Meta:
        model = Product
        fields = [
            "id",
            "name",
            "description",
            "price",
            "stock",
            "category_id",
            "category",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields
