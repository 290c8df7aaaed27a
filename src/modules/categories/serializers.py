"""Category DRF serializers for API input/output."""

from __future__ import annotations

from rest_framework import serializers

from modules.categories.models import Category
from modules.products.models import Product


class CategoryInputSerializer(serializers.Serializer):
    """Validates create (full) and update (``partial=True``) payloads."""

    name = serializers.CharField(min_length=2, max_length=100)
    description = serializers.CharField(required=False, allow_blank=True)


class CategoryProductSerializer(serializers.ModelSerializer):
    class Meta:
        model = Product
        fields = ["id", "name", "price", "stock"]
        read_only_fields = fields


class CategorySerializer(serializers.ModelSerializer):
    """Read serializer with a summary of the products in the category."""

    products = CategoryProductSerializer(many=True, read_only=True)

    class Meta:
        model = Category
        fields = [
            "id",
            "name",
            "description",
            "products",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields
