"""Order DRF serializers for API input/output.

The serializer operates at the Interface layer (API Views).
Business logic lives in the Service Layer, which receives
Pydantic DTOs from ``dtos.py``.
"""

from __future__ import annotations

from rest_framework import serializers

from modules.customers.models import Customer
from modules.orders.constants import OrderStatus
from modules.orders.models import Order, OrderItem
from modules.products.models import Product
from modules.products.serializers import ProductCategorySerializer

# ---------------------------------------------------------------------------
# Input Serializers
# ---------------------------------------------------------------------------


class CreateOrderItemSerializer(serializers.Serializer):
    """Validates a single item in an order creation request."""

    product_id = serializers.UUIDField()
    quantity = serializers.IntegerField(min_value=1)


class CreateOrderSerializer(serializers.Serializer):
    """Validates the order creation request payload."""

    customer_id = serializers.UUIDField()
    order_date = serializers.DateTimeField(required=False)
    items = CreateOrderItemSerializer(many=True, allow_empty=False)


class UpdateOrderItemSerializer(serializers.Serializer):
    """A target line: with ``id`` it updates an existing item."""

    id = serializers.UUIDField(required=False)
    product_id = serializers.UUIDField(required=False)
    quantity = serializers.IntegerField(min_value=1)

    def validate(self, attrs):
        if "id" not in attrs and "product_id" not in attrs:
            raise serializers.ValidationError(
                {"product_id": "This field is required for new items."}
            )
        return attrs


class UpdateOrderSerializer(serializers.Serializer):
    """Validates the order update payload (status and/or full item list)."""

    status = serializers.ChoiceField(choices=OrderStatus.choices, required=False)
    items = UpdateOrderItemSerializer(many=True, allow_empty=False, required=False)


# ---------------------------------------------------------------------------
# Output Serializers (Read)
# ---------------------------------------------------------------------------


class OrderCustomerSerializer(serializers.ModelSerializer):
    class Meta:
        model = Customer
        fields = ["id", "name", "email"]
        read_only_fields = fields


class OrderProductSerializer(serializers.ModelSerializer):
    category = ProductCategorySerializer(read_only=True)

    class Meta:
        model = Product
        fields = ["id", "name", "price", "category"]
        read_only_fields = fields


class OrderItemSerializer(serializers.ModelSerializer):
    """Read serializer for order items; subtotal uses the current price."""

    product = OrderProductSerializer(read_only=True)
    subtotal = serializers.DecimalField(
        max_digits=12, decimal_places=2, read_only=True
    )

    class Meta:
        model = OrderItem
        fields = ["id", "product_id", "product", "quantity", "subtotal"]
        read_only_fields = fields


class OrderSerializer(serializers.ModelSerializer):
    """Read serializer for orders with customer and nested items."""

    customer = OrderCustomerSerializer(read_only=True)
    items = OrderItemSerializer(many=True, read_only=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "customer_id",
            "customer",
            "order_date",
            "status",
            "total_amount",
            "items",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields
