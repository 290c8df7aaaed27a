"""Customer DRF serializers for API input/output.

Input serializers handle HTTP-level concerns (request parsing and
shape); business validation such as the CPF check digits and the
password policy lives in the Pydantic DTOs from ``dtos.py``.
The password hash is never rendered.
"""

from __future__ import annotations

from rest_framework import serializers

from modules.customers.models import Customer
from modules.orders.models import Order


class CustomerInputSerializer(serializers.Serializer):
    """Validates create (full) and update (``partial=True``) payloads."""

    name = serializers.CharField(min_length=2, max_length=100)
    email = serializers.EmailField(max_length=255)
    cpf = serializers.CharField(max_length=14)
    phone = serializers.CharField(
        min_length=10, max_length=15, required=False, allow_blank=True
    )
    birth_date = serializers.DateField(required=False, allow_null=True)
    password = serializers.CharField(
        write_only=True, min_length=4, max_length=128, trim_whitespace=False
    )

    def validate_phone(self, value: str) -> str:
        if value and not value.isdigit():
            raise serializers.ValidationError("Phone must contain only digits.")
        return value


class CustomerUpdateSerializer(CustomerInputSerializer):
    """Update payloads may send an empty password to keep the current one."""

    password = serializers.CharField(
        write_only=True,
        max_length=128,
        required=False,
        allow_blank=True,
        trim_whitespace=False,
    )


class LoginSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(trim_whitespace=False)


class CustomerSerializer(serializers.ModelSerializer):
    """Read serializer for the Customer resource."""

    class Meta:
        model = Customer
        fields = [
            "id",
            "name",
            "email",
            "cpf",
            "phone",
            "birth_date",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class CustomerOrderSerializer(serializers.ModelSerializer):
    class Meta:
        model = Order
        fields = ["id", "order_date", "total_amount", "status"]
        read_only_fields = fields


class CustomerDetailSerializer(CustomerSerializer):
    """Single-customer view, including a summary of the customer's orders."""

    orders = CustomerOrderSerializer(many=True, read_only=True)

    class Meta(CustomerSerializer.Meta):
        fields = CustomerSerializer.Meta.fields + ["orders"]
        read_only_fields = fields
