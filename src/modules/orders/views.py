"""Order API views.

Exposes the ``OrderService`` via HTTP using DRF ViewSets.
Domain exceptions propagate to the project exception handler, which
translates their ``kind`` into the HTTP status code.
"""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.filters import OrderingFilter, SearchFilter
from rest_framework.mixins import ListModelMixin
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.core.pagination import StandardResultsSetPagination
from modules.customers.repositories.django_repository import CustomerDjangoRepository
from modules.orders.dtos import (
    CreateOrderDTO,
    CreateOrderItemDTO,
    OrderItemDTO,
    UpdateOrderDTO,
)
from modules.orders.filters import OrderFilter
from modules.orders.models import Order
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.serializers import (
    CreateOrderSerializer,
    OrderSerializer,
    UpdateOrderSerializer,
)
from modules.orders.services import OrderService
from modules.products.repositories.django_repository import ProductDjangoRepository


class OrderViewSet(ListModelMixin, GenericViewSet):
    """ViewSet for Order operations.

    Uses ``OrderService`` with injected repositories (DIP).
    Does **not** extend ``ModelViewSet``; all ORM access goes through
    the service/repository layer.
    """

    filterset_class = OrderFilter
    search_fields = ["customer__name", "customer__email"]
    ordering_fields = ["order_date", "total_amount", "status", "created_at"]
    ordering = ["-order_date"]
    filter_backends = [DjangoFilterBackend, SearchFilter, OrderingFilter]
    pagination_class = StandardResultsSetPagination
    queryset = Order.objects.all()
    serializer_class = OrderSerializer

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = OrderService(
            order_repository=OrderDjangoRepository(),
            customer_repository=CustomerDjangoRepository(),
            product_repository=ProductDjangoRepository(),
        )

    # ------------------------------------------------------------------
    # List / Retrieve
    # ------------------------------------------------------------------

    def get_queryset(self):
        return self._service.list_orders()

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/orders/{pk}/"""
        order = self._service.get_order(pk)
        return Response(OrderSerializer(order).data)

    # ------------------------------------------------------------------
    # Create / Update / Destroy
    # ------------------------------------------------------------------

    def create(self, request: Request) -> Response:
        """POST /api/v1/orders/"""
        serializer = CreateOrderSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        data = serializer.validated_data
        dto = CreateOrderDTO(
            customer_id=data["customer_id"],
            order_date=data.get("order_date"),
            items=[CreateOrderItemDTO(**item) for item in data["items"]],
        )
        order = self._service.create_order(dto)
        return Response(OrderSerializer(order).data, status=status.HTTP_201_CREATED)

    def update(self, request: Request, pk: str | None = None) -> Response:
        """PUT/PATCH /api/v1/orders/{pk}/

        ``items``, when sent, is the complete list of lines: items with an
        ``id`` are updated, items without one are added and missing items
        are removed.
        """
        serializer = UpdateOrderSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)

        data = serializer.validated_data
        items = data.get("items")
        dto = UpdateOrderDTO(
            status=data.get("status"),
            items=[OrderItemDTO(**item) for item in items] if items is not None else None,
        )
        order = self._service.update_order(pk, dto)
        return Response(OrderSerializer(order).data)

    def partial_update(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /api/v1/orders/{pk}/"""
        return self.update(request, pk)

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/v1/orders/{pk}/ (pending orders only)."""
        self._service.delete_order(pk)
        return Response(status=status.HTTP_204_NO_CONTENT)

    # ------------------------------------------------------------------
    # Extra actions
    # ------------------------------------------------------------------

    @action(detail=True, methods=["post"])
    def cancel(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/orders/{pk}/cancel/

        Cancels an order and releases its reserved stock.
        """
        order = self._service.cancel_order(pk)
        return Response(OrderSerializer(order).data)

    @action(detail=False, methods=["get"])
    def count(self, request: Request) -> Response:
        """GET /api/v1/orders/count/"""
        return Response({"count": self._service.count_orders()})
