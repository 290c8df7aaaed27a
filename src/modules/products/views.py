"""Product API views.

Exposes the ``ProductService`` via HTTP using DRF ViewSets.
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

from modules.categories.repositories.django_repository import CategoryDjangoRepository
from modules.core.pagination import StandardResultsSetPagination
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.products.dtos import CreateProductDTO, UpdateProductDTO
from modules.products.filters import ProductFilter
from modules.products.models import Product
from modules.products.repositories.django_repository import ProductDjangoRepository
from modules.products.serializers import (
    ProductInputSerializer,
    ProductSerializer,
    StockAdjustmentSerializer,
)
from modules.products.services import ProductService


class ProductViewSet(ListModelMixin, GenericViewSet):
    """ViewSet for Product CRUD operations.

    Uses ``ProductService`` with Django repositories (DIP).
    Does **not** extend ``ModelViewSet``; all ORM access goes through
    the service/repository layer.
    """

    filterset_class = ProductFilter
    search_fields = ["name", "description"]
    ordering_fields = ["name", "price", "stock", "created_at"]
    ordering = ["name"]
    filter_backends = [DjangoFilterBackend, SearchFilter, OrderingFilter]
    pagination_class = StandardResultsSetPagination
    queryset = Product.objects.all()
    serializer_class = ProductSerializer

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = ProductService(
            repository=ProductDjangoRepository(),
            category_repository=CategoryDjangoRepository(),
            order_repository=OrderDjangoRepository(),
        )

    # ------------------------------------------------------------------
    # List / Retrieve
    # ------------------------------------------------------------------

    def get_queryset(self):
        return self._service.list_products()

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/products/{pk}/"""
        product = self._service.get_product(pk)
        return Response(ProductSerializer(product).data)

    # ------------------------------------------------------------------
    # Create / Update / Destroy
    # ------------------------------------------------------------------

    def create(self, request: Request) -> Response:
        """POST /api/v1/products/"""
        serializer = ProductInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        product = self._service.create_product(
            CreateProductDTO(**serializer.validated_data)
        )
        return Response(ProductSerializer(product).data, status=status.HTTP_201_CREATED)

    def update(self, request: Request, pk: str | None = None) -> Response:
        """PUT/PATCH /api/v1/products/{pk}/"""
        serializer = ProductInputSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)

        product = self._service.update_product(
            pk, UpdateProductDTO(**serializer.validated_data)
        )
        return Response(ProductSerializer(product).data)

    def partial_update(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /api/v1/products/{pk}/"""
        return self.update(request, pk)

    @action(detail=True, methods=["patch"], url_path="stock")
    def update_stock(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /api/v1/products/{pk}/stock/

        Accepts ``{"delta": N}``; a negative result is rejected with 409.
        """
        serializer = StockAdjustmentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        product = self._service.adjust_stock(pk, serializer.validated_data["delta"])
        return Response(ProductSerializer(product).data)

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/v1/products/{pk}/"""
        self._service.delete_product(pk)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=False, methods=["get"])
    def count(self, request: Request) -> Response:
        """GET /api/v1/products/count/"""
        return Response({"count": self._service.count_products()})
