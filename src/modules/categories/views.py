"""Category API views.

Exposes ``CategoryService`` via DRF.  Domain exceptions propagate to the
project exception handler, which maps their ``kind`` to a status code.
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

from modules.categories.dtos import CreateCategoryDTO, UpdateCategoryDTO
from modules.categories.filters import CategoryFilter
from modules.categories.models import Category
from modules.categories.repositories.django_repository import CategoryDjangoRepository
from modules.categories.serializers import CategoryInputSerializer, CategorySerializer
from modules.categories.services import CategoryService
from modules.core.pagination import StandardResultsSetPagination
from modules.products.repositories.django_repository import ProductDjangoRepository


class CategoryViewSet(ListModelMixin, GenericViewSet):
    """ViewSet for Category CRUD operations.

    Does **not** extend ``ModelViewSet``; all ORM access goes through
    the service/repository layer.
    """

    filterset_class = CategoryFilter
    search_fields = ["name", "description"]
    ordering_fields = ["name", "created_at"]
    ordering = ["name"]
    filter_backends = [DjangoFilterBackend, SearchFilter, OrderingFilter]
    pagination_class = StandardResultsSetPagination
    queryset = Category.objects.all()
    serializer_class = CategorySerializer

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = CategoryService(
            repository=CategoryDjangoRepository(),
            product_repository=ProductDjangoRepository(),
        )

    def get_queryset(self):
        return self._service.list_categories()

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/categories/{pk}/"""
        category = self._service.get_category(pk)
        return Response(CategorySerializer(category).data)

    def create(self, request: Request) -> Response:
        """POST /api/v1/categories/"""
        serializer = CategoryInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        category = self._service.create_category(
            CreateCategoryDTO(**serializer.validated_data)
        )
        return Response(
            CategorySerializer(category).data, status=status.HTTP_201_CREATED
        )

    def update(self, request: Request, pk: str | None = None) -> Response:
        """PUT/PATCH /api/v1/categories/{pk}/"""
        serializer = CategoryInputSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)

        category = self._service.update_category(
            pk, UpdateCategoryDTO(**serializer.validated_data)
        )
        return Response(CategorySerializer(category).data)

    def partial_update(self, request: Request, pk: str | None = None) -> Response:
        return self.update(request, pk)

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/v1/categories/{pk}/"""
        self._service.delete_category(pk)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=False, methods=["get"])
    def count(self, request: Request) -> Response:
        """GET /api/v1/categories/count/"""
        return Response({"count": self._service.count_categories()})
