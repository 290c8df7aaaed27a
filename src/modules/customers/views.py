"""Customer API views.

Exposes the ``CustomerService`` via HTTP using DRF ViewSets.
Domain exceptions propagate to the project exception handler, which
translates their ``kind`` into the HTTP status code.
"""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.filters import OrderingFilter, SearchFilter
from rest_framework.mixins import ListModelMixin
from rest_framework.permissions import AllowAny
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.core.pagination import StandardResultsSetPagination
from modules.customers.dtos import CreateCustomerDTO, UpdateCustomerDTO
from modules.customers.filters import CustomerFilter
from modules.customers.models import Customer
from modules.customers.repositories.django_repository import CustomerDjangoRepository
from modules.customers.serializers import (
    CustomerDetailSerializer,
    CustomerInputSerializer,
    CustomerSerializer,
    CustomerUpdateSerializer,
    LoginSerializer,
)
from modules.customers.services import CustomerService
from modules.orders.repositories.django_repository import OrderDjangoRepository


class CustomerViewSet(ListModelMixin, GenericViewSet):
    """ViewSet for Customer CRUD operations and customer login.

    Uses ``CustomerService`` with Django repositories (DIP).
    Does **not** extend ``ModelViewSet``; all ORM access goes through
    the service/repository layer.
    """

    filterset_class = CustomerFilter
    search_fields = ["name", "email", "cpf"]
    ordering_fields = ["name", "email", "created_at"]
    ordering = ["name"]
    filter_backends = [DjangoFilterBackend, SearchFilter, OrderingFilter]
    pagination_class = StandardResultsSetPagination
    queryset = Customer.objects.all()
    serializer_class = CustomerSerializer

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = CustomerService(
            repository=CustomerDjangoRepository(),
            order_repository=OrderDjangoRepository(),
        )

    # ------------------------------------------------------------------
    # List / Retrieve
    # ------------------------------------------------------------------

    def get_queryset(self):
        return self._service.list_customers()

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/customers/{pk}/"""
        customer = self._service.get_customer(pk)
        return Response(CustomerDetailSerializer(customer).data)

    # ------------------------------------------------------------------
    # Create / Update / Destroy
    # ------------------------------------------------------------------

    def create(self, request: Request) -> Response:
        """POST /api/v1/customers/"""
        serializer = CustomerInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        customer = self._service.create_customer(
            CreateCustomerDTO(**serializer.validated_data)
        )
        return Response(
            CustomerSerializer(customer).data, status=status.HTTP_201_CREATED
        )

    def update(self, request: Request, pk: str | None = None) -> Response:
        """PUT/PATCH /api/v1/customers/{pk}/"""
        serializer = CustomerUpdateSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)

        customer = self._service.update_customer(
            pk, UpdateCustomerDTO(**serializer.validated_data)
        )
        return Response(CustomerSerializer(customer).data)

    def partial_update(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /api/v1/customers/{pk}/"""
        return self.update(request, pk)

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/v1/customers/{pk}/"""
        self._service.delete_customer(pk)
        return Response(status=status.HTTP_204_NO_CONTENT)

    # ------------------------------------------------------------------
    # Extra actions
    # ------------------------------------------------------------------

    @action(detail=False, methods=["post"], permission_classes=[AllowAny])
    def login(self, request: Request) -> Response:
        """POST /api/v1/customers/login/

        Returns the authenticated customer; 401 on bad credentials.
        """
        serializer = LoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        customer = self._service.login(
            serializer.validated_data["email"],
            serializer.validated_data["password"],
        )
        return Response(CustomerSerializer(customer).data)

    @action(detail=False, methods=["get"])
    def count(self, request: Request) -> Response:
        """GET /api/v1/customers/count/"""
        return Response({"count": self._service.count_customers()})
