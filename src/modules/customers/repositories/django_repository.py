"""Django ORM implementation of the Customer repository.

Satisfies ``ICustomerRepository`` using Django's QuerySet API.
Error handling follows the Null Object pattern: methods return ``None``
instead of raising HTTP-level exceptions; the Service Layer decides
how to translate a missing entity into an API response.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import structlog
from django.core.exceptions import ValidationError
from django.db import models, transaction

from modules.customers.models import Customer
from modules.customers.repositories.interfaces import ICustomerRepository

logger = structlog.get_logger(__name__)


class CustomerDjangoRepository(ICustomerRepository):
    """Concrete Customer repository backed by Django ORM."""

    def get_by_id(self, id: str) -> Optional[Customer]:
        """Retrieve a customer (with its orders) by primary key.

        Returns ``None`` for non-existent or invalid IDs (e.g. malformed UUID).
        """
        try:
            return Customer.objects.prefetch_related("orders").filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> models.QuerySet:
        """List customers with optional Django ORM look-ups.

        Examples of valid filters::

            {"name__icontains": "maria"}
            {"email": "maria@example.com"}
        """
        queryset = Customer.objects.order_by("name")
        if filters:
            queryset = queryset.filter(**filters)
        return queryset

    @transaction.atomic
    def save(self, entity: Customer) -> Customer:
        """Persist (create or update) a customer."""
        is_new = entity._state.adding
        entity.save()
        logger.info("customer.saved", customer_id=str(entity.id), is_new=is_new)
        return entity

    @transaction.atomic
    def delete(self, id: str) -> bool:
        """Delete a customer by ID.

        Returns ``True`` if a row was removed.
        """
        deleted, _ = Customer.objects.filter(id=id).delete()
        return bool(deleted)

    def count(self, filters: Optional[Dict[str, Any]] = None) -> int:
        return Customer.objects.filter(**(filters or {})).count()

    def get_by_cpf(self, cpf: str) -> Optional[Customer]:
        """Retrieve a customer by CPF (digits only)."""
        return Customer.objects.filter(cpf=cpf).first()

    def get_by_email(self, email: str) -> Optional[Customer]:
        """Retrieve a customer by email address (case-insensitive)."""
        return Customer.objects.filter(email__iexact=email).first()
