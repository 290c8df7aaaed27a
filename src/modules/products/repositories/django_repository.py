"""Django ORM implementation of the Product repository.

Satisfies ``IProductRepository`` using Django's QuerySet API.
Error handling follows the Null Object pattern: methods return ``None``
instead of raising; the Service Layer decides how to translate a
missing entity into a domain error.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import structlog

from django.core.exceptions import ValidationError
from django.db import models, transaction

from modules.products.models import Product
from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


class ProductDjangoRepository(IProductRepository):
    """Concrete Product repository backed by Django ORM."""

    def get_by_id(self, id: str) -> Optional[Product]:
        """Retrieve a product (with its category) by primary key.

        Returns ``None`` for non-existent or invalid IDs.
        """
        try:
            return Product.objects.select_related("category").filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> models.QuerySet:
        """List products with optional Django ORM look-ups.

        Examples of valid filters::

            {"category_id": category.id}
            {"name__icontains": "mouse"}
        """
        queryset = Product.objects.select_related("category").order_by("name")
        if filters:
            queryset = queryset.filter(**filters)
        return queryset

    @transaction.atomic
    def save(
        self, entity: Product, update_fields: Optional[List[str]] = None
    ) -> Product:
        """Persist a product; ``update_fields`` limits the columns written."""
        entity.save(update_fields=update_fields)
        logger.info("product.saved", product_id=str(entity.id), name=entity.name)
        return entity

    @transaction.atomic
    def delete(self, id: str) -> bool:
        deleted, _ = Product.objects.filter(id=id).delete()
        return bool(deleted)

    def count(self, filters: Optional[Dict[str, Any]] = None) -> int:
        return Product.objects.filter(**(filters or {})).count()

    def get_by_name(self, name: str) -> Optional[Product]:
        return Product.objects.filter(name=name).first()

    def get_for_update(self, id: str) -> Optional[Product]:
        """Lock the product row until the surrounding transaction ends."""
        try:
            return Product.objects.select_for_update().filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def set_stock(self, product: Product, stock: int) -> Product:
        product.stock = stock
        product.save(update_fields=["stock", "updated_at"])
        return product
