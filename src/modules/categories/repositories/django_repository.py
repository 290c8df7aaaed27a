"""Django ORM implementation of the Category repository.

Methods return ``None`` for missing rows instead of raising; the
Service Layer decides how to translate a missing entity.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import structlog
from django.core.exceptions import ValidationError
from django.db import models, transaction

from modules.categories.models import Category
from modules.categories.repositories.interfaces import ICategoryRepository

logger = structlog.get_logger(__name__)


class CategoryDjangoRepository(ICategoryRepository):
    """Concrete Category repository backed by Django ORM."""

    def get_by_id(self, id: str) -> Optional[Category]:
        """Returns ``None`` for non-existent or malformed IDs."""
        try:
            return Category.objects.prefetch_related("products").filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> models.QuerySet:
        queryset = Category.objects.prefetch_related("products").order_by("name")
        if filters:
            queryset = queryset.filter(**filters)
        return queryset

    @transaction.atomic
    def save(self, entity: Category) -> Category:
        entity.save()
        logger.info("category.saved", category_id=str(entity.id), name=entity.name)
        return entity

    @transaction.atomic
    def delete(self, id: str) -> bool:
        deleted, _ = Category.objects.filter(id=id).delete()
        return bool(deleted)

    def count(self, filters: Optional[Dict[str, Any]] = None) -> int:
        return Category.objects.filter(**(filters or {})).count()

    def get_by_name(self, name: str) -> Optional[Category]:
        return Category.objects.filter(name=name).first()
