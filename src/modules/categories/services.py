"""Category service layer (Use Cases).

Business rules enforced here:
- Category name is unique (checked on create and on rename).
- A category that still owns products cannot be deleted.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, Optional

import structlog
from django.db import IntegrityError, transaction

from modules.categories.exceptions import (
    CategoryAlreadyExists,
    CategoryInUse,
    CategoryNotFound,
)
from modules.categories.models import Category

if TYPE_CHECKING:
    from modules.categories.dtos import CreateCategoryDTO, UpdateCategoryDTO
    from modules.categories.repositories.interfaces import ICategoryRepository
    from modules.core.repositories.interfaces import Queryable
    from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


class CategoryService:
    """Application service for Category use-cases.

    The product repository is only used for the deletion guard.
    """

    def __init__(
        self,
        repository: ICategoryRepository,
        product_repository: IProductRepository,
    ) -> None:
        self._repo = repository
        self._product_repo = product_repository

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def create_category(self, dto: CreateCategoryDTO) -> Category:
        """Raises ``CategoryAlreadyExists`` if the name is taken."""
        if self._repo.get_by_name(dto.name):
            logger.warning("category.duplicate_name", name=dto.name)
            raise CategoryAlreadyExists(f"Category '{dto.name}' already exists.")

        category = Category(name=dto.name, description=dto.description)
        category = self._save(category)
        logger.info("category.created", category_id=str(category.id))
        return category

    @transaction.atomic
    def update_category(self, id: str, dto: UpdateCategoryDTO) -> Category:
        category = self._repo.get_by_id(id)
        if not category:
            raise CategoryNotFound(f"Category {id} not found.")

        if dto.name is not None and dto.name != category.name:
            if self._repo.get_by_name(dto.name):
                logger.warning("category.duplicate_name", name=dto.name)
                raise CategoryAlreadyExists(f"Category '{dto.name}' already exists.")
            category.name = dto.name
        if dto.description is not None:
            category.description = dto.description

        category = self._save(category)
        logger.info("category.updated", category_id=str(id))
        return category

    @transaction.atomic
    def delete_category(self, id: str) -> None:
        """Raises ``CategoryInUse`` while any product references the category."""
        category = self._repo.get_by_id(id)
        if not category:
            raise CategoryNotFound(f"Category {id} not found.")

        product_count = self._product_repo.count({"category_id": category.id})
        if product_count:
            logger.warning(
                "category.delete_blocked",
                category_id=str(id),
                product_count=product_count,
            )
            raise CategoryInUse(
                "Cannot delete a category that has associated products."
            )

        self._repo.delete(id)
        logger.info("category.deleted", category_id=str(id))

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_categories(
        self, filters: Optional[Dict[str, Any]] = None
    ) -> Queryable[Category]:
        return self._repo.list(filters)

    def get_category(self, id: str) -> Category:
        category = self._repo.get_by_id(id)
        if not category:
            raise CategoryNotFound(f"Category {id} not found.")
        return category

    def count_categories(self) -> int:
        return self._repo.count()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _save(self, category: Category) -> Category:
        try:
            return self._repo.save(category)
        except IntegrityError as exc:
            logger.warning("category.integrity_conflict", name=category.name)
            raise CategoryAlreadyExists(
                f"Category '{category.name}' already exists."
            ) from exc
