"""Product service layer (Use Cases).

Orchestrates business logic for the Product aggregate, delegating
persistence to the injected repositories.

Business rules enforced here:
- Product name must be unique (checked on create and on rename).
- A referenced category must exist.
- A product referenced by order items cannot be deleted.
- Manual stock adjustments go through the ``InventoryAdjuster`` and can
  never drive stock below zero.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, Optional
from uuid import UUID

import structlog
from django.db import IntegrityError, transaction

from modules.categories.exceptions import CategoryNotFound
from modules.products.exceptions import (
    ProductAlreadyExists,
    ProductInUse,
    ProductNotFound,
)
from modules.products.inventory import InventoryAdjuster
from modules.products.models import Product

if TYPE_CHECKING:
    from modules.categories.repositories.interfaces import ICategoryRepository
    from modules.core.repositories.interfaces import Queryable
    from modules.orders.repositories.interfaces import IOrderRepository
    from modules.products.dtos import CreateProductDTO, UpdateProductDTO
    from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


class ProductService:
    """Application service for Product use-cases.

    Receives repositories via constructor injection (DIP).
    """

    def __init__(
        self,
        repository: IProductRepository,
        category_repository: ICategoryRepository,
        order_repository: IOrderRepository,
    ) -> None:
        self._repo = repository
        self._category_repo = category_repository
        self._order_repo = order_repository
        self._inventory = InventoryAdjuster(repository)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def create_product(self, dto: CreateProductDTO) -> Product:
        """Create a new product.

        Raises:
            ProductAlreadyExists: the name is already taken.
            CategoryNotFound: ``category_id`` does not resolve.
        """
        log = logger.bind(name=dto.name)

        if self._repo.get_by_name(dto.name):
            log.warning("product.duplicate_name")
            raise ProductAlreadyExists(f"Product '{dto.name}' already exists.")

        if dto.category_id is not None:
            self._ensure_category(dto.category_id)

        product = Product(
            name=dto.name,
            description=dto.description,
            price=dto.price,
            stock=dto.stock,
            category_id=dto.category_id,
        )
        product = self._save(product)
        log.info("product.created", product_id=str(product.id))
        return self._repo.get_by_id(str(product.id)) or product

    @transaction.atomic
    def update_product(self, id: str, dto: UpdateProductDTO) -> Product:
        """Update an existing product with the supplied fields.

        The row is locked and only the supplied columns are written, so a
        concurrent order's stock change is never overwritten by an edit.

        Raises:
            ProductNotFound: the product does not exist.
            ProductAlreadyExists: the new name collides with another product.
            CategoryNotFound: ``category_id`` does not resolve.
        """
        product = self._repo.get_for_update(id)
        if not product:
            raise ProductNotFound(f"Product {id} not found.")

        log = logger.bind(product_id=str(id))

        if dto.name is not None and dto.name != product.name:
            if self._repo.get_by_name(dto.name):
                log.warning("product.duplicate_name", name=dto.name)
                raise ProductAlreadyExists(f"Product '{dto.name}' already exists.")

        changed = []
        if dto.category_supplied:
            if dto.category_id is not None:
                self._ensure_category(dto.category_id)
            product.category_id = dto.category_id
            changed.append("category")

        for field in ("name", "price", "description", "stock"):
            value = getattr(dto, field)
            if value is not None:
                setattr(product, field, value)
                changed.append(field)

        if changed:
            self._save(product, update_fields=changed)
        log.info("product.updated", fields=changed)
        return self._repo.get_by_id(id) or product

    @transaction.atomic
    def delete_product(self, id: str) -> None:
        """Delete a product that no order item references.

        Raises:
            ProductNotFound: the product does not exist.
            ProductInUse: order items still reference the product.
        """
        product = self._repo.get_by_id(id)
        if not product:
            raise ProductNotFound(f"Product {id} not found.")

        if self._order_repo.count_items({"product_id": product.id}):
            logger.warning("product.delete_blocked", product_id=str(id))
            raise ProductInUse("Cannot delete a product that has associated orders.")

        self._repo.delete(id)
        logger.info("product.deleted", product_id=str(id))

    @transaction.atomic
    def adjust_stock(self, id: str, delta: int) -> Product:
        """Apply a signed stock delta (e.g. goods received, write-off)."""
        product = self._repo.get_by_id(id)
        if not product:
            raise ProductNotFound(f"Product {id} not found.")
        self._inventory.adjust(product.id, delta)
        return self._repo.get_by_id(id) or product

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_products(
        self, filters: Optional[Dict[str, Any]] = None
    ) -> Queryable[Product]:
        """Return products ordered by name, optionally filtered."""
        return self._repo.list(filters)

    def get_product(self, id: str) -> Product:
        """Raises ``ProductNotFound`` if the product does not exist."""
        product = self._repo.get_by_id(id)
        if not product:
            raise ProductNotFound(f"Product {id} not found.")
        return product

    def count_products(self) -> int:
        return self._repo.count()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _save(self, product: Product, update_fields=None) -> Product:
        try:
            return self._repo.save(product, update_fields=update_fields)
        except IntegrityError as exc:
            logger.warning("product.integrity_conflict", name=product.name)
            raise ProductAlreadyExists(
                f"Product '{product.name}' already exists."
            ) from exc

    def _ensure_category(self, category_id: UUID) -> None:
        if not self._category_repo.get_by_id(str(category_id)):
            raise CategoryNotFound(f"Category {category_id} not found.")
