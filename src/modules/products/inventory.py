"""Inventory adjuster: the only writer of ``Product.stock`` during orders.

``adjust`` locks the product row (``SELECT FOR UPDATE``) before reading
the current stock, so concurrent order operations on the same product are
serialised and no update is lost.  It opens a nested atomic block: when
called from an order use-case the change commits or rolls back together
with the order.
"""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID

import structlog
from django.db import transaction

from modules.products.exceptions import InsufficientStock, ProductNotFound

if TYPE_CHECKING:
    from modules.products.models import Product
    from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


class InventoryAdjuster:
    def __init__(self, product_repository: IProductRepository) -> None:
        self._product_repo = product_repository

    @transaction.atomic
    def adjust(self, product_id: UUID | str, delta: int) -> Product:
        """Apply a signed ``delta`` to the product's stock.

        Raises:
            ProductNotFound: the product does not exist.
            InsufficientStock: the resulting stock would be negative.
        """
        product = self._product_repo.get_for_update(str(product_id))
        if not product:
            raise ProductNotFound(f"Product {product_id} not found.")

        new_stock = product.stock + delta
        if new_stock < 0:
            logger.warning(
                "inventory.insufficient_stock",
                product_id=str(product.id),
                available=product.stock,
                requested=-delta,
            )
            raise InsufficientStock(product.name, product.stock, -delta)

        previous = product.stock
        product = self._product_repo.set_stock(product, new_stock)
        logger.info(
            "inventory.adjusted",
            product_id=str(product.id),
            delta=delta,
            previous_stock=previous,
            stock=new_stock,
        )
        return product
