"""Product repository interface.

Extends ``IRepository[Product]`` with the name look-up used by the
uniqueness rule and the row-locking primitives used by the inventory
adjuster.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.products.models import Product


class IProductRepository(IRepository["Product"]):
    """Repository contract for the Product aggregate."""

    @abstractmethod
    def get_by_name(self, name: str) -> Optional[Product]:
        """Retrieve a product by its (unique) name."""

    @abstractmethod
    def get_for_update(self, id: str) -> Optional[Product]:
        """Retrieve a product with a row-level lock (SELECT FOR UPDATE).

        Used for atomic stock reservation/release.  Returns ``None`` if
        the product does not exist.
        """

    @abstractmethod
    def set_stock(self, product: Product, stock: int) -> Product:
        """Persist a new stock value for an already locked product."""
