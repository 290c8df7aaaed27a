"""Order repository interface.

Extends ``IRepository[Order]`` with the operations the order service
needs to manage the aggregate: row locking, line item persistence and
total computation.

The Service Layer depends exclusively on this contract (DIP).
"""

from __future__ import annotations

from abc import abstractmethod
from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Dict, Iterable, Optional
from uuid import UUID

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.orders.models import Order, OrderItem


class IOrderRepository(IRepository["Order"]):
    """Repository contract for the Order aggregate root.

    The Order aggregate includes its OrderItem children.  Callers run
    mutations inside a single transaction.
    """

    @abstractmethod
    def create(self, customer_id: UUID, order_date: datetime, status: str) -> Order:
        """Insert an order header with a zero total."""

    @abstractmethod
    def get_for_update(self, id: str) -> Optional[Order]:
        """Retrieve an order (with its items) under a row-level lock."""

    @abstractmethod
    def add_item(self, order: Order, product_id: UUID, quantity: int) -> OrderItem:
        """Insert a line item."""

    @abstractmethod
    def update_item_quantity(self, item: OrderItem, quantity: int) -> OrderItem:
        """Persist a new quantity for an existing line item."""

    @abstractmethod
    def delete_items(self, ids: Iterable[UUID]) -> int:
        """Delete line items by id and return how many were removed."""

    @abstractmethod
    def count_items(self, filters: Optional[Dict[str, Any]] = None) -> int:
        """Count line items matching the given look-ups."""

    @abstractmethod
    def compute_total(self, order_id: UUID) -> Decimal:
        """Sum ``quantity * product.price`` over the persisted items."""

    @abstractmethod
    def save_total(self, order: Order, total: Decimal) -> Order:
        """Persist a recomputed total."""
