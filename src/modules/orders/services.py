"""Order service layer (Use Cases).

Orchestrates the business logic for order creation, update,
cancellation and deletion.  All write operations are atomic: the
service defines the unit-of-work boundary, and any domain error rolls
back every stock and line change made so far.

Business rules enforced:
- The customer and every product must exist.
- Stock never goes negative; every change goes through the
  ``InventoryAdjuster`` and product rows are locked in product-id order
  to prevent deadlocks.
- A non-canceled order holds the stock of all of its lines; a canceled
  order holds none.
- ``total_amount`` is recomputed from the persisted lines at current
  product prices after every mutation.
- Only pending orders can be deleted.
"""

from __future__ import annotations

from collections import defaultdict
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Dict, Iterable, Optional, Tuple
from uuid import UUID

import structlog
from django.db import transaction
from django.utils import timezone

from modules.orders.constants import INITIAL_STATUS, OrderStatus
from modules.orders.dtos import UpdateOrderDTO
from modules.orders.exceptions import (
    CustomerNotFound,
    InvalidOrderState,
    OrderNotFound,
    ProductNotFound,
)
from modules.orders.reconciliation import diff_items
from modules.products.inventory import InventoryAdjuster

if TYPE_CHECKING:
    from modules.core.repositories.interfaces import Queryable
    from modules.customers.repositories.interfaces import ICustomerRepository
    from modules.orders.dtos import CreateOrderDTO
    from modules.orders.models import Order
    from modules.orders.repositories.interfaces import IOrderRepository
    from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


class OrderService:
    """Application service for Order use-cases.

    Receives repositories via constructor injection (DIP).
    """

    def __init__(
        self,
        order_repository: IOrderRepository,
        customer_repository: ICustomerRepository,
        product_repository: IProductRepository,
    ) -> None:
        self._order_repo = order_repository
        self._customer_repo = customer_repository
        self._product_repo = product_repository
        self._inventory = InventoryAdjuster(product_repository)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def create_order(self, dto: CreateOrderDTO) -> Order:
        """Create a new order and reserve the stock of its items.

        Steps:
        1. Validate the customer exists.
        2. Reserve stock per product (rows locked in product-id order).
        3. Persist the order with status ``PENDING`` and its items.
        4. Recompute the total at current prices.

        Raises:
            CustomerNotFound: customer does not exist.
            ProductNotFound: a product does not exist.
            InsufficientStock: not enough stock for a product.
        """
        log = logger.bind(customer_id=str(dto.customer_id))
        log.info("order.creation_started", item_count=len(dto.items))

        if not self._customer_repo.get_by_id(str(dto.customer_id)):
            raise CustomerNotFound(f"Customer {dto.customer_id} not found.")

        deltas: Dict[UUID, int] = defaultdict(int)
        for item in dto.items:
            deltas[item.product_id] -= item.quantity
        self._apply_stock_deltas(deltas)

        order = self._order_repo.create(
            customer_id=dto.customer_id,
            order_date=dto.order_date or timezone.now(),
            status=INITIAL_STATUS,
        )
        for item in dto.items:
            self._order_repo.add_item(order, item.product_id, item.quantity)

        total = self._refresh_total(order)
        log.info("order.created", order_id=str(order.id), total=str(total))
        return self._order_repo.get_by_id(str(order.id)) or order

    @transaction.atomic
    def update_order(self, order_id: UUID | str, dto: UpdateOrderDTO) -> Order:
        """Change an order's status and/or reconcile its items.

        ``dto.items`` is the full target list of lines.  Lines with an
        ``id`` are kept (their quantity may change), lines without one are
        added and current lines missing from the list are removed.  Stock
        follows every change:

        - leaving ``CANCELED`` re-reserves all lines;
        - entering ``CANCELED`` releases all lines (after reconciliation);
        - items cannot be edited while the order stays ``CANCELED``.

        Raises:
            OrderNotFound: order does not exist.
            InvalidOrderState: items edited on a canceled order.
            OrderItemNotFound: a target item id is not part of the order.
            InvalidOrderItem: a kept item names a different product.
            ProductNotFound: a new item references an unknown product.
            InsufficientStock: not enough stock for the requested change.
        """
        order = self._order_repo.get_for_update(str(order_id))
        if not order:
            raise OrderNotFound(f"Order {order_id} not found.")

        old_status = order.status
        new_status = dto.status or old_status
        was_canceled = old_status == OrderStatus.CANCELED
        will_be_canceled = new_status == OrderStatus.CANCELED

        log = logger.bind(
            order_id=str(order.id), old_status=old_status, new_status=new_status
        )

        if dto.items is not None and was_canceled and will_be_canceled:
            log.warning("order.items_locked")
            raise InvalidOrderState("Items of a canceled order cannot be changed.")

        current = {item.id: item for item in order.items.all()}
        deltas: Dict[UUID, int] = defaultdict(int)

        if was_canceled and not will_be_canceled:
            for item in current.values():
                deltas[item.product_id] -= item.quantity

        # Final (product_id, quantity) lines, used to release stock on cancel.
        final_lines: list[Tuple[UUID, int]] = [
            (item.product_id, item.quantity) for item in current.values()
        ]

        changes = None
        if dto.items is not None:
            changes = diff_items(current, dto.items)
            self._ensure_products(wanted.product_id for wanted in changes.added)
            for item in changes.removed:
                deltas[item.product_id] += item.quantity
            for item, wanted in changes.kept:
                deltas[item.product_id] -= wanted.quantity - item.quantity
            for wanted in changes.added:
                deltas[wanted.product_id] -= wanted.quantity
            final_lines = [
                (item.product_id, wanted.quantity) for item, wanted in changes.kept
            ] + [(wanted.product_id, wanted.quantity) for wanted in changes.added]

        if will_be_canceled and not was_canceled:
            for product_id, quantity in final_lines:
                deltas[product_id] += quantity

        self._apply_stock_deltas(deltas)

        if changes is not None:
            if changes.removed:
                self._order_repo.delete_items(item.id for item in changes.removed)
            for item, wanted in changes.kept:
                if wanted.quantity != item.quantity:
                    self._order_repo.update_item_quantity(item, wanted.quantity)
            for wanted in changes.added:
                self._order_repo.add_item(order, wanted.product_id, wanted.quantity)
            log.info(
                "order.items_reconciled",
                added=len(changes.added),
                kept=len(changes.kept),
                removed=len(changes.removed),
            )

        if new_status != old_status:
            order.status = new_status
            self._order_repo.save(order)
            log.info("order.status_changed")

        total = self._refresh_total(order)
        log.info("order.updated", total=str(total))
        return self._order_repo.get_by_id(str(order.id)) or order

    @transaction.atomic
    def cancel_order(self, order_id: UUID | str) -> Order:
        """Cancel an order and release the stock of its items.

        Raises:
            OrderNotFound: order does not exist.
            InvalidOrderState: the order is already canceled.
        """
        order = self._order_repo.get_for_update(str(order_id))
        if not order:
            raise OrderNotFound(f"Order {order_id} not found.")
        if order.status == OrderStatus.CANCELED:
            logger.warning("order.already_canceled", order_id=str(order_id))
            raise InvalidOrderState("Order is already canceled.")

        return self.update_order(order_id, UpdateOrderDTO(status=OrderStatus.CANCELED))

    @transaction.atomic
    def delete_order(self, order_id: UUID | str) -> None:
        """Delete a pending order, returning its items to stock.

        Raises:
            OrderNotFound: order does not exist.
            InvalidOrderState: the order is not ``PENDING``.
        """
        order = self._order_repo.get_for_update(str(order_id))
        if not order:
            raise OrderNotFound(f"Order {order_id} not found.")

        log = logger.bind(order_id=str(order.id), status=order.status)

        if order.status != OrderStatus.PENDING:
            log.warning("order.delete_not_allowed")
            raise InvalidOrderState("Only pending orders can be deleted.")

        deltas: Dict[UUID, int] = defaultdict(int)
        for item in order.items.all():
            deltas[item.product_id] += item.quantity
        self._apply_stock_deltas(deltas)

        self._order_repo.delete(str(order.id))
        log.info("order.deleted")

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_order(self, order_id: str) -> Order:
        """Retrieve a single order by ID.

        Raises:
            OrderNotFound: if the order does not exist.
        """
        order = self._order_repo.get_by_id(order_id)
        if not order:
            raise OrderNotFound(f"Order {order_id} not found.")
        return order

    def list_orders(self, filters: Optional[Dict[str, Any]] = None) -> Queryable[Order]:
        """Return orders, newest first, optionally filtered."""
        return self._order_repo.list(filters)

    def count_orders(self) -> int:
        return self._order_repo.count()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _apply_stock_deltas(self, deltas: Dict[UUID, int]) -> None:
        """Apply net stock changes, locking products in id order."""
        for product_id in sorted(_nonzero(deltas)):
            self._inventory.adjust(product_id, deltas[product_id])

    def _ensure_products(self, product_ids: Iterable[UUID]) -> None:
        for product_id in sorted(set(product_ids)):
            if not self._product_repo.get_by_id(str(product_id)):
                raise ProductNotFound(f"Product {product_id} not found.")

    def _refresh_total(self, order: Order) -> Decimal:
        total = self._order_repo.compute_total(order.id)
        self._order_repo.save_total(order, total)
        return total


def _nonzero(deltas: Dict[UUID, int]) -> Iterable[UUID]:
    return (product_id for product_id, delta in deltas.items() if delta)
