"""Django ORM implementation of the Order repository.

Satisfies ``IOrderRepository`` using Django's QuerySet API.
Read methods hydrate the whole aggregate (customer, items, products and
their categories) in a fixed number of queries.

Concurrency control uses ``select_for_update()`` on the order row; the
stock side is locked by the inventory adjuster.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, Iterable, Optional
from uuid import UUID

import structlog
from django.core.exceptions import ValidationError
from django.db import models, transaction

from modules.orders.models import Order, OrderItem
from modules.orders.repositories.interfaces import IOrderRepository

logger = structlog.get_logger(__name__)


def _hydrated() -> models.QuerySet:
    return Order.objects.select_related("customer").prefetch_related(
        "items__product__category"
    )


class OrderDjangoRepository(IOrderRepository):
    """Concrete Order repository backed by Django ORM."""

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def get_by_id(self, id: str) -> Optional[Order]:
        """Retrieve an order with eager-loaded relations.

        Uses ``select_related`` for the customer FK (single JOIN) and
        ``prefetch_related`` for items, items→product→category
        (separate batched queries).  Prevents N+1.

        Returns ``None`` for non-existent or invalid IDs.
        """
        try:
            return _hydrated().filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> models.QuerySet:
        """List orders, newest ``order_date`` first.

        Supported filter keys include ``status`` and ``customer_id``.
        """
        queryset = _hydrated().order_by("-order_date")
        if filters:
            queryset = queryset.filter(**filters)
        return queryset

    def get_for_update(self, id: str) -> Optional[Order]:
        """Retrieve an order with a row-level lock (SELECT FOR UPDATE).

        Items are prefetched so the caller can iterate over them while
        the row is locked.  Returns ``None`` for non-existent or invalid
        IDs.
        """
        try:
            return (
                Order.objects.select_for_update()
                .prefetch_related("items")
                .filter(id=id)
                .first()
            )
        except (ValueError, ValidationError):
            return None

    def count(self, filters: Optional[Dict[str, Any]] = None) -> int:
        return Order.objects.filter(**(filters or {})).count()

    def count_items(self, filters: Optional[Dict[str, Any]] = None) -> int:
        return OrderItem.objects.filter(**(filters or {})).count()

    def compute_total(self, order_id: UUID) -> Decimal:
        items = OrderItem.objects.select_related("product").filter(order_id=order_id)
        return sum(
            (item.quantity * item.product.price for item in items), Decimal("0.00")
        )

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    @transaction.atomic
    def create(self, customer_id: UUID, order_date: datetime, status: str) -> Order:
        order = Order.objects.create(
            customer_id=customer_id,
            order_date=order_date,
            status=status,
            total_amount=Decimal("0.00"),
        )
        logger.info("order.inserted", order_id=str(order.id))
        return order

    @transaction.atomic
    def save(self, entity: Order) -> Order:
        """Persist (create or update) an order header."""
        entity.save()
        logger.info("order.saved", order_id=str(entity.id), status=entity.status)
        return entity

    @transaction.atomic
    def delete(self, id: str) -> bool:
        """Delete an order and its items."""
        OrderItem.objects.filter(order_id=id).delete()
        deleted, _ = Order.objects.filter(id=id).delete()
        return bool(deleted)

    def add_item(self, order: Order, product_id: UUID, quantity: int) -> OrderItem:
        return OrderItem.objects.create(
            order=order, product_id=product_id, quantity=quantity
        )

    def update_item_quantity(self, item: OrderItem, quantity: int) -> OrderItem:
        item.quantity = quantity
        item.save(update_fields=["quantity", "updated_at"])
        return item

    def delete_items(self, ids: Iterable[UUID]) -> int:
        deleted, _ = OrderItem.objects.filter(id__in=list(ids)).delete()
        return deleted

    def save_total(self, order: Order, total: Decimal) -> Order:
        order.total_amount = total
        order.save(update_fields=["total_amount", "updated_at"])
        return order
