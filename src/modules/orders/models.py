"""Order and OrderItem models.

Business rules implemented:
- Customer FK uses PROTECT: a customer with orders cannot be deleted.
- Product FK on items uses PROTECT: a product on any order cannot be deleted.
- Items are removed together with their order (CASCADE).
- ``total_amount`` is derived (sum of ``quantity * product.price``) and is
  only written by the order service.
- Item quantity is at least 1 (validator + DB check constraint).
"""

from __future__ import annotations

from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone

from modules.core.models import BaseModel
from modules.orders.constants import INITIAL_STATUS, OrderStatus


class Order(BaseModel):
    """Order aggregate root.

    The customer is fixed at creation; status and items change through
    ``OrderService.update_order``.
    """

    customer = models.ForeignKey(
        "customers.Customer",
        on_delete=models.PROTECT,
        related_name="orders",
    )
    order_date = models.DateTimeField(default=timezone.now)
    total_amount = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal("0.00"),
    )
    status = models.CharField(
        max_length=20,
        choices=OrderStatus.choices,
        default=INITIAL_STATUS,
    )

    class Meta:
        db_table = "orders"
        ordering = ["-order_date"]
        indexes = [
            models.Index(fields=["status"], name="orders_status_idx"),
            models.Index(fields=["-order_date"], name="orders_order_date_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(total_amount__gte=0),
                name="orders_total_amount_non_negative",
            ),
        ]

    def __str__(self) -> str:
        return f"Order {self.id} ({self.status})"


class OrderItem(BaseModel):
    """Line item linking an Order to a Product.

    There is no price snapshot: ``subtotal`` always uses the product's
    current price.
    """

    order = models.ForeignKey(
        "orders.Order",
        on_delete=models.CASCADE,
        related_name="items",
    )
    product = models.ForeignKey(
        "products.Product",
        on_delete=models.PROTECT,
        related_name="order_items",
    )
    quantity = models.PositiveIntegerField(validators=[MinValueValidator(1)])

    class Meta:
        db_table = "order_items"
        ordering = ["created_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity__gte=1),
                name="order_items_quantity_positive",
            ),
        ]

    @property
    def subtotal(self) -> Decimal:
        return self.quantity * self.product.price

    def __str__(self) -> str:
        return f"{self.product} x{self.quantity}"
