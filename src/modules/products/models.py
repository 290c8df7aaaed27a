"""Product model with stock control.

Business rules implemented:
- Product name must be unique in the system.
- Price cannot be negative.
- Stock cannot be negative (``PositiveIntegerField`` + check constraint);
  it is changed by the catalog (attribute edits) and by the inventory
  adjuster as a side effect of order operations.
- Category is optional; a referenced category cannot be deleted.
- A product referenced by order items cannot be deleted (``PROTECT`` on
  ``OrderItem.product``).
"""

from __future__ import annotations

from decimal import Decimal

import structlog

from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models

from modules.core.models import BaseModel

logger = structlog.get_logger(__name__)


class Product(BaseModel):
    name = models.CharField(max_length=150, unique=True)
    description = models.TextField(blank=True, default="")
    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
    )
    stock = models.PositiveIntegerField(default=0)
    category = models.ForeignKey(
        "categories.Category",
        on_delete=models.PROTECT,
        related_name="products",
        null=True,
        blank=True,
    )

    class Meta:
        db_table = "products"
        ordering = ["name"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(price__gte=0),
                name="products_price_non_negative",
            ),
            models.CheckConstraint(
                condition=models.Q(stock__gte=0),
                name="products_stock_non_negative",
            ),
        ]

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def clean(self) -> None:
        super().clean()
        if self.price is not None and self.price < 0:
            raise ValidationError({"price": "Price cannot be negative."})
        if self.stock is not None and self.stock < 0:
            raise ValidationError({"stock": "Stock cannot be negative."})

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def save(self, *args, **kwargs) -> None:
        is_new = self._state.adding
        super().save(*args, **kwargs)
        if is_new:
            logger.info(
                "product_created",
                product_id=str(self.id),
                name=self.name,
                stock=self.stock,
            )

    def __str__(self) -> str:
        return self.name
