"""Order DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
These are the contracts between the API layer (DRF Serializers)
and the Service layer.  DTOs are immutable (``frozen=True``).

- ``CreateOrderItemDTO``: a single line in a creation request.
- ``CreateOrderDTO``: input for order creation (nested items).
- ``OrderItemDTO``: a target line in an update request.  With ``id`` it
  refers to an existing line, without it describes a new one.
- ``UpdateOrderDTO``: input for order updates (status and/or items).
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from modules.orders.constants import OrderStatus


def _positive_quantity(v: int) -> int:
    if v < 1:
        raise ValueError("Quantity must be at least 1.")
    return v


# ---------------------------------------------------------------------------
# Input DTOs
# ---------------------------------------------------------------------------


class CreateOrderItemDTO(BaseModel):
    """Immutable DTO for a single order item in a creation request."""

    model_config = ConfigDict(frozen=True)

    product_id: UUID
    quantity: int

    @field_validator("quantity")
    @classmethod
    def quantity_must_be_positive(cls, v: int) -> int:
        return _positive_quantity(v)


class CreateOrderDTO(BaseModel):
    """Immutable DTO for order creation requests.

    Validates:
    - ``items`` must contain at least one item.
    - Each item quantity must be positive.

    The same product may appear on more than one line.
    ``order_date`` defaults to the current time in the service.
    """

    model_config = ConfigDict(frozen=True)

    customer_id: UUID
    items: List[CreateOrderItemDTO]
    order_date: Optional[datetime] = None

    @field_validator("items")
    @classmethod
    def items_must_not_be_empty(
        cls, v: List[CreateOrderItemDTO]
    ) -> List[CreateOrderItemDTO]:
        if not v:
            raise ValueError("Order must have at least one item.")
        return v


class OrderItemDTO(BaseModel):
    """Immutable DTO for a target line in an update request."""

    model_config = ConfigDict(frozen=True)

    id: Optional[UUID] = None
    product_id: Optional[UUID] = None
    quantity: int

    @field_validator("quantity")
    @classmethod
    def quantity_must_be_positive(cls, v: int) -> int:
        return _positive_quantity(v)

    @model_validator(mode="after")
    def new_items_need_product(self):
        if self.id is None and self.product_id is None:
            raise ValueError("product_id is required for new items.")
        return self


class UpdateOrderDTO(BaseModel):
    """Immutable DTO for order update requests.

    ``items``, when given, is the complete target list of lines and must
    not be empty.  Omitting it leaves the lines untouched.
    """

    model_config = ConfigDict(frozen=True)

    status: Optional[OrderStatus] = None
    items: Optional[List[OrderItemDTO]] = None

    @field_validator("items")
    @classmethod
    def items_must_not_be_empty(
        cls, v: Optional[List[OrderItemDTO]]
    ) -> Optional[List[OrderItemDTO]]:
        if v is not None and not v:
            raise ValueError("Order must have at least one item.")
        return v

    @model_validator(mode="after")
    def no_duplicate_item_ids(self):
        ids = [item.id for item in self.items or [] if item.id is not None]
        if len(ids) != len(set(ids)):
            raise ValueError("The same item id appears more than once.")
        return self
