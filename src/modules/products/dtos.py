"""Product DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
DTOs are immutable (``frozen=True``).

- ``CreateProductDTO``: input for product creation.
- ``UpdateProductDTO``: input for partial product updates.
"""

from __future__ import annotations

from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, field_validator


class CreateProductDTO(BaseModel):
    """Immutable DTO for product creation requests.

    Validates:
    - ``name`` has between 2 and 150 characters.
    - ``price`` is not negative.
    - ``stock`` is not negative.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    price: Decimal
    description: str = ""
    stock: int = 0
    category_id: UUID | None = None

    @field_validator("name")
    @classmethod
    def name_length(cls, v: str) -> str:
        v = v.strip()
        if not 2 <= len(v) <= 150:
            raise ValueError("Product name must have between 2 and 150 characters.")
        return v

    @field_validator("price")
    @classmethod
    def price_must_not_be_negative(cls, v: Decimal) -> Decimal:
        if v < 0:
            raise ValueError("Price cannot be negative.")
        return v

    @field_validator("stock")
    @classmethod
    def stock_must_not_be_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError("Stock cannot be negative.")
        return v


class UpdateProductDTO(BaseModel):
    """Immutable DTO for product update requests.

    All fields are optional; only supplied fields will be updated.
    ``category_id`` is applied whenever it was supplied, so an explicit
    ``None`` detaches the product from its category.
    """

    model_config = ConfigDict(frozen=True)

    name: str | None = None
    price: Decimal | None = None
    description: str | None = None
    stock: int | None = None
    category_id: UUID | None = None

    @field_validator("price")
    @classmethod
    def price_must_not_be_negative(cls, v: Decimal | None) -> Decimal | None:
        if v is not None and v < 0:
            raise ValueError("Price cannot be negative.")
        return v

    @field_validator("stock")
    @classmethod
    def stock_must_not_be_negative(cls, v: int | None) -> int | None:
        if v is not None and v < 0:
            raise ValueError("Stock cannot be negative.")
        return v

    @property
    def category_supplied(self) -> bool:
        return "category_id" in self.model_fields_set
