"""Product domain exceptions.

Raised by the Service Layer (and the inventory adjuster) when business
rules are violated.  The API exception handler maps each ``kind`` to an
HTTP status.
"""

from __future__ import annotations

from modules.core.exceptions import DomainError, ErrorKind


class ProductNotFound(DomainError):
    """The requested product does not exist."""

    kind = ErrorKind.NOT_FOUND


class ProductAlreadyExists(DomainError):
    """A product with the same name already exists."""

    kind = ErrorKind.CONFLICT


class ProductInUse(DomainError):
    """The product is referenced by order items and cannot be deleted."""

    kind = ErrorKind.INVALID_STATE


class InsufficientStock(DomainError):
    """Not enough stock to cover the requested quantity.

    The message names the product and both quantities; they are also
    kept as attributes for callers that need them.
    """

    kind = ErrorKind.INSUFFICIENT_STOCK

    def __init__(self, product_name: str, available: int, requested: int) -> None:
        self.product_name = product_name
        self.available = available
        self.requested = requested
        super().__init__(
            f"Insufficient stock for product {product_name}. "
            f"Available: {available}, requested: {requested}."
        )
