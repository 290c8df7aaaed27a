"""Order domain exceptions.

Raised by the Service Layer when business rules are violated.
Customer and product look-up failures raised while handling an order
reuse the owning module's exceptions, re-exported here for callers.
"""

from __future__ import annotations

from modules.core.exceptions import DomainError, ErrorKind
from modules.customers.exceptions import CustomerNotFound
from modules.products.exceptions import InsufficientStock, ProductNotFound

__all__ = [
    "CustomerNotFound",
    "InsufficientStock",
    "InvalidOrderItem",
    "InvalidOrderState",
    "OrderItemNotFound",
    "OrderNotFound",
    "ProductNotFound",
]


class OrderNotFound(DomainError):
    """The requested order does not exist."""

    kind = ErrorKind.NOT_FOUND


class InvalidOrderState(DomainError):
    """The operation is not allowed in the order's current status."""

    kind = ErrorKind.INVALID_STATE


class OrderItemNotFound(DomainError):
    """An update referenced an item id that does not belong to the order."""

    kind = ErrorKind.NOT_FOUND


class InvalidOrderItem(DomainError):
    """An existing item was sent with a different product."""

    kind = ErrorKind.INVALID_INPUT
