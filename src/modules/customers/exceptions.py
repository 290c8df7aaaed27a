"""Customer domain exceptions.

Raised by the Service Layer when business rules are violated.
The API exception handler maps each ``kind`` to an HTTP status.
"""

from __future__ import annotations

from modules.core.exceptions import DomainError, ErrorKind


class CustomerAlreadyExists(DomainError):
    """A customer with the same CPF or email already exists."""

    kind = ErrorKind.CONFLICT


class CustomerNotFound(DomainError):
    """The requested customer does not exist."""

    kind = ErrorKind.NOT_FOUND


class CustomerHasOrders(DomainError):
    """The customer has orders and cannot be deleted."""

    kind = ErrorKind.INVALID_STATE


class InvalidCredentials(DomainError):
    """Unknown email or wrong password on login."""

    kind = ErrorKind.UNAUTHENTICATED
