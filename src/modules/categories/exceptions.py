"""Category domain exceptions.

Raised by the Service Layer when business rules are violated.
The API exception handler translates each ``kind`` into an HTTP status.
"""

from __future__ import annotations

from modules.core.exceptions import DomainError, ErrorKind


class CategoryNotFound(DomainError):
    """The requested category does not exist."""

    kind = ErrorKind.NOT_FOUND


class CategoryAlreadyExists(DomainError):
    """A category with the same name already exists."""

    kind = ErrorKind.CONFLICT


class CategoryInUse(DomainError):
    """The category still owns products and cannot be deleted."""

    kind = ErrorKind.INVALID_STATE
