"""Domain error kinds shared by every module.

Each module defines its own exceptions as subclasses of ``DomainError``
with a fixed ``kind``.  Services raise them (aborting the surrounding
``transaction.atomic`` block); the API exception handler matches on
``kind`` to pick the HTTP status, never on the message text.
"""

from __future__ import annotations

from enum import StrEnum


class ErrorKind(StrEnum):
    NOT_FOUND = "not_found"
    INVALID_INPUT = "invalid_input"
    CONFLICT = "conflict"
    INSUFFICIENT_STOCK = "insufficient_stock"
    INVALID_STATE = "invalid_state"
    UNAUTHENTICATED = "unauthenticated"


class DomainError(Exception):
    """Base class for business rule violations."""

    kind: ErrorKind = ErrorKind.INVALID_INPUT

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message
