"""DRF exception handler that understands ``DomainError`` kinds.

Builds on *drf-standardized-errors*, so every error response has the
same shape::

    {"type": "client_error", "errors": [{"code": ..., "detail": ..., "attr": ...}]}

Domain errors are mapped by ``kind``; Pydantic DTO validation errors are
turned into field-level DRF validation errors.
"""

from __future__ import annotations

import structlog
from drf_standardized_errors.handler import ExceptionHandler
from pydantic import ValidationError as PydanticValidationError
from rest_framework import exceptions, status

from modules.core.exceptions import DomainError, ErrorKind

logger = structlog.get_logger(__name__)

STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.INVALID_INPUT: status.HTTP_400_BAD_REQUEST,
    ErrorKind.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorKind.INSUFFICIENT_STOCK: status.HTTP_409_CONFLICT,
    ErrorKind.INVALID_STATE: status.HTTP_400_BAD_REQUEST,
    ErrorKind.UNAUTHENTICATED: status.HTTP_401_UNAUTHORIZED,
}


class DomainExceptionHandler(ExceptionHandler):
    def convert_known_exceptions(self, exc: Exception) -> Exception:
        if isinstance(exc, DomainError):
            logger.warning(
                "api.domain_error",
                kind=exc.kind.value,
                error=type(exc).__name__,
                detail=exc.message,
            )
            api_exc = exceptions.APIException(detail=exc.message, code=exc.kind.value)
            api_exc.status_code = STATUS_BY_KIND[exc.kind]
            return api_exc
        if isinstance(exc, PydanticValidationError):
            return exceptions.ValidationError(pydantic_errors_to_detail(exc))
        return super().convert_known_exceptions(exc)


def pydantic_errors_to_detail(exc: PydanticValidationError) -> dict[str, list[str]]:
    """Group Pydantic errors by dotted field path (``items.0.quantity``)."""
    detail: dict[str, list[str]] = {}
    for error in exc.errors():
        attr = ".".join(str(part) for part in error["loc"]) or "non_field_errors"
        detail.setdefault(attr, []).append(error["msg"])
    return detail
