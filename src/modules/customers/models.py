"""Customer model with CPF validation and hashed credentials.

Business rules implemented:
- CPF must be unique in the system (digits only, check digits validated).
- Email must be unique in the system.
- A customer with orders cannot be deleted (``PROTECT`` on
  ``Order.customer``; the service checks first).
- ``password`` stores a Django password hash, never the raw secret, and
  is never serialized.
- Sensitive data (CPF) masked in ``__str__`` and logs.
"""

from __future__ import annotations

import re

import structlog
from validate_docbr import CPF

from django.core.exceptions import ValidationError
from django.db import models

from modules.core.models import BaseModel

logger = structlog.get_logger(__name__)


class Customer(BaseModel):
    """Customer aggregate root.

    ``cpf`` stores only digits (sanitised on save).
    """

    name = models.CharField(max_length=100)
    email = models.EmailField(max_length=255, unique=True)
    cpf = models.CharField(max_length=11, unique=True)
    phone = models.CharField(max_length=15, blank=True, default="")
    birth_date = models.DateField(null=True, blank=True)
    password = models.CharField(max_length=128)

    class Meta:
        db_table = "customers"
        ordering = ["name"]

    # ------------------------------------------------------------------
    # Sanitisation / Validation
    # ------------------------------------------------------------------

    @staticmethod
    def _sanitize_cpf(value: str) -> str:
        """Strip all non-digit characters from a CPF string."""
        return re.sub(r"\D", "", value)

    def clean(self) -> None:
        super().clean()
        if self.cpf:
            self.cpf = self._sanitize_cpf(self.cpf)
        if not CPF().validate(self.cpf):
            logger.warning(
                "customer.invalid_cpf",
                cpf_suffix=self.cpf[-4:] if self.cpf else "",
            )
            raise ValidationError({"cpf": "Invalid CPF number."})

    def save(self, *args, **kwargs) -> None:
        if self.cpf:
            self.cpf = self._sanitize_cpf(self.cpf)
        super().save(*args, **kwargs)

    # ------------------------------------------------------------------
    # Display (mask sensitive data)
    # ------------------------------------------------------------------

    def __str__(self) -> str:
        suffix = self.cpf[-4:] if self.cpf else "????"
        return f"{self.name} (CPF: ***{suffix})"
