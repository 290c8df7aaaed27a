"""Customer repository interface.

Extends ``IRepository[Customer]`` with the look-ups required by the
uniqueness rules on CPF and email.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.customers.models import Customer


class ICustomerRepository(IRepository["Customer"]):
    """Repository contract for the Customer aggregate."""

    @abstractmethod
    def get_by_cpf(self, cpf: str) -> Optional[Customer]:
        """Retrieve a customer by CPF (digits only)."""

    @abstractmethod
    def get_by_email(self, email: str) -> Optional[Customer]:
        """Retrieve a customer by email address."""
