"""Customer service layer (Use Cases).

Orchestrates business logic for the Customer aggregate, delegating
persistence to the injected ``ICustomerRepository``.

Business rules enforced here:
- CPF must be unique.
- Email must be unique.
- Passwords are stored as Django password hashes.
- A customer with orders cannot be deleted.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, Optional

import structlog
from django.contrib.auth.hashers import check_password, make_password
from django.db import IntegrityError, transaction

from modules.customers.exceptions import (
    CustomerAlreadyExists,
    CustomerHasOrders,
    CustomerNotFound,
    InvalidCredentials,
)
from modules.customers.models import Customer

if TYPE_CHECKING:
    from modules.core.repositories.interfaces import Queryable
    from modules.customers.dtos import CreateCustomerDTO, UpdateCustomerDTO
    from modules.customers.repositories.interfaces import ICustomerRepository
    from modules.orders.repositories.interfaces import IOrderRepository

logger = structlog.get_logger(__name__)


class CustomerService:
    """Application service for Customer use-cases.

    Receives repositories via constructor injection (DIP).
    """

    def __init__(
        self,
        repository: ICustomerRepository,
        order_repository: IOrderRepository,
    ) -> None:
        self._repo = repository
        self._order_repo = order_repository

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def create_customer(self, dto: CreateCustomerDTO) -> Customer:
        """Create a new customer after enforcing uniqueness rules.

        Raises:
            CustomerAlreadyExists: if the CPF or the email is already taken.
        """
        log = logger.bind(cpf_suffix=dto.cpf[-4:])

        if self._repo.get_by_cpf(dto.cpf):
            log.warning("customer.duplicate_cpf")
            raise CustomerAlreadyExists("CPF already registered.")

        if self._repo.get_by_email(dto.email):
            log.warning("customer.duplicate_email")
            raise CustomerAlreadyExists("Email already registered.")

        customer = Customer(
            name=dto.name,
            email=dto.email,
            cpf=dto.cpf,
            phone=dto.phone,
            birth_date=dto.birth_date,
            password=make_password(dto.password),
        )
        customer = self._save(customer)
        log.info("customer.created", customer_id=str(customer.id))
        return customer

    @transaction.atomic
    def update_customer(self, id: str, dto: UpdateCustomerDTO) -> Customer:
        """Update an existing customer with the supplied fields.

        Uniqueness is only re-checked for values that actually change.
        An empty password keeps the stored hash.

        Raises:
            CustomerNotFound: if the customer does not exist.
            CustomerAlreadyExists: if the new CPF or email collides.
        """
        customer = self._repo.get_by_id(id)
        if not customer:
            raise CustomerNotFound(f"Customer {id} not found.")

        log = logger.bind(customer_id=str(id))

        if dto.cpf is not None and dto.cpf != customer.cpf:
            if self._repo.get_by_cpf(dto.cpf):
                log.warning("customer.duplicate_cpf")
                raise CustomerAlreadyExists("CPF already registered.")

        if dto.email is not None and dto.email.lower() != customer.email.lower():
            if self._repo.get_by_email(dto.email):
                log.warning("customer.duplicate_email")
                raise CustomerAlreadyExists("Email already registered.")

        for field in ("name", "email", "cpf", "phone"):
            value = getattr(dto, field)
            if value is not None:
                setattr(customer, field, value)

        if dto.birth_date_supplied:
            customer.birth_date = dto.birth_date

        if dto.password:
            customer.password = make_password(dto.password)

        customer = self._save(customer)
        log.info("customer.updated")
        return customer

    @transaction.atomic
    def delete_customer(self, id: str) -> None:
        """Delete a customer without orders.

        Raises:
            CustomerNotFound: if the customer does not exist.
            CustomerHasOrders: if any order references the customer.
        """
        customer = self._repo.get_by_id(id)
        if not customer:
            raise CustomerNotFound(f"Customer {id} not found.")

        if self._order_repo.count({"customer_id": customer.id}):
            logger.warning("customer.delete_blocked", customer_id=str(id))
            raise CustomerHasOrders(
                "Cannot delete a customer that has associated orders."
            )

        self._repo.delete(id)
        logger.info("customer.deleted", customer_id=str(id))

    def login(self, email: str, password: str) -> Customer:
        """Authenticate a customer by email and password.

        Raises:
            InvalidCredentials: unknown email or wrong password.  The
                message is the same in both cases.
        """
        customer = self._repo.get_by_email(email)
        if customer is None:
            # Hash anyway so unknown emails take as long as wrong passwords.
            make_password(password)
            logger.warning("customer.login_failed", reason="unknown_email")
            raise InvalidCredentials("Invalid email or password.")

        if not check_password(password, customer.password):
            logger.warning(
                "customer.login_failed",
                reason="wrong_password",
                customer_id=str(customer.id),
            )
            raise InvalidCredentials("Invalid email or password.")

        logger.info("customer.logged_in", customer_id=str(customer.id))
        return customer

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_customers(
        self, filters: Optional[Dict[str, Any]] = None
    ) -> Queryable[Customer]:
        """Return customers ordered by name, optionally filtered."""
        return self._repo.list(filters)

    def get_customer(self, id: str) -> Customer:
        """Retrieve a single customer by ID.

        Raises:
            CustomerNotFound: if the customer does not exist.
        """
        customer = self._repo.get_by_id(id)
        if not customer:
            raise CustomerNotFound(f"Customer {id} not found.")
        return customer

    def count_customers(self) -> int:
        return self._repo.count()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _save(self, customer: Customer) -> Customer:
        """Persist, turning a lost uniqueness race into a conflict."""
        try:
            return self._repo.save(customer)
        except IntegrityError as exc:
            logger.warning("customer.integrity_conflict")
            raise CustomerAlreadyExists("CPF or email already registered.") from exc
