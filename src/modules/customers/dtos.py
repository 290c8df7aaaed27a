"""Customer DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
These are the contracts between the API layer (DRF Serializers)
and the Service layer.  DTOs are immutable (``frozen=True``).

- ``CreateCustomerDTO``: input for customer creation.
- ``UpdateCustomerDTO``: input for partial customer updates.
"""

from __future__ import annotations

import re
from datetime import date

from pydantic import BaseModel, ConfigDict, EmailStr, field_validator
from validate_docbr import CPF


def _sanitize_cpf(v: object) -> object:
    """Strip non-digit characters (accept formatted or raw input)."""
    if not isinstance(v, str):
        return v
    return re.sub(r"\D", "", v)


def _validate_cpf(v: str) -> str:
    if not CPF().validate(v):
        raise ValueError("Invalid CPF number.")
    return v


def _validate_password(v: str) -> str:
    if len(v) < 4:
        raise ValueError("Password must have at least 4 characters.")
    if not re.search(r"[a-zA-Z]", v):
        raise ValueError("Password must contain at least one letter.")
    if not re.search(r"[0-9]", v):
        raise ValueError("Password must contain at least one number.")
    return v


# ---------------------------------------------------------------------------
# Input DTOs
# ---------------------------------------------------------------------------


class CreateCustomerDTO(BaseModel):
    """Immutable DTO for customer creation requests.

    Validates:
    - ``cpf`` is sanitised (non-digits stripped) and checked via
      *validate-docbr*.
    - ``email`` is a well-formed address (Pydantic ``EmailStr``).
    - ``password`` has at least 4 characters, one letter and one digit.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    email: EmailStr
    cpf: str
    password: str
    phone: str = ""
    birth_date: date | None = None

    @field_validator("cpf", mode="before")
    @classmethod
    def sanitize_cpf(cls, v: object) -> object:
        return _sanitize_cpf(v)

    @field_validator("cpf")
    @classmethod
    def validate_cpf(cls, v: str) -> str:
        return _validate_cpf(v)

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        return _validate_password(v)


class UpdateCustomerDTO(BaseModel):
    """Immutable DTO for customer update requests.

    All fields are optional; only supplied fields will be updated.
    An empty ``password`` means "keep the current one".
    """

    model_config = ConfigDict(frozen=True)

    name: str | None = None
    email: EmailStr | None = None
    cpf: str | None = None
    phone: str | None = None
    birth_date: date | None = None
    password: str | None = None

    @field_validator("cpf", mode="before")
    @classmethod
    def sanitize_cpf(cls, v: object) -> object:
        return _sanitize_cpf(v)

    @field_validator("cpf")
    @classmethod
    def validate_cpf(cls, v: str | None) -> str | None:
        return _validate_cpf(v) if v is not None else v

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str | None) -> str | None:
        return _validate_password(v) if v else v

    @property
    def birth_date_supplied(self) -> bool:
        return "birth_date" in self.model_fields_set
