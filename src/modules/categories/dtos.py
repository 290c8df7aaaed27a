"""Category DTOs for the Service Layer.

Immutable Pydantic v2 contracts between the API layer and the services.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, field_validator


def _clean_name(v: str) -> str:
    v = v.strip()
    if not 2 <= len(v) <= 100:
        raise ValueError("Category name must have between 2 and 100 characters.")
    return v


class CreateCategoryDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    description: str = ""

    @field_validator("name")
    @classmethod
    def name_length(cls, v: str) -> str:
        return _clean_name(v)


class UpdateCategoryDTO(BaseModel):
    """All fields optional; only supplied fields are updated."""

    model_config = ConfigDict(frozen=True)

    name: str | None = None
    description: str | None = None

    @field_validator("name")
    @classmethod
    def name_length(cls, v: str | None) -> str | None:
        return _clean_name(v) if v is not None else v
