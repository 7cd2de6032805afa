"""Customer DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
DTOs are immutable (``frozen=True``).
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, field_validator


class CreateCustomerDTO(BaseModel):
    """Immutable DTO for customer registration."""

    model_config = ConfigDict(frozen=True)

    first_name: str
    last_name: str = ""
    email: EmailStr
    phone: str = ""
    address: str = ""

    @field_validator("first_name")
    @classmethod
    def first_name_must_not_be_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("First name must not be empty.")
        return v.strip()


class UpdateCustomerDTO(BaseModel):
    """Partial profile edit; only the supplied fields change."""

    model_config = ConfigDict(frozen=True)

    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    address: Optional[str] = None

    @field_validator("first_name")
    @classmethod
    def first_name_must_not_be_blank(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            raise ValueError("First name must not be empty.")
        return v.strip() if v is not None else v
