"""Employee DTOs for the Service Layer."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

Salary = Annotated[Decimal, Field(max_digits=10, decimal_places=2)]


class CreateEmployeeDTO(BaseModel):
    """Immutable DTO for hiring an employee."""

    model_config = ConfigDict(frozen=True)

    first_name: str
    last_name: str = ""
    phone: str = ""
    address: str = ""
    salary: Salary = Decimal("0.00")
    hire_date: Optional[date] = None

    @field_validator("first_name")
    @classmethod
    def first_name_must_not_be_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("First name must not be empty.")
        return v.strip()

    @field_validator("salary")
    @classmethod
    def salary_must_not_be_negative(cls, v: Decimal) -> Decimal:
        if v < 0:
            raise ValueError("Salary cannot be negative.")
        return v


class UpdateEmployeeDTO(BaseModel):
    """Partial profile edit; only the supplied fields change."""

    model_config = ConfigDict(frozen=True)

    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    salary: Optional[Salary] = None
    hire_date: Optional[date] = None

    @field_validator("first_name")
    @classmethod
    def first_name_must_not_be_blank(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            raise ValueError("First name must not be empty.")
        return v.strip() if v is not None else v

    @field_validator("salary")
    @classmethod
    def salary_must_not_be_negative(cls, v: Optional[Decimal]) -> Optional[Decimal]:
        if v is not None and v < 0:
            raise ValueError("Salary cannot be negative.")
        return v
