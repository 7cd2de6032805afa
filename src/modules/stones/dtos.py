"""Stone DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
DTOs are immutable (``frozen=True``).

- ``CreateStoneDTO``: input for catalog creation.
- ``UpdateStoneDTO``: input for partial catalog edits.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Mirrors the DecimalField(max_digits=10, decimal_places=2) price columns.
Price = Annotated[Decimal, Field(max_digits=10, decimal_places=2)]


class CreateStoneDTO(BaseModel):
    """Immutable DTO for stone creation requests.

    Validates:
    - ``name`` is a non-empty string.
    - ``unit_price`` is a non-negative Decimal that fits the price
      column (10 digits, 2 decimals).
    - ``quantity_in_stock`` is non-negative.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    stone_type: str = ""
    size: str = ""
    unit_price: Price
    quantity_in_stock: int = 0

    @field_validator("name")
    @classmethod
    def name_must_not_be_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Name must not be empty.")
        return v.strip()

    @field_validator("unit_price")
    @classmethod
    def price_must_be_non_negative(cls, v: Decimal) -> Decimal:
        if v < 0:
            raise ValueError("Unit price cannot be negative.")
        return v

    @field_validator("quantity_in_stock")
    @classmethod
    def stock_must_be_non_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError("Quantity in stock cannot be negative.")
        return v


class UpdateStoneDTO(BaseModel):
    """Immutable DTO for stone update requests.

    All fields are optional; only supplied fields are updated.
    """

    model_config = ConfigDict(frozen=True)

    name: str | None = None
    stone_type: str | None = None
    size: str | None = None
    unit_price: Price | None = None
    quantity_in_stock: int | None = None

    @field_validator("unit_price")
    @classmethod
    def price_must_be_non_negative(cls, v: Decimal | None) -> Decimal | None:
        if v is not None and v < 0:
            raise ValueError("Unit price cannot be negative.")
        return v

    @field_validator("quantity_in_stock")
    @classmethod
    def stock_must_be_non_negative(cls, v: int | None) -> int | None:
        if v is not None and v < 0:
            raise ValueError("Quantity in stock cannot be negative.")
        return v
