"""Custom order DTOs for the Service Layer.

DTOs are immutable (``frozen=True``).
"""

from __future__ import annotations

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from modules.stones.dtos import Price


class SubmitCustomOrderDTO(BaseModel):
    """Immutable DTO for a customer's custom stone request."""

    model_config = ConfigDict(frozen=True)

    customer_id: int
    stone_type: str
    stone_description: str = ""
    size: str = ""
    requested_quantity: int = 1

    @field_validator("stone_type")
    @classmethod
    def stone_type_must_not_be_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Stone type must not be empty.")
        return v.strip()

    @field_validator("requested_quantity")
    @classmethod
    def quantity_must_be_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("Requested quantity must be at least 1.")
        return v


class ConvertCustomOrderDTO(BaseModel):
    """Optional pricing supplied by staff when approving a request.

    ``stone_id`` names the catalog stone that fulfils the request;
    ``unit_price`` overrides its catalog price when given.  A price
    without a stone is rejected: it would have nothing to apply to.
    """

    model_config = ConfigDict(frozen=True)

    stone_id: Optional[int] = None
    unit_price: Optional[Price] = None

    @model_validator(mode="after")
    def price_needs_a_stone(self):
        if self.unit_price is not None and self.stone_id is None:
            raise ValueError("unit_price requires a stone_id.")
        return self

    @property
    def is_priced(self) -> bool:
        return self.stone_id is not None

    @field_validator("unit_price")
    @classmethod
    def unit_price_must_not_be_negative(cls, v: Optional[Decimal]) -> Optional[Decimal]:
        if v is not None and v < 0:
            raise ValueError("Unit price cannot be negative.")
        return v
