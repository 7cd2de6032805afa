"""Order DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
These are the contracts between the API layer and the Service layer.
DTOs are immutable (``frozen=True``).

- ``PlaceOrderItemDTO``: input for a single order line item.
- ``PlaceOrderDTO``: input for order placement (nested items).
- ``TransitionDTO``: input for a status change.
- ``CancelOrderDTO``: input for a cancellation.
- ``AssignEmployeeDTO``: input for an assignment.
- ``OrderSummaryDTO``: output of the dashboard figures.
"""

from __future__ import annotations

from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from modules.orders.constants import OrderStatus

# ---------------------------------------------------------------------------
# Input DTOs
# ---------------------------------------------------------------------------


class PlaceOrderItemDTO(BaseModel):
    """Immutable DTO for a single line of a purchase.

    ``unit_price`` is never accepted from the caller: the Service Layer
    snapshots it from the stone catalog.
    """

    model_config = ConfigDict(frozen=True)

    stone_id: int
    quantity: int

    @field_validator("quantity")
    @classmethod
    def quantity_must_be_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("Quantity must be at least 1.")
        return v


class PlaceOrderDTO(BaseModel):
    """Immutable DTO for order placement.

    Validates:
    - ``items`` must contain at least one item.
    - a stone appears at most once per order.

    ``self_checkout`` marks a purchase made by the customer in the shop:
    it is recorded directly as Completed and cannot carry an employee.
    """

    model_config = ConfigDict(frozen=True)

    customer_id: int
    items: List[PlaceOrderItemDTO]
    employee_id: Optional[int] = None
    self_checkout: bool = False
    notes: str = ""

    @field_validator("items")
    @classmethod
    def items_must_not_be_empty(
        cls, v: List[PlaceOrderItemDTO]
    ) -> List[PlaceOrderItemDTO]:
        if not v:
            raise ValueError("Order must have at least one item.")
        return v

    @model_validator(mode="after")
    def no_duplicate_stones(self):
        stone_ids = [item.stone_id for item in self.items]
        if len(stone_ids) != len(set(stone_ids)):
            raise ValueError("Duplicate stone IDs are not allowed in the same order.")
        return self

    @model_validator(mode="after")
    def self_checkout_has_no_employee(self):
        if self.self_checkout and self.employee_id is not None:
            raise ValueError("Self-checkout orders cannot be assigned to an employee.")
        return self


class TransitionDTO(BaseModel):
    """Immutable DTO for a status change request.

    Unknown status strings are rejected here, before any row is locked.
    """

    model_config = ConfigDict(frozen=True)

    status: OrderStatus
    notes: str = ""


class CancelOrderDTO(BaseModel):
    """Immutable DTO for a cancellation request.

    With ``customer_id`` the request is made by the customer who placed
    the order, which only succeeds while the order is Pending.
    """

    model_config = ConfigDict(frozen=True)

    notes: str = ""
    customer_id: Optional[int] = None


class AssignEmployeeDTO(BaseModel):
    """``employee_id=None`` clears the assignment."""

    model_config = ConfigDict(frozen=True)

    employee_id: Optional[int] = None


# ---------------------------------------------------------------------------
# Output DTOs
# ---------------------------------------------------------------------------


class OrderSummaryDTO(BaseModel):
    """Dashboard figures: order counts and revenue from completed orders."""

    model_config = ConfigDict(frozen=True)

    total_orders: int
    pending_orders: int
    processing_orders: int
    active_orders: int
    archived_orders: int
    revenue: Decimal
