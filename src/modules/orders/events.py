"""Domain events for the Orders bounded context."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from shared.domain.events import DomainEvent


@dataclass(frozen=True)
class OrderPlaced(DomainEvent):
    """Raised when an order is placed (purchase or staff entry)."""

    status: str = ""


@dataclass(frozen=True)
class OrderStatusChanged(DomainEvent):
    """Raised on every accepted status transition."""

    old_status: str = ""
    new_status: str = ""


@dataclass(frozen=True)
class OrderCancelled(DomainEvent):
    """Raised when an order is cancelled and its stock released."""


@dataclass(frozen=True)
class OrderCompleted(DomainEvent):
    """Raised when an order reaches Completed."""


@dataclass(frozen=True)
class EmployeeAssigned(DomainEvent):
    """Raised when an order's employee is set, changed or cleared."""

    employee_id: Optional[int] = None
