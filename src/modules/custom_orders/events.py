"""Domain events for the Custom Orders bounded context."""

from __future__ import annotations

from dataclasses import dataclass

from shared.domain.events import DomainEvent


@dataclass(frozen=True)
class CustomOrderConverted(DomainEvent):
    """Raised when a request has been turned into a real order."""

    order_id: int = 0


@dataclass(frozen=True)
class CustomOrderRejected(DomainEvent):
    """Raised when a request is declined."""
