"""Order domain exceptions.

Raised by the Service Layer when business rules are violated.
The API layer (Views) catches these and translates them into
appropriate HTTP responses.
"""

from __future__ import annotations

from decimal import Decimal

from modules.orders.constants import MAX_ORDER_AMOUNT, OrderStatus
from shared.domain.exceptions import DomainError, NotFound


class OrderNotFound(NotFound):
    """The requested order does not exist."""


class InvalidTransition(DomainError):
    """The requested status change is not an edge of the state machine."""

    def __init__(self, current: str, requested: str) -> None:
        self.current = current
        self.requested = requested
        super().__init__(f"Cannot transition from {current} to {requested}.")


class NoChange(DomainError):
    """The requested status equals the current one; nothing was written."""


class OrderReadOnly(DomainError):
    """The order is Completed and can no longer be modified."""


class OrderNotOwned(DomainError):
    """The order belongs to a different customer."""


class CancellationWindowClosed(InvalidTransition):
    """Customers may only cancel their own orders while they are Pending."""

    def __init__(self, current: str) -> None:
        super().__init__(current, OrderStatus.CANCELLED)
        self.args = (f"{current} orders can no longer be cancelled by the customer.",)


class AmountOutOfRange(DomainError):
    """A line subtotal or order total does not fit the amount columns."""

    def __init__(self, amount: Decimal) -> None:
        self.amount = amount
        super().__init__(f"Order amount {amount} exceeds {MAX_ORDER_AMOUNT}.")
