"""Order state machine.

Pure validation over ``VALID_TRANSITIONS``; persistence and the
inventory side-effects of a transition live in ``OrderService``.

The checks run in a fixed order so a caller always gets the most
specific rejection:

1. a Completed order is read-only (``OrderReadOnly``);
2. asking for the current status is a no-op (``NoChange``);
3. anything off the edge table is illegal (``InvalidTransition``).
"""

from __future__ import annotations

from modules.orders.constants import VALID_TRANSITIONS, OrderStatus
from modules.orders.exceptions import InvalidTransition, NoChange, OrderReadOnly


def allowed_transitions(current: str) -> set[str]:
    """Return the statuses reachable from *current* in one step."""
    return set(VALID_TRANSITIONS.get(current, set()))


def check_transition(current: str, new: str) -> None:
    """Validate moving an order from *current* to *new*.

    Raises:
        OrderReadOnly: the order is Completed.
        NoChange: *new* equals *current*.
        InvalidTransition: the edge is not in the transition table.
    """
    if current == OrderStatus.COMPLETED:
        raise OrderReadOnly("Completed orders cannot be modified.")
    if new == current:
        raise NoChange(f"Order is already {current}.")
    if new not in allowed_transitions(current):
        raise InvalidTransition(current, new)
