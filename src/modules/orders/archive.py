"""Active / archived partition of orders.

Classification is a pure function of the stored status, recomputed on
every read.  Nothing is moved or copied when an order is archived.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from modules.orders.constants import ARCHIVED_STATES, ASSIGNED_LABEL, OrderStatus

if TYPE_CHECKING:
    from modules.orders.models import Order


def is_archived(status: str) -> bool:
    return status in ARCHIVED_STATES


def display_status(order: Order) -> str:
    """Status as shown to staff: Pending orders with an employee read "Assigned"."""
    if order.status == OrderStatus.PENDING and order.employee_id is not None:
        return ASSIGNED_LABEL
    return order.status
