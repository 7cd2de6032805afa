"""Order domain constants.

Defines status choices and the legal edges of the order state machine.
"Assigned" is not a status: it is how a Pending order with an employee
is displayed.
"""

from decimal import Decimal

from django.db import models


class OrderStatus(models.TextChoices):
    PENDING = "Pending", "Pending"
    PROCESSING = "Processing", "Processing"
    COMPLETED = "Completed", "Completed"
    CANCELLED = "Cancelled", "Cancelled"


VALID_TRANSITIONS: dict[str, set[str]] = {
    OrderStatus.PENDING: {OrderStatus.PROCESSING, OrderStatus.CANCELLED},
    OrderStatus.PROCESSING: {OrderStatus.COMPLETED, OrderStatus.CANCELLED},
    OrderStatus.COMPLETED: set(),
    OrderStatus.CANCELLED: set(),
}

TERMINAL_STATES: set[str] = {OrderStatus.COMPLETED, OrderStatus.CANCELLED}

# Orders in these states make up the archive; everything else is active.
ARCHIVED_STATES: set[str] = TERMINAL_STATES

# Largest value the DecimalField(max_digits=12, decimal_places=2) amount columns hold.
MAX_ORDER_AMOUNT = Decimal("9999999999.99")

ASSIGNED_LABEL = "Assigned"
