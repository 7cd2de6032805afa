"""Stone catalog and inventory exceptions.

Raised by the Service Layer / Inventory Ledger when business rules are
violated.  The API layer (Views) translates them into HTTP responses.
"""

from __future__ import annotations

from shared.domain.exceptions import DomainError, NotFound


class StoneNotFound(NotFound):
    """The requested stone does not exist (or was deleted)."""


class InsufficientStock(DomainError):
    """A reservation would drive stock below zero.

    Carries the stone id and the requested / available quantities so the
    caller can explain the rejection.
    """

    def __init__(self, stone_id: int, requested: int, available: int | None = None):
        self.stone_id = stone_id
        self.requested = requested
        self.available = available
        message = f"Stone {stone_id}: requested {requested}"
        if available is not None:
            message += f", available {available}"
        super().__init__(message + ".")
