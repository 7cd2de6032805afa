"""Custom order domain exceptions."""

from __future__ import annotations

from shared.domain.exceptions import DomainError, NotFound


class CustomOrderNotFound(NotFound):
    """The requested custom order does not exist."""


class AlreadyConverted(DomainError):
    """The request is no longer Pending (already converted or rejected)."""

    def __init__(self, custom_order_id: int, status: str) -> None:
        self.custom_order_id = custom_order_id
        self.status = status
        super().__init__(f"Custom order {custom_order_id} is already {status}.")
