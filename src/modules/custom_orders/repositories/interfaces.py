"""Custom order repository interface."""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Any, Dict, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.custom_orders.models import CustomOrder
    from modules.orders.models import Order


class ICustomOrderRepository(IRepository["CustomOrder"]):
    """Repository contract for the CustomOrder aggregate root."""

    @abstractmethod
    def create(self, data: Dict[str, Any]) -> CustomOrder:
        """Insert a Pending request."""

    @abstractmethod
    def get_for_update(self, id: int) -> Optional[CustomOrder]:
        """Retrieve a request with a row-level lock (SELECT FOR UPDATE)."""

    @abstractmethod
    def mark_converted(self, custom_order: CustomOrder, order: Order) -> CustomOrder:
        """Set status Converted and link *order* in a single write."""

    @abstractmethod
    def update_status(self, custom_order: CustomOrder, status: str) -> CustomOrder:
        """Persist a new status on an already-locked request."""
