"""Order repository interface.

Extends ``IRepository[Order]`` with methods required by the Order
aggregate: creation, line items, locked reads, status history and the
active / archived partition.

The Service Layer depends exclusively on this contract (DIP).
"""

from __future__ import annotations

from abc import abstractmethod
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.orders.models import Order, OrderItem, OrderStatusHistory


class IOrderRepository(IRepository["Order"]):
    """Repository contract for the Order aggregate root.

    The Order aggregate includes OrderItem children and
    OrderStatusHistory records.
    """

    @abstractmethod
    def create(self, data: Dict[str, Any]) -> Order:
        """Insert an order row.

        ``data`` must include ``customer_id`` and ``status``; optionally
        ``employee_id``, ``notes`` and ``total_amount``.
        """

    @abstractmethod
    def add_item(
        self, order: Order, stone_id: int, quantity: int, unit_price: Decimal
    ) -> OrderItem:
        """Append a line item to *order* with a price snapshot."""

    @abstractmethod
    def get_for_update(self, id: int) -> Optional[Order]:
        """Retrieve an order with a row-level lock (SELECT FOR UPDATE)."""

    @abstractmethod
    def update_status(self, order: Order, status: str) -> Order:
        """Persist a new status on an already-locked order."""

    @abstractmethod
    def update_employee(self, order: Order, employee_id: Optional[int]) -> Order:
        """Persist a new (or cleared) employee on an already-locked order."""

    @abstractmethod
    def update_total(self, order: Order, total: Decimal) -> Order:
        """Persist the order total."""

    @abstractmethod
    def add_history(
        self,
        order_id: int,
        status: str,
        notes: str = "",
        old_status: Optional[str] = None,
    ) -> OrderStatusHistory:
        """Record a status change in the order's audit trail."""

    @abstractmethod
    def list_by_statuses(
        self, statuses: set[str], exclude: bool = False
    ) -> List[Order]:
        """Orders whose status is (or, with *exclude*, is not) in *statuses*."""

    @abstractmethod
    def summary(self) -> Dict[str, Any]:
        """Aggregate counts per status and completed revenue."""
