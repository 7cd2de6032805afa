"""Employee repository interface."""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, List

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.employees.models import Employee
    from modules.orders.models import Order


class IEmployeeRepository(IRepository["Employee"]):
    """Repository contract for the Employee entity."""

    @abstractmethod
    def unassign_orders(self, id: int) -> int:
        """Clear the employee from every order; return the number of orders touched."""

    @abstractmethod
    def list_orders(self, id: int) -> List[Order]:
        """Return the orders currently assigned to the employee."""
