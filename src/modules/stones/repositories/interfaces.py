"""Stone repository interface.

Extends ``IRepository[Stone]`` with the stock primitives used by the
Inventory Ledger.  Implementations stay dumb: they apply the row update
they are asked for and report whether a row matched; the ledger owns the
rules.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.stones.models import Stone


class IStoneRepository(IRepository["Stone"]):
    """Repository contract for the Stone aggregate."""

    @abstractmethod
    def update_stock(self, id: int, delta: int) -> bool:
        """Add *delta* to the stock of stone *id* in one conditional UPDATE.

        A negative *delta* only applies when the current stock is at least
        ``-delta``.  Returns ``True`` when a row was updated.
        """

    @abstractmethod
    def get_stock(self, id: int) -> Optional[int]:
        """Current stock of stone *id*, ``None`` if the stone does not exist."""

    @abstractmethod
    def detach_from_order_items(self, id: int) -> int:
        """Set ``stone = NULL`` on every order line item referencing *id*.

        Returns the number of line items detached.
        """
