"""Inventory Ledger: the only component allowed to move stone stock.

``reserve`` and ``release`` never read-then-write.  Each is one
conditional row update issued through ``IStoneRepository.update_stock``,
executed inside whatever transaction the caller has open, so a
reservation made while placing an order disappears if the order fails to
commit.

Stock floor: a ``reserve`` that would take the stock below zero is
rejected with ``InsufficientStock`` and leaves the stock untouched.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from modules.stones.exceptions import InsufficientStock, StoneNotFound

if TYPE_CHECKING:
    from modules.stones.repositories.interfaces import IStoneRepository

logger = structlog.get_logger(__name__)


class InventoryLedger:
    """Atomic increment / decrement of stone stock."""

    def __init__(self, stone_repository: IStoneRepository) -> None:
        self._stone_repo = stone_repository

    def reserve(self, stone_id: int, quantity: int) -> None:
        """Take *quantity* units of stone *stone_id* out of stock.

        Raises:
            ValueError: *quantity* is not a positive integer.
            StoneNotFound: the stone does not exist.
            InsufficientStock: fewer than *quantity* units are in stock.
        """
        _require_positive(quantity)
        log = logger.bind(stone_id=stone_id, quantity=quantity)

        if self._stone_repo.update_stock(stone_id, -quantity):
            log.info("ledger.reserved")
            return

        # The conditional update matched nothing: tell the two causes apart.
        available = self._stone_repo.get_stock(stone_id)
        if available is None:
            log.warning("ledger.reserve_unknown_stone")
            raise StoneNotFound(f"Stone {stone_id} not found.")
        log.warning("ledger.insufficient_stock", available=available)
        raise InsufficientStock(stone_id, quantity, available)

    def release(self, stone_id: int, quantity: int) -> None:
        """Put *quantity* units of stone *stone_id* back into stock.

        Raises:
            ValueError: *quantity* is not a positive integer.
            StoneNotFound: the stone no longer exists.
        """
        _require_positive(quantity)
        log = logger.bind(stone_id=stone_id, quantity=quantity)

        if not self._stone_repo.update_stock(stone_id, quantity):
            log.warning("ledger.release_unknown_stone")
            raise StoneNotFound(f"Stone {stone_id} not found.")
        log.info("ledger.released")


def _require_positive(quantity: int) -> None:
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
        raise ValueError(f"Quantity must be a positive integer, got {quantity!r}.")
