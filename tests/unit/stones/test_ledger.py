"""Unit tests for the Inventory Ledger.

Covers:
- reserve decrements stock; an oversized reserve leaves stock untouched.
- release increments stock.
- unknown stones raise StoneNotFound.
- non-positive / non-integer quantities are rejected before any write.
- a reservation made inside a failing transaction is rolled back.
"""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
from django.db import transaction

from modules.stones.exceptions import InsufficientStock, StoneNotFound
from modules.stones.ledger import InventoryLedger

pytestmark = pytest.mark.unit


@pytest.fixture()
def repo():
    return MagicMock()


class TestLedgerWithRepositoryDouble:
    def test_reserve_issues_negative_delta(self, repo):
        repo.update_stock.return_value = True

        InventoryLedger(repo).reserve(7, 3)

        repo.update_stock.assert_called_once_with(7, -3)
        repo.get_stock.assert_not_called()

    def test_reserve_rejected_reports_available(self, repo):
        repo.update_stock.return_value = False
        repo.get_stock.return_value = 2

        with pytest.raises(InsufficientStock) as exc_info:
            InventoryLedger(repo).reserve(7, 3)

        assert exc_info.value.stone_id == 7
        assert exc_info.value.requested == 3
        assert exc_info.value.available == 2

    def test_reserve_unknown_stone(self, repo):
        repo.update_stock.return_value = False
        repo.get_stock.return_value = None

        with pytest.raises(StoneNotFound):
            InventoryLedger(repo).reserve(99, 1)

    def test_release_unknown_stone(self, repo):
        repo.update_stock.return_value = False

        with pytest.raises(StoneNotFound):
            InventoryLedger(repo).release(99, 1)

    @pytest.mark.parametrize("quantity", [0, -1, 1.5, "2", True, None])
    def test_invalid_quantity_never_touches_storage(self, repo, quantity):
        ledger = InventoryLedger(repo)

        with pytest.raises(ValueError):
            ledger.reserve(1, quantity)
        with pytest.raises(ValueError):
            ledger.release(1, quantity)

        repo.update_stock.assert_not_called()


class TestLedgerAgainstDatabase:
    def test_reserve_decrements(self, ledger, make_stone):
        stone = make_stone(stock=10)

        ledger.reserve(stone.id, 4)

        stone.refresh_from_db()
        assert stone.quantity_in_stock == 6

    def test_reserve_entire_stock_reaches_zero(self, ledger, make_stone):
        stone = make_stone(stock=5)

        ledger.reserve(stone.id, 5)

        stone.refresh_from_db()
        assert stone.quantity_in_stock == 0
        assert stone.in_stock is False

    def test_stock_floor(self, ledger, make_stone):
        stone = make_stone(stock=2)

        with pytest.raises(InsufficientStock, match="requested 3, available 2"):
            ledger.reserve(stone.id, 3)

        stone.refresh_from_db()
        assert stone.quantity_in_stock == 2

    def test_release_increments(self, ledger, make_stone):
        stone = make_stone(stock=0)

        ledger.release(stone.id, 6)

        stone.refresh_from_db()
        assert stone.quantity_in_stock == 6

    def test_reserve_unknown_stone(self, ledger):
        with pytest.raises(StoneNotFound):
            ledger.reserve(123456, 1)

    def test_reserve_refreshes_updated_at(self, ledger, make_stone):
        stone = make_stone(stock=3)
        before = stone.updated_at

        ledger.reserve(stone.id, 1)

        stone.refresh_from_db()
        assert stone.updated_at >= before

    def test_reservation_rolled_back_with_enclosing_transaction(
        self, ledger, make_stone
    ):
        stone = make_stone(stock=5)

        with pytest.raises(RuntimeError):
            with transaction.atomic():
                ledger.reserve(stone.id, 5)
                raise RuntimeError("order could not be saved")

        stone.refresh_from_db()
        assert stone.quantity_in_stock == 5
