"""Unit tests for order cancellation with stock release.

Covers:
- Cancel from Pending and from Processing restores every line's stock.
- Lines whose stone was deleted are skipped.
- Cancellation reason recorded in history.
- Customers cancel only their own orders, and only while Pending.
- Atomicity: a failure while releasing rolls the whole cancellation back.
"""

from __future__ import annotations

from unittest.mock import patch

import pytest

from modules.orders.constants import OrderStatus
from modules.orders.dtos import PlaceOrderDTO, PlaceOrderItemDTO
from modules.customers.models import Customer
from modules.orders.exceptions import (
    CancellationWindowClosed,
    InvalidTransition,
    NoChange,
    OrderNotFound,
    OrderNotOwned,
    OrderReadOnly,
)
from modules.orders.models import Order, OrderStatusHistory
from modules.stones.models import Stone

pytestmark = pytest.mark.unit


@pytest.fixture()
def stone_a(make_stone):
    return make_stone(name="Stone A", stock=10, price="10.00")


@pytest.fixture()
def stone_b(make_stone):
    return make_stone(name="Stone B", stock=8, price="25.50")


@pytest.fixture()
def pending_order(order_service, customer, stone_a, stone_b):
    # A: 10 -> 7, B: 8 -> 6
    return order_service.place_order(
        PlaceOrderDTO(
            customer_id=customer.id,
            items=[
                PlaceOrderItemDTO(stone_id=stone_a.id, quantity=3),
                PlaceOrderItemDTO(stone_id=stone_b.id, quantity=2),
            ],
        )
    )


def _stock(stone):
    stone.refresh_from_db()
    return stone.quantity_in_stock


class TestCancelRestock:
    def test_cancel_pending_restores_stock(
        self, order_service, pending_order, stone_a, stone_b
    ):
        assert (_stock(stone_a), _stock(stone_b)) == (7, 6)

        cancelled = order_service.cancel_order(pending_order.id)

        assert cancelled.status == OrderStatus.CANCELLED
        assert (_stock(stone_a), _stock(stone_b)) == (10, 8)

    def test_cancel_processing_restores_stock(
        self, order_service, pending_order, stone_a, stone_b
    ):
        order_service.transition(pending_order.id, OrderStatus.PROCESSING)

        order_service.transition(pending_order.id, OrderStatus.CANCELLED)

        assert (_stock(stone_a), _stock(stone_b)) == (10, 8)

    def test_cancel_twice_does_not_restock_twice(
        self, order_service, pending_order, stone_a
    ):
        order_service.cancel_order(pending_order.id)

        with pytest.raises(NoChange):
            order_service.cancel_order(pending_order.id)

        assert _stock(stone_a) == 10

    def test_cancel_completed_is_read_only(self, order_service, pending_order, stone_a):
        order_service.transition(pending_order.id, OrderStatus.PROCESSING)
        order_service.transition(pending_order.id, OrderStatus.COMPLETED)

        with pytest.raises(OrderReadOnly):
            order_service.cancel_order(pending_order.id)

        assert _stock(stone_a) == 7

    def test_deleted_stone_is_skipped(
        self, order_service, pending_order, stone_a, stone_b
    ):
        Stone.objects.filter(id=stone_b.id).delete()

        order_service.cancel_order(pending_order.id)

        assert _stock(stone_a) == 10
        assert Order.objects.get(id=pending_order.id).status == OrderStatus.CANCELLED

    def test_records_cancellation_history(self, order_service, pending_order):
        order_service.cancel_order(pending_order.id, notes="Customer changed mind")

        record = OrderStatusHistory.objects.get(
            order=pending_order, new_status=OrderStatus.CANCELLED
        )
        assert record.old_status == OrderStatus.PENDING
        assert record.notes == "Customer changed mind"

    def test_default_cancellation_note(self, order_service, pending_order):
        order_service.cancel_order(pending_order.id)

        record = OrderStatusHistory.objects.get(
            order=pending_order, new_status=OrderStatus.CANCELLED
        )
        assert record.notes == "Order cancelled"

    def test_cancel_nonexistent_order_raises(self, order_service):
        with pytest.raises(OrderNotFound):
            order_service.cancel_order(424242)


class TestCancelAtomicity:
    def test_failed_release_rolls_everything_back(
        self, order_service, ledger, pending_order, stone_a, stone_b
    ):
        real_release = ledger.release
        calls = []

        def flaky_release(stone_id, quantity):
            calls.append(stone_id)
            if len(calls) == 2:
                raise RuntimeError("storage went away")
            real_release(stone_id, quantity)

        with patch.object(ledger, "release", side_effect=flaky_release):
            with pytest.raises(RuntimeError):
                order_service.cancel_order(pending_order.id)

        assert (_stock(stone_a), _stock(stone_b)) == (7, 6)
        assert Order.objects.get(id=pending_order.id).status == OrderStatus.PENDING
        assert not OrderStatusHistory.objects.filter(
            order=pending_order, new_status=OrderStatus.CANCELLED
        ).exists()

    def test_failed_status_write_releases_nothing(
        self, order_service, pending_order, stone_a, stone_b
    ):
        with patch(
            "modules.orders.repositories.django_repository.OrderDjangoRepository.update_status",
            side_effect=RuntimeError("write failed"),
        ):
            with pytest.raises(RuntimeError):
                order_service.cancel_order(pending_order.id)

        assert (_stock(stone_a), _stock(stone_b)) == (7, 6)


class TestCustomerCancellation:
    def test_owner_cancels_pending_order(
        self, order_service, pending_order, customer, stone_a, stone_b
    ):
        cancelled = order_service.cancel_customer_order(pending_order.id, customer.id)

        assert cancelled.status == OrderStatus.CANCELLED
        assert (_stock(stone_a), _stock(stone_b)) == (10, 8)
        record = OrderStatusHistory.objects.get(
            order=pending_order, new_status=OrderStatus.CANCELLED
        )
        assert record.notes == "Cancelled by customer"

    def test_other_customer_is_refused(self, order_service, pending_order, stone_a):
        stranger = Customer.objects.create(first_name="Bruno", email="bruno@example.com")

        with pytest.raises(OrderNotOwned):
            order_service.cancel_customer_order(pending_order.id, stranger.id)

        assert Order.objects.get(id=pending_order.id).status == OrderStatus.PENDING
        assert _stock(stone_a) == 7

    def test_processing_order_is_out_of_reach(
        self, order_service, pending_order, customer, stone_a
    ):
        order_service.transition(pending_order.id, OrderStatus.PROCESSING)

        with pytest.raises(CancellationWindowClosed) as exc_info:
            order_service.cancel_customer_order(pending_order.id, customer.id)

        assert isinstance(exc_info.value, InvalidTransition)
        assert Order.objects.get(id=pending_order.id).status == OrderStatus.PROCESSING
        assert _stock(stone_a) == 7

    def test_completed_order_is_read_only(self, order_service, pending_order, customer):
        order_service.transition(pending_order.id, OrderStatus.PROCESSING)
        order_service.transition(pending_order.id, OrderStatus.COMPLETED)

        with pytest.raises(OrderReadOnly):
            order_service.cancel_customer_order(pending_order.id, customer.id)

    def test_already_cancelled_is_no_change(
        self, order_service, pending_order, customer, stone_a
    ):
        order_service.cancel_order(pending_order.id)

        with pytest.raises(NoChange):
            order_service.cancel_customer_order(pending_order.id, customer.id)

        assert _stock(stone_a) == 10

    def test_unknown_order(self, order_service, customer):
        with pytest.raises(OrderNotFound):
            order_service.cancel_customer_order(424242, customer.id)
