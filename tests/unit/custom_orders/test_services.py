"""Unit tests for the custom-order conversion workflow.

Covers:
- submit / get / list.
- convert without pricing: Pending order, zero total, no items.
- convert with pricing: stock reserved, one line, total = qty * price.
- a request converts at most once; rejected requests stay rejected.
- conversion atomicity: a failure at any step leaves nothing behind.
"""

from __future__ import annotations

from decimal import Decimal
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from modules.custom_orders.constants import CustomOrderStatus
from modules.custom_orders.dtos import ConvertCustomOrderDTO, SubmitCustomOrderDTO
from modules.custom_orders.exceptions import AlreadyConverted, CustomOrderNotFound
from modules.custom_orders.models import CustomOrder
from modules.customers.exceptions import CustomerNotFound
from modules.customers.models import Customer
from modules.orders.constants import OrderStatus
from modules.orders.exceptions import AmountOutOfRange
from modules.orders.models import Order, OrderItem
from modules.stones.exceptions import InsufficientStock, StoneNotFound

pytestmark = pytest.mark.unit


@pytest.fixture()
def request_for_five(custom_order_service, customer):
    return custom_order_service.submit(
        SubmitCustomOrderDTO(
            customer_id=customer.id,
            stone_type="Onyx",
            stone_description="Backlit honey onyx",
            size="120x240",
            requested_quantity=5,
        )
    )


class TestSubmit:
    def test_submit_creates_pending_request(self, request_for_five, customer):
        assert request_for_five.status == CustomOrderStatus.PENDING
        assert request_for_five.customer_id == customer.id
        assert request_for_five.order_id is None

    def test_unknown_customer(self, custom_order_service):
        with pytest.raises(CustomerNotFound):
            custom_order_service.submit(
                SubmitCustomOrderDTO(customer_id=424242, stone_type="Onyx")
            )

    def test_dto_validation(self):
        with pytest.raises(ValidationError):
            SubmitCustomOrderDTO(customer_id=1, stone_type="  ")
        with pytest.raises(ValidationError):
            SubmitCustomOrderDTO(customer_id=1, stone_type="Onyx", requested_quantity=0)


class TestConvertWithoutPricing:
    def test_creates_zero_total_pending_order(
        self, custom_order_service, request_for_five, customer
    ):
        order = custom_order_service.convert(request_for_five.id)

        assert order.status == OrderStatus.PENDING
        assert order.customer_id == customer.id
        assert order.employee_id is None
        assert order.total_amount == Decimal("0.00")
        assert order.items.count() == 0

        request_for_five.refresh_from_db()
        assert request_for_five.status == CustomOrderStatus.CONVERTED
        assert request_for_five.order_id == order.id

    def test_converts_only_once(self, custom_order_service, request_for_five):
        custom_order_service.convert(request_for_five.id)

        with pytest.raises(AlreadyConverted):
            custom_order_service.convert(request_for_five.id)

        assert Order.objects.count() == 1

    def test_unknown_request(self, custom_order_service):
        with pytest.raises(CustomOrderNotFound):
            custom_order_service.convert(424242)


class TestConvertWithPricing:
    def test_reserves_stock_and_prices_order(
        self, custom_order_service, request_for_five, make_stone
    ):
        stone = make_stone(stock=8, price="100.00")

        order = custom_order_service.convert(
            request_for_five.id, ConvertCustomOrderDTO(stone_id=stone.id)
        )

        assert order.total_amount == Decimal("500.00")
        item = OrderItem.objects.get(order=order)
        assert (item.stone_id, item.quantity, item.unit_price) == (
            stone.id,
            5,
            Decimal("100.00"),
        )
        stone.refresh_from_db()
        assert stone.quantity_in_stock == 3

    def test_agreed_price_overrides_catalog(
        self, custom_order_service, request_for_five, make_stone
    ):
        stone = make_stone(stock=8, price="100.00")

        order = custom_order_service.convert(
            request_for_five.id,
            ConvertCustomOrderDTO(stone_id=stone.id, unit_price=Decimal("80.00")),
        )

        assert order.total_amount == Decimal("400.00")

    def test_insufficient_stock_rolls_back(
        self, custom_order_service, request_for_five, make_stone
    ):
        stone = make_stone(stock=4)

        with pytest.raises(InsufficientStock):
            custom_order_service.convert(
                request_for_five.id, ConvertCustomOrderDTO(stone_id=stone.id)
            )

        request_for_five.refresh_from_db()
        assert request_for_five.status == CustomOrderStatus.PENDING
        assert request_for_five.order_id is None
        assert Order.objects.count() == 0
        stone.refresh_from_db()
        assert stone.quantity_in_stock == 4

    def test_unknown_stone_rolls_back(self, custom_order_service, request_for_five):
        with pytest.raises(StoneNotFound):
            custom_order_service.convert(
                request_for_five.id, ConvertCustomOrderDTO(stone_id=424242)
            )

        assert Order.objects.count() == 0

    def test_negative_price_rejected(self):
        with pytest.raises(ValidationError):
            ConvertCustomOrderDTO(stone_id=1, unit_price=Decimal("-1"))

    @pytest.mark.parametrize(
        "price", ["123456789012.00", "10.005"], ids=["too-many-digits", "sub-cent"]
    )
    def test_price_must_fit_the_price_column(self, price):
        with pytest.raises(ValidationError):
            ConvertCustomOrderDTO(stone_id=1, unit_price=Decimal(price))

    def test_price_without_stone_rejected(self):
        with pytest.raises(ValidationError):
            ConvertCustomOrderDTO(unit_price=Decimal("80.00"))

    def test_empty_pricing_converts_unpriced(
        self, custom_order_service, request_for_five
    ):
        order = custom_order_service.convert(request_for_five.id, ConvertCustomOrderDTO())

        assert order.total_amount == Decimal("0.00")
        assert not OrderItem.objects.filter(order=order).exists()

    def test_total_too_large_rolls_back(self, custom_order_service, customer, make_stone):
        stone = make_stone(stock=500, price="99999999.99")
        bulk = custom_order_service.submit(
            SubmitCustomOrderDTO(
                customer_id=customer.id, stone_type="Onyx", requested_quantity=200
            )
        )

        with pytest.raises(AmountOutOfRange):
            custom_order_service.convert(bulk.id, ConvertCustomOrderDTO(stone_id=stone.id))

        bulk.refresh_from_db()
        assert bulk.status == CustomOrderStatus.PENDING
        assert Order.objects.count() == 0
        stone.refresh_from_db()
        assert stone.quantity_in_stock == 500


class TestConversionAtomicity:
    def test_failure_while_linking_leaves_no_order(
        self, custom_order_service, request_for_five, make_stone
    ):
        stone = make_stone(stock=8)

        with patch(
            "modules.custom_orders.repositories.django_repository."
            "CustomOrderDjangoRepository.mark_converted",
            side_effect=RuntimeError("link failed"),
        ):
            with pytest.raises(RuntimeError):
                custom_order_service.convert(
                    request_for_five.id, ConvertCustomOrderDTO(stone_id=stone.id)
                )

        assert Order.objects.count() == 0
        assert OrderItem.objects.count() == 0
        stone.refresh_from_db()
        assert stone.quantity_in_stock == 8
        request_for_five.refresh_from_db()
        assert request_for_five.status == CustomOrderStatus.PENDING


class TestReject:
    def test_reject_pending(self, custom_order_service, request_for_five):
        rejected = custom_order_service.reject(request_for_five.id)

        assert rejected.status == CustomOrderStatus.REJECTED
        assert Order.objects.count() == 0

    def test_rejected_cannot_be_converted(self, custom_order_service, request_for_five):
        custom_order_service.reject(request_for_five.id)

        with pytest.raises(AlreadyConverted):
            custom_order_service.convert(request_for_five.id)

    def test_converted_cannot_be_rejected(self, custom_order_service, request_for_five):
        custom_order_service.convert(request_for_five.id)

        with pytest.raises(AlreadyConverted):
            custom_order_service.reject(request_for_five.id)

        request_for_five.refresh_from_db()
        assert request_for_five.status == CustomOrderStatus.CONVERTED


class TestQueries:
    def test_list_by_customer_and_status(
        self, custom_order_service, request_for_five, customer
    ):
        other = Customer.objects.create(first_name="Bruno", email="bruno@example.com")
        second = custom_order_service.submit(
            SubmitCustomOrderDTO(customer_id=other.id, stone_type="Quartzite")
        )
        custom_order_service.reject(second.id)

        mine = custom_order_service.list_custom_orders(customer_id=customer.id)
        rejected = custom_order_service.list_custom_orders(
            status=CustomOrderStatus.REJECTED
        )

        assert [c.id for c in mine] == [request_for_five.id]
        assert [c.id for c in rejected] == [second.id]
        assert len(custom_order_service.list_custom_orders()) == 2

    def test_get_unknown(self, custom_order_service):
        with pytest.raises(CustomOrderNotFound):
            custom_order_service.get_custom_order(424242)

    def test_get(self, custom_order_service, request_for_five):
        assert custom_order_service.get_custom_order(request_for_five.id).stone_type == "Onyx"
        assert CustomOrder.objects.get(id=request_for_five.id).requested_quantity == 5
