"""Unit tests for the order assignment rule."""

from __future__ import annotations

import pytest

from modules.employees.exceptions import EmployeeNotFound
from modules.employees.models import Employee
from modules.orders.constants import OrderStatus
from modules.orders.dtos import PlaceOrderDTO, PlaceOrderItemDTO
from modules.orders.exceptions import OrderNotFound, OrderReadOnly
from modules.orders.models import Order

pytestmark = pytest.mark.unit


@pytest.fixture()
def stone(make_stone):
    return make_stone(stock=10)


@pytest.fixture()
def order(order_service, customer, stone):
    return order_service.place_order(
        PlaceOrderDTO(
            customer_id=customer.id,
            items=[PlaceOrderItemDTO(stone_id=stone.id, quantity=1)],
        )
    )


@pytest.fixture()
def other_employee():
    return Employee.objects.create(first_name="Paula", last_name="Ribeiro")


class TestAssignEmployee:
    def test_assign_pending_order(self, order_service, order, employee, stone):
        assigned = order_service.assign_employee(order.id, employee.id)

        assert assigned.employee_id == employee.id
        assert assigned.status == OrderStatus.PENDING
        stone.refresh_from_db()
        assert stone.quantity_in_stock == 9

    def test_reassign(self, order_service, order, employee, other_employee):
        order_service.assign_employee(order.id, employee.id)

        reassigned = order_service.assign_employee(order.id, other_employee.id)

        assert reassigned.employee_id == other_employee.id

    def test_processing_order_can_be_assigned(self, order_service, order, employee):
        order_service.transition(order.id, OrderStatus.PROCESSING)

        assigned = order_service.assign_employee(order.id, employee.id)

        assert assigned.employee_id == employee.id
        assert assigned.status == OrderStatus.PROCESSING

    def test_cancelled_order_can_be_assigned(self, order_service, order, employee):
        order_service.cancel_order(order.id)

        assigned = order_service.assign_employee(order.id, employee.id)

        assert assigned.employee_id == employee.id

    def test_completed_order_is_read_only(self, order_service, order, employee):
        order_service.transition(order.id, OrderStatus.PROCESSING)
        order_service.transition(order.id, OrderStatus.COMPLETED)

        with pytest.raises(OrderReadOnly):
            order_service.assign_employee(order.id, employee.id)

        assert Order.objects.get(id=order.id).employee_id is None

    def test_unknown_employee(self, order_service, order):
        with pytest.raises(EmployeeNotFound):
            order_service.assign_employee(order.id, 424242)

    def test_unknown_order(self, order_service, employee):
        with pytest.raises(OrderNotFound):
            order_service.assign_employee(424242, employee.id)


class TestUnassignEmployee:
    def test_unassign(self, order_service, order, employee):
        order_service.assign_employee(order.id, employee.id)

        unassigned = order_service.unassign_employee(order.id)

        assert unassigned.employee_id is None

    def test_unassign_completed_is_read_only(self, order_service, order, employee):
        order_service.assign_employee(order.id, employee.id)
        order_service.transition(order.id, OrderStatus.PROCESSING)
        order_service.transition(order.id, OrderStatus.COMPLETED)

        with pytest.raises(OrderReadOnly):
            order_service.unassign_employee(order.id)

        assert Order.objects.get(id=order.id).employee_id == employee.id
