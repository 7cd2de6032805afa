"""Unit tests for the employee service."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest
from freezegun import freeze_time
from pydantic import ValidationError

from modules.employees.dtos import CreateEmployeeDTO, UpdateEmployeeDTO
from modules.employees.exceptions import EmployeeNotFound
from modules.employees.models import Employee
from modules.employees.repositories.django_repository import EmployeeDjangoRepository
from modules.employees.services import EmployeeService
from modules.orders.constants import OrderStatus
from modules.orders.dtos import PlaceOrderDTO, PlaceOrderItemDTO
from modules.orders.models import Order

pytestmark = pytest.mark.unit


@pytest.fixture()
def service():
    return EmployeeService(EmployeeDjangoRepository())


@pytest.fixture()
def assigned_orders(order_service, customer, employee, make_stone):
    stone = make_stone(stock=50)
    orders = []
    for _ in range(3):
        order = order_service.place_order(
            PlaceOrderDTO(
                customer_id=customer.id,
                items=[PlaceOrderItemDTO(stone_id=stone.id, quantity=1)],
                employee_id=employee.id,
            )
        )
        orders.append(order)
    order_service.transition(orders[1].id, OrderStatus.PROCESSING)
    order_service.transition(orders[1].id, OrderStatus.COMPLETED)
    return orders


class TestCreateEmployee:
    @freeze_time("2026-03-02")
    def test_hire_date_defaults_to_today(self, service):
        employee = service.create_employee(
            CreateEmployeeDTO(first_name="Paula", salary=Decimal("3500.00"))
        )

        assert employee.hire_date == date(2026, 3, 2)
        assert employee.salary == Decimal("3500.00")

    def test_negative_salary_rejected(self):
        with pytest.raises(ValidationError):
            CreateEmployeeDTO(first_name="Paula", salary=Decimal("-1"))


class TestUpdateEmployee:
    def test_only_supplied_fields_change(self, service, employee):
        updated = service.update_employee(
            employee.id, UpdateEmployeeDTO(phone="+55 11 5555-0101", salary=Decimal("4200.00"))
        )

        assert updated.phone == "+55 11 5555-0101"
        assert updated.salary == Decimal("4200.00")
        employee.refresh_from_db()
        assert (employee.first_name, employee.last_name) == ("Marcos", "Pereira")
        assert employee.salary == Decimal("4200.00")

    def test_blank_first_name_rejected(self):
        with pytest.raises(ValidationError):
            UpdateEmployeeDTO(first_name="   ")

    def test_salary_must_fit_the_salary_column(self):
        with pytest.raises(ValidationError):
            UpdateEmployeeDTO(salary=Decimal("123456789012.00"))

    def test_unknown_employee(self, service):
        with pytest.raises(EmployeeNotFound):
            service.update_employee(424242, UpdateEmployeeDTO(phone="1"))


class TestDeleteEmployee:
    def test_unassigns_every_order(self, service, employee, assigned_orders):
        unassigned = service.delete_employee(employee.id)

        assert unassigned == 3
        assert not Employee.objects.filter(id=employee.id).exists()
        assert set(
            Order.objects.filter(id__in=[o.id for o in assigned_orders]).values_list(
                "employee_id", flat=True
            )
        ) == {None}

    def test_orders_keep_their_status(self, service, employee, assigned_orders):
        service.delete_employee(employee.id)

        statuses = sorted(Order.objects.values_list("status", flat=True))
        assert statuses == [OrderStatus.COMPLETED, OrderStatus.PENDING, OrderStatus.PENDING]

    def test_unknown_employee(self, service):
        with pytest.raises(EmployeeNotFound):
            service.delete_employee(424242)


class TestEmployeeQueries:
    def test_list_orders(self, service, employee, assigned_orders):
        assert {o.id for o in service.list_orders(employee.id)} == {
            o.id for o in assigned_orders
        }

    def test_list_orders_unknown_employee(self, service):
        with pytest.raises(EmployeeNotFound):
            service.list_orders(424242)

    def test_get_employee(self, service, employee):
        assert service.get_employee(employee.id).full_name == "Marcos Pereira"
