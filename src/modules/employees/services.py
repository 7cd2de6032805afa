"""Employee service layer (Use Cases)."""

from __future__ import annotations

from typing import TYPE_CHECKING, List

import structlog
from django.db import transaction
from django.utils import timezone

from modules.employees.exceptions import EmployeeNotFound
from modules.employees.models import Employee

if TYPE_CHECKING:
    from modules.employees.dtos import CreateEmployeeDTO, UpdateEmployeeDTO
    from modules.employees.repositories.interfaces import IEmployeeRepository
    from modules.orders.models import Order

logger = structlog.get_logger(__name__)


class EmployeeService:
    """Application service for Employee use-cases.

    Receives an ``IEmployeeRepository`` via constructor injection (DIP).
    """

    def __init__(self, repository: IEmployeeRepository) -> None:
        self._repo = repository

    @transaction.atomic
    def create_employee(self, dto: CreateEmployeeDTO) -> Employee:
        employee = Employee(
            first_name=dto.first_name,
            last_name=dto.last_name,
            phone=dto.phone,
            address=dto.address,
            salary=dto.salary,
            hire_date=dto.hire_date or timezone.localdate(),
        )
        employee = self._repo.save(employee)
        logger.info("employee.created", employee_id=employee.id)
        return employee

    @transaction.atomic
    def update_employee(self, id: int, dto: UpdateEmployeeDTO) -> Employee:
        """Edit an employee's profile with the supplied fields.

        Raises:
            EmployeeNotFound: if the employee does not exist.
        """
        employee = self.get_employee(id)
        changed = dto.model_dump(exclude_none=True)
        for field, value in changed.items():
            setattr(employee, field, value)
        employee = self._repo.save(employee)
        logger.info("employee.updated", employee_id=id, fields=sorted(changed))
        return employee

    @transaction.atomic
    def delete_employee(self, id: int) -> int:
        """Remove an employee, unassigning every order they held.

        The orders themselves are untouched apart from the cleared
        assignment, whatever their status.  Returns the number of orders
        unassigned.

        Raises:
            EmployeeNotFound: if the employee does not exist.
        """
        if not self._repo.exists(id):
            raise EmployeeNotFound(f"Employee {id} not found.")
        unassigned = self._repo.unassign_orders(id)
        self._repo.delete(id)
        logger.info("employee.deleted", employee_id=id, unassigned_orders=unassigned)
        return unassigned

    def get_employee(self, id: int) -> Employee:
        """Raises ``EmployeeNotFound`` if the employee does not exist."""
        employee = self._repo.get_by_id(id)
        if not employee:
            raise EmployeeNotFound(f"Employee {id} not found.")
        return employee

    def list_employees(self) -> List[Employee]:
        return self._repo.list()

    def list_orders(self, id: int) -> List[Order]:
        """Orders currently assigned to the employee, archived ones included."""
        if not self._repo.exists(id):
            raise EmployeeNotFound(f"Employee {id} not found.")
        return self._repo.list_orders(id)
