"""Django ORM implementation of the Employee repository."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import structlog
from django.db import transaction
from django.utils import timezone

from modules.employees.models import Employee
from modules.employees.repositories.interfaces import IEmployeeRepository

logger = structlog.get_logger(__name__)


class EmployeeDjangoRepository(IEmployeeRepository):
    """Concrete Employee repository backed by Django ORM."""

    def get_by_id(self, id: int) -> Optional[Employee]:
        try:
            return Employee.objects.filter(id=id).first()
        except (TypeError, ValueError):
            return None

    def exists(self, id: int) -> bool:
        try:
            return Employee.objects.filter(id=id).exists()
        except (TypeError, ValueError):
            return False

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Employee]:
        queryset = Employee.objects.all()
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset)

    @transaction.atomic
    def save(self, entity: Employee) -> Employee:
        entity.save()
        logger.info("employee.saved", employee_id=entity.id)
        return entity

    @transaction.atomic
    def delete(self, id: int) -> bool:
        deleted, _ = Employee.objects.filter(id=id).delete()
        return deleted > 0

    def unassign_orders(self, id: int) -> int:
        from modules.orders.models import Order

        return Order.objects.filter(employee_id=id).update(
            employee=None, updated_at=timezone.now()
        )

    def list_orders(self, id: int) -> List[Any]:
        from modules.orders.models import Order

        return list(
            Order.objects.select_related("customer")
            .prefetch_related("items__stone")
            .filter(employee_id=id)
        )
