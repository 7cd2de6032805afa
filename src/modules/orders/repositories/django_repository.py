"""Django ORM implementation of the Order repository.

Satisfies ``IOrderRepository`` using Django's QuerySet API.  The
repository does not open its own transactions for multi-row work: the
Service Layer owns the unit-of-work boundary and every call here runs
inside it.

Concurrency control on status and assignment updates uses
``select_for_update()``; the service re-validates against the locked row.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, List, Optional

import structlog
from django.db import transaction
from django.db.models import Count, Q, Sum

from modules.orders.constants import OrderStatus
from modules.orders.models import Order, OrderItem, OrderStatusHistory
from modules.orders.repositories.interfaces import IOrderRepository

logger = structlog.get_logger(__name__)


class OrderDjangoRepository(IOrderRepository):
    """Concrete Order repository backed by Django ORM."""

    # ------------------------------------------------------------------
    # Create (aggregate root + children)
    # ------------------------------------------------------------------

    def create(self, data: Dict[str, Any]) -> Order:
        order = Order(
            customer_id=data["customer_id"],
            employee_id=data.get("employee_id"),
            status=data["status"],
            notes=data.get("notes", ""),
            total_amount=data.get("total_amount", Decimal("0.00")),
        )
        order.save()
        logger.info("order.row_created", order_id=order.id, status=order.status)
        return order

    def add_item(
        self, order: Order, stone_id: int, quantity: int, unit_price: Decimal
    ) -> OrderItem:
        item = OrderItem(
            order=order,
            stone_id=stone_id,
            quantity=quantity,
            unit_price=unit_price,
        )
        item.save()
        return item

    # ------------------------------------------------------------------
    # Update
    # ------------------------------------------------------------------

    def update_status(self, order: Order, status: str) -> Order:
        order.status = status
        order.save(update_fields=["status"])
        return order

    def update_employee(self, order: Order, employee_id: Optional[int]) -> Order:
        order.employee_id = employee_id
        order.save(update_fields=["employee"])
        return order

    def update_total(self, order: Order, total: Decimal) -> Order:
        order.total_amount = total
        order.save(update_fields=["total_amount"])
        return order

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def get_by_id(self, id: int) -> Optional[Order]:
        """Retrieve an order with eager-loaded relations.

        Uses ``select_related`` for the customer / employee FKs and
        ``prefetch_related`` for items, items->stone and status history.

        Returns ``None`` for non-existent or invalid IDs.
        """
        try:
            return (
                Order.objects.select_related("customer", "employee")
                .prefetch_related("items__stone", "status_history")
                .filter(id=id)
                .first()
            )
        except (TypeError, ValueError):
            return None

    def get_for_update(self, id: int) -> Optional[Order]:
        """Retrieve an order with a row-level lock (SELECT FOR UPDATE).

        Only the order row is locked (``of=("self",)``); the nullable
        employee join is not part of the locked set.
        """
        try:
            return (
                Order.objects.select_for_update(of=("self",))
                .select_related("customer")
                .filter(id=id)
                .first()
            )
        except (TypeError, ValueError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Order]:
        """List orders with optional filters and eager-loaded relations.

        Supported filter keys are any Django look-ups on ``Order``, e.g.
        ``status``, ``customer_id``, ``employee_id``, ``order_date__range``.
        """
        queryset = self._base_queryset()
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset)

    def list_by_statuses(
        self, statuses: set[str], exclude: bool = False
    ) -> List[Order]:
        queryset = self._base_queryset()
        if exclude:
            queryset = queryset.exclude(status__in=statuses)
        else:
            queryset = queryset.filter(status__in=statuses)
        return list(queryset)

    def summary(self) -> Dict[str, Any]:
        return Order.objects.aggregate(
            total_orders=Count("id"),
            pending_orders=Count("id", filter=Q(status=OrderStatus.PENDING)),
            processing_orders=Count("id", filter=Q(status=OrderStatus.PROCESSING)),
            completed_orders=Count("id", filter=Q(status=OrderStatus.COMPLETED)),
            cancelled_orders=Count("id", filter=Q(status=OrderStatus.CANCELLED)),
            revenue=Sum("total_amount", filter=Q(status=OrderStatus.COMPLETED)),
        )

    # ------------------------------------------------------------------
    # Save / Delete (IRepository contract)
    # ------------------------------------------------------------------

    @transaction.atomic
    def save(self, entity: Order) -> Order:
        """Persist (create or update) an order."""
        entity.save()
        return entity

    @transaction.atomic
    def delete(self, id: int) -> bool:
        """Hard-delete an order and its items (administrative use only)."""
        deleted, _ = Order.objects.filter(id=id).delete()
        if deleted:
            logger.info("order.deleted", order_id=id)
        return deleted > 0

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------

    def add_history(
        self,
        order_id: int,
        status: str,
        notes: str = "",
        old_status: Optional[str] = None,
    ) -> OrderStatusHistory:
        history = OrderStatusHistory(
            order_id=order_id,
            old_status=old_status,
            new_status=status,
            notes=notes,
        )
        history.save()

        logger.info(
            "order.history_added",
            order_id=order_id,
            old_status=old_status,
            new_status=status,
        )
        return history

    @staticmethod
    def _base_queryset():
        return Order.objects.select_related("customer", "employee").prefetch_related(
            "items__stone", "status_history"
        )
