"""Django ORM implementation of the CustomOrder repository."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import structlog
from django.db import transaction

from modules.custom_orders.constants import CustomOrderStatus
from modules.custom_orders.models import CustomOrder
from modules.custom_orders.repositories.interfaces import ICustomOrderRepository
from modules.orders.models import Order

logger = structlog.get_logger(__name__)


class CustomOrderDjangoRepository(ICustomOrderRepository):
    """Concrete CustomOrder repository backed by Django ORM."""

    def create(self, data: Dict[str, Any]) -> CustomOrder:
        custom_order = CustomOrder(
            customer_id=data["customer_id"],
            stone_type=data["stone_type"],
            stone_description=data.get("stone_description", ""),
            size=data.get("size", ""),
            requested_quantity=data.get("requested_quantity", 1),
        )
        custom_order.save()
        return custom_order

    def get_by_id(self, id: int) -> Optional[CustomOrder]:
        try:
            return (
                CustomOrder.objects.select_related("customer", "order")
                .filter(id=id)
                .first()
            )
        except (TypeError, ValueError):
            return None

    def get_for_update(self, id: int) -> Optional[CustomOrder]:
        try:
            return CustomOrder.objects.select_for_update().filter(id=id).first()
        except (TypeError, ValueError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[CustomOrder]:
        queryset = CustomOrder.objects.select_related("customer", "order")
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset)

    def mark_converted(self, custom_order: CustomOrder, order: Order) -> CustomOrder:
        custom_order.status = CustomOrderStatus.CONVERTED
        custom_order.order = order
        custom_order.save(update_fields=["status", "order"])
        logger.info(
            "custom_order.linked",
            custom_order_id=custom_order.id,
            order_id=order.id,
        )
        return custom_order

    def update_status(self, custom_order: CustomOrder, status: str) -> CustomOrder:
        custom_order.status = status
        custom_order.save(update_fields=["status"])
        return custom_order

    @transaction.atomic
    def save(self, entity: CustomOrder) -> CustomOrder:
        entity.save()
        return entity

    @transaction.atomic
    def delete(self, id: int) -> bool:
        deleted, _ = CustomOrder.objects.filter(id=id).delete()
        return deleted > 0
