"""Django ORM implementation of the Stone repository.

Satisfies ``IStoneRepository`` using Django's QuerySet API.
``update_stock`` is a single ``UPDATE ... WHERE quantity_in_stock >= ?``
statement built with ``F()`` expressions, so two concurrent reservations
of the last units can never both match.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import structlog
from django.db import transaction
from django.db.models import F
from django.utils import timezone

from modules.stones.models import Stone
from modules.stones.repositories.interfaces import IStoneRepository

logger = structlog.get_logger(__name__)


class StoneDjangoRepository(IStoneRepository):
    """Concrete Stone repository backed by Django ORM."""

    def get_by_id(self, id: int) -> Optional[Stone]:
        """Retrieve a stone by primary key.

        Returns ``None`` for non-existent or invalid IDs.
        """
        try:
            return Stone.objects.filter(id=id).first()
        except (TypeError, ValueError):
            return None

    def exists(self, id: int) -> bool:
        return Stone.objects.filter(id=id).exists()

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Stone]:
        """List stones with optional Django ORM look-ups.

        Examples of valid filters::

            {"quantity_in_stock__gt": 0}
            {"name__icontains": "marble"}
        """
        queryset = Stone.objects.all()
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset)

    @transaction.atomic
    def save(self, entity: Stone) -> Stone:
        """Persist (create or update) a stone."""
        entity.save()
        logger.info("stone.saved", stone_id=entity.id)
        return entity

    @transaction.atomic
    def delete(self, id: int) -> bool:
        deleted, _ = Stone.objects.filter(id=id).delete()
        if deleted:
            logger.info("stone.deleted", stone_id=id)
        return deleted > 0

    # ------------------------------------------------------------------
    # Stock primitives
    # ------------------------------------------------------------------

    def update_stock(self, id: int, delta: int) -> bool:
        queryset = Stone.objects.filter(id=id)
        if delta < 0:
            queryset = queryset.filter(quantity_in_stock__gte=-delta)
        updated = queryset.update(
            quantity_in_stock=F("quantity_in_stock") + delta,
            updated_at=timezone.now(),
        )
        return updated > 0

    def get_stock(self, id: int) -> Optional[int]:
        return (
            Stone.objects.filter(id=id)
            .values_list("quantity_in_stock", flat=True)
            .first()
        )

    def detach_from_order_items(self, id: int) -> int:
        from modules.orders.models import OrderItem

        detached = OrderItem.objects.filter(stone_id=id).update(stone=None)
        logger.info("stone.detached_from_order_items", stone_id=id, count=detached)
        return detached
