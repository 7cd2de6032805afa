"""Stone catalog service layer (Use Cases).

Orchestrates catalog management for the Stone aggregate, delegating
persistence to the injected ``IStoneRepository``.  Stock movements caused
by orders do not go through here: they belong to ``InventoryLedger``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List

import structlog
from django.db import transaction

from modules.stones.exceptions import StoneNotFound
from modules.stones.models import Stone

if TYPE_CHECKING:
    from modules.stones.dtos import CreateStoneDTO, UpdateStoneDTO
    from modules.stones.repositories.interfaces import IStoneRepository

logger = structlog.get_logger(__name__)


class StoneService:
    """Application service for catalog use-cases.

    Receives an ``IStoneRepository`` via constructor injection (DIP).
    """

    def __init__(self, repository: IStoneRepository) -> None:
        self._repo = repository

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def create_stone(self, dto: CreateStoneDTO) -> Stone:
        stone = Stone(
            name=dto.name,
            stone_type=dto.stone_type,
            size=dto.size,
            unit_price=dto.unit_price,
            quantity_in_stock=dto.quantity_in_stock,
        )
        stone = self._repo.save(stone)
        logger.info("stone.created", stone_id=stone.id)
        return stone

    @transaction.atomic
    def update_stone(self, id: int, dto: UpdateStoneDTO) -> Stone:
        """Update an existing stone with the supplied fields.

        Raises:
            StoneNotFound: if the stone does not exist.
        """
        stone = self.get_stone(id)

        for field in ("name", "stone_type", "size", "unit_price", "quantity_in_stock"):
            value = getattr(dto, field)
            if value is not None:
                setattr(stone, field, value)

        stone = self._repo.save(stone)
        logger.info("stone.updated", stone_id=id)
        return stone

    @transaction.atomic
    def delete_stone(self, id: int) -> int:
        """Delete a stone after detaching it from every order line item.

        Line items keep their quantity and price snapshot; only the stone
        reference is cleared.  Returns the number of line items detached.

        Raises:
            StoneNotFound: if the stone does not exist.
        """
        if not self._repo.exists(id):
            raise StoneNotFound(f"Stone {id} not found.")
        detached = self._repo.detach_from_order_items(id)
        self._repo.delete(id)
        logger.info("stone.deleted", stone_id=id, detached_items=detached)
        return detached

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_stone(self, id: int) -> Stone:
        """Retrieve a single stone by ID.

        Raises:
            StoneNotFound: if the stone does not exist.
        """
        stone = self._repo.get_by_id(id)
        if not stone:
            raise StoneNotFound(f"Stone {id} not found.")
        return stone

    def list_stones(self, in_stock_only: bool = False) -> List[Stone]:
        filters = {"quantity_in_stock__gt": 0} if in_stock_only else None
        return self._repo.list(filters)
