"""Stone model: catalog item with stock control.

Business rules implemented:
- Unit price is a non-negative decimal.
- Quantity in stock can never be negative: a ``CheckConstraint`` guards the
  column and ``InventoryLedger.reserve`` refuses (never clamps) a decrement
  that would cross zero.
- Order line items keep pointing at a stone only while it exists; deleting
  a stone sets their ``stone`` to NULL (see ``StoneService.delete_stone``).
"""

from __future__ import annotations

from decimal import Decimal

import structlog
from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models

from modules.core.models import BaseModel

logger = structlog.get_logger(__name__)


class Stone(BaseModel):
    """Stone catalog entry."""

    name = models.CharField(max_length=255)
    stone_type = models.CharField(max_length=100, blank=True, default="")
    size = models.CharField(max_length=100, blank=True, default="")
    unit_price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
    )
    quantity_in_stock = models.PositiveIntegerField(default=0)

    class Meta:
        db_table = "stones"
        ordering = ["name"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(unit_price__gte=0),
                name="stones_unit_price_non_negative",
            ),
            models.CheckConstraint(
                condition=models.Q(quantity_in_stock__gte=0),
                name="stones_quantity_non_negative",
            ),
        ]

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def clean(self) -> None:
        super().clean()
        if self.unit_price is not None and self.unit_price < 0:
            raise ValidationError({"unit_price": "Unit price cannot be negative."})
        if self.quantity_in_stock is not None and self.quantity_in_stock < 0:
            raise ValidationError(
                {"quantity_in_stock": "Quantity in stock cannot be negative."}
            )

    @property
    def in_stock(self) -> bool:
        return self.quantity_in_stock > 0

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def save(self, *args, **kwargs) -> None:
        is_new = self._state.adding
        super().save(*args, **kwargs)
        if is_new:
            logger.info("stone.row_created", stone_id=self.id, name=self.name)

    def __str__(self) -> str:
        return f"{self.name} ({self.size})" if self.size else self.name
