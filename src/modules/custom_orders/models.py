"""CustomOrder model: a customer's request for a stone not in the catalog.

Business rules implemented:
- A request is decided exactly once: Pending -> Converted or Pending ->
  Rejected.
- A converted request points at exactly one Order and an Order is the
  conversion of at most one request (``OneToOneField``).
"""

from __future__ import annotations

from django.core.validators import MinValueValidator
from django.db import models

from modules.core.models import BaseModel
from modules.custom_orders.constants import CustomOrderStatus
from shared.domain.events import DomainEventMixin


class CustomOrder(DomainEventMixin, BaseModel):
    """Custom order request aggregate root."""

    customer: models.ForeignKey = models.ForeignKey(
        "customers.Customer",
        on_delete=models.PROTECT,
        related_name="custom_orders",
    )
    stone_type: models.CharField = models.CharField(max_length=100)
    stone_description: models.TextField = models.TextField(blank=True, default="")
    size: models.CharField = models.CharField(max_length=100, blank=True, default="")
    requested_quantity: models.PositiveIntegerField = models.PositiveIntegerField(
        default=1,
        validators=[MinValueValidator(1)],
    )
    status: models.CharField = models.CharField(
        max_length=20,
        choices=CustomOrderStatus.choices,
        default=CustomOrderStatus.PENDING,
    )
    order: models.OneToOneField = models.OneToOneField(
        "orders.Order",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="custom_order",
    )

    class Meta:
        db_table = "custom_orders"
        ordering = ["-created_at", "-id"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(requested_quantity__gte=1),
                name="custom_orders_quantity_positive",
            ),
            models.CheckConstraint(
                condition=models.Q(status__in=CustomOrderStatus.values),
                name="custom_orders_status_valid",
            ),
            models.CheckConstraint(
                condition=(
                    models.Q(status=CustomOrderStatus.CONVERTED, order__isnull=False)
                    | (
                        ~models.Q(status=CustomOrderStatus.CONVERTED)
                        & models.Q(order__isnull=True)
                    )
                ),
                name="custom_orders_converted_has_order",
            ),
        ]

    def __str__(self) -> str:
        return f"Custom order #{self.pk} {self.stone_type} x{self.requested_quantity}"
