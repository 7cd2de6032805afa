"""Custom order service layer (Use Cases).

A custom order is a request for a stone the catalog does not carry as
such.  Staff either reject it or convert it into a real order; both
decisions are final.

Conversion is a single unit of work: creating the order, reserving
stock (when staff price it against a catalog stone), creating the line
item and marking the request Converted either all happen or none do.
"""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING, List, Optional

import structlog
from django.db import transaction

from modules.custom_orders.constants import CustomOrderStatus
from modules.custom_orders.events import CustomOrderConverted, CustomOrderRejected
from modules.custom_orders.exceptions import AlreadyConverted, CustomOrderNotFound
from modules.customers.exceptions import CustomerNotFound
from modules.orders.constants import MAX_ORDER_AMOUNT, OrderStatus
from modules.orders.events import OrderPlaced
from modules.orders.exceptions import AmountOutOfRange
from modules.stones.exceptions import StoneNotFound
from shared.infrastructure.bus import publish_on_commit

if TYPE_CHECKING:
    from modules.custom_orders.dtos import ConvertCustomOrderDTO, SubmitCustomOrderDTO
    from modules.custom_orders.models import CustomOrder
    from modules.custom_orders.repositories.interfaces import ICustomOrderRepository
    from modules.customers.repositories.interfaces import ICustomerRepository
    from modules.orders.models import Order
    from modules.orders.repositories.interfaces import IOrderRepository
    from modules.stones.ledger import InventoryLedger
    from modules.stones.repositories.interfaces import IStoneRepository
    from shared.domain.bus import IEventBus

logger = structlog.get_logger(__name__)


class CustomOrderService:
    """Application service for custom order use-cases.

    Receives repositories, the inventory ledger and an optional event bus
    via constructor injection (DIP).
    """

    def __init__(
        self,
        custom_order_repository: ICustomOrderRepository,
        order_repository: IOrderRepository,
        customer_repository: ICustomerRepository,
        stone_repository: IStoneRepository,
        ledger: InventoryLedger,
        event_bus: Optional[IEventBus] = None,
    ) -> None:
        self._custom_repo = custom_order_repository
        self._order_repo = order_repository
        self._customer_repo = customer_repository
        self._stone_repo = stone_repository
        self._ledger = ledger
        self._event_bus = event_bus

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def submit(self, dto: SubmitCustomOrderDTO) -> CustomOrder:
        """Record a new Pending request.

        Raises:
            CustomerNotFound: the customer does not exist.
        """
        if not self._customer_repo.get_by_id(dto.customer_id):
            raise CustomerNotFound(f"Customer {dto.customer_id} not found.")

        custom_order = self._custom_repo.create(dto.model_dump())
        logger.info(
            "custom_order.submitted",
            custom_order_id=custom_order.id,
            customer_id=dto.customer_id,
        )
        return custom_order

    @transaction.atomic
    def convert(
        self,
        custom_order_id: int,
        pricing: Optional[ConvertCustomOrderDTO] = None,
    ) -> Order:
        """Turn a Pending request into a Pending order for the same customer.

        Without *pricing* the order is created with a zero total and no
        line items, to be priced later by staff.  With *pricing* the
        requested quantity of ``pricing.stone_id`` is reserved and one
        line item is created at ``pricing.unit_price`` (or the stone's
        catalog price).

        Raises:
            CustomOrderNotFound: the request does not exist.
            AlreadyConverted: the request is not Pending.
            StoneNotFound: the pricing stone does not exist.
            AmountOutOfRange: the priced total is too large to store.
            InsufficientStock: not enough stock for the requested quantity.
        """
        custom_order = self._lock_pending(custom_order_id)
        log = logger.bind(custom_order_id=custom_order_id)

        order = self._order_repo.create(
            {
                "customer_id": custom_order.customer_id,
                "status": OrderStatus.PENDING,
                "notes": f"Converted from custom order #{custom_order.id}",
            }
        )

        priced = pricing is not None and pricing.is_priced
        if priced:
            stone = self._stone_repo.get_by_id(pricing.stone_id)
            if not stone:
                raise StoneNotFound(f"Stone {pricing.stone_id} not found.")
            unit_price = (
                pricing.unit_price if pricing.unit_price is not None else stone.unit_price
            )
            subtotal = custom_order.requested_quantity * unit_price
            if subtotal > MAX_ORDER_AMOUNT:
                log.warning("custom_order.amount_out_of_range", total=str(subtotal))
                raise AmountOutOfRange(subtotal)
            self._ledger.reserve(stone.id, custom_order.requested_quantity)
            item = self._order_repo.add_item(
                order, stone.id, custom_order.requested_quantity, unit_price
            )
            self._order_repo.update_total(order, item.subtotal)
        else:
            self._order_repo.update_total(order, Decimal("0.00"))

        self._order_repo.add_history(
            order_id=order.id,
            status=OrderStatus.PENDING,
            notes=f"Created from custom order #{custom_order.id}",
        )
        self._custom_repo.mark_converted(custom_order, order)

        order.add_domain_event(OrderPlaced(aggregate_id=order.id, status=order.status))
        custom_order.add_domain_event(
            CustomOrderConverted(aggregate_id=custom_order.id, order_id=order.id)
        )
        publish_on_commit(self._event_bus, order)
        publish_on_commit(self._event_bus, custom_order)

        log.info(
            "custom_order.converted",
            order_id=order.id,
            priced=priced,
            total=str(order.total_amount),
        )
        return self._order_repo.get_by_id(order.id) or order

    @transaction.atomic
    def reject(self, custom_order_id: int) -> CustomOrder:
        """Decline a Pending request.  No other entity is touched.

        Raises:
            CustomOrderNotFound: the request does not exist.
            AlreadyConverted: the request is not Pending.
        """
        custom_order = self._lock_pending(custom_order_id)
        self._custom_repo.update_status(custom_order, CustomOrderStatus.REJECTED)

        custom_order.add_domain_event(CustomOrderRejected(aggregate_id=custom_order.id))
        publish_on_commit(self._event_bus, custom_order)

        logger.info("custom_order.rejected", custom_order_id=custom_order_id)
        return custom_order

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_custom_order(self, custom_order_id: int) -> CustomOrder:
        custom_order = self._custom_repo.get_by_id(custom_order_id)
        if not custom_order:
            raise CustomOrderNotFound(f"Custom order {custom_order_id} not found.")
        return custom_order

    def list_custom_orders(
        self,
        customer_id: Optional[int] = None,
        status: Optional[str] = None,
    ) -> List[CustomOrder]:
        filters = {}
        if customer_id is not None:
            filters["customer_id"] = customer_id
        if status is not None:
            filters["status"] = status
        return self._custom_repo.list(filters or None)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _lock_pending(self, custom_order_id: int) -> CustomOrder:
        custom_order = self._custom_repo.get_for_update(custom_order_id)
        if not custom_order:
            raise CustomOrderNotFound(f"Custom order {custom_order_id} not found.")
        if custom_order.status != CustomOrderStatus.PENDING:
            logger.warning(
                "custom_order.already_decided",
                custom_order_id=custom_order_id,
                status=custom_order.status,
            )
            raise AlreadyConverted(custom_order.id, custom_order.status)
        return custom_order
