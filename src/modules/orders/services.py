"""Order service layer (Use Cases).

Orchestrates the order lifecycle: placement, status transitions,
cancellation with restock, employee assignment and the active / archived
views.  All write operations are atomic; the service defines the
unit-of-work boundary and every exception raised inside it rolls the
whole operation back before it reaches the caller.

Business rules enforced:
- Stock moves only through ``InventoryLedger`` (never below zero).
- Transitions are validated by ``check_transition`` against the status
  stored on the locked row, not the caller's copy.
- Cancelling releases every line item's stock in the same transaction.
- Customers may cancel only their own orders, and only while Pending.
- Completed orders are read-only: no status change, no reassignment.
- History is recorded on every status change.
"""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING, Any, Dict, List, Optional

import structlog
from django.db import transaction

from modules.customers.exceptions import CustomerNotFound
from modules.employees.exceptions import EmployeeNotFound
from modules.orders.constants import ARCHIVED_STATES, MAX_ORDER_AMOUNT, OrderStatus
from modules.orders.dtos import OrderSummaryDTO
from modules.orders.events import (
    EmployeeAssigned,
    OrderCancelled,
    OrderCompleted,
    OrderPlaced,
    OrderStatusChanged,
)
from modules.orders.exceptions import (
    AmountOutOfRange,
    CancellationWindowClosed,
    OrderNotFound,
    OrderNotOwned,
    OrderReadOnly,
)
from modules.orders.state_machine import check_transition
from modules.stones.exceptions import StoneNotFound
from shared.domain.exceptions import DomainError
from shared.infrastructure.bus import publish_on_commit

if TYPE_CHECKING:
    from modules.customers.repositories.interfaces import ICustomerRepository
    from modules.employees.repositories.interfaces import IEmployeeRepository
    from modules.orders.dtos import PlaceOrderDTO
    from modules.orders.models import Order
    from modules.orders.repositories.interfaces import IOrderRepository
    from modules.stones.ledger import InventoryLedger
    from modules.stones.repositories.interfaces import IStoneRepository
    from shared.domain.bus import IEventBus

logger = structlog.get_logger(__name__)


class OrderService:
    """Application service for Order use-cases.

    Receives repositories, the inventory ledger and an optional event bus
    via constructor injection (DIP).  Without a bus, domain events are
    dropped after commit.
    """

    def __init__(
        self,
        order_repository: IOrderRepository,
        customer_repository: ICustomerRepository,
        employee_repository: IEmployeeRepository,
        stone_repository: IStoneRepository,
        ledger: InventoryLedger,
        event_bus: Optional[IEventBus] = None,
    ) -> None:
        self._order_repo = order_repository
        self._customer_repo = customer_repository
        self._employee_repo = employee_repository
        self._stone_repo = stone_repository
        self._ledger = ledger
        self._event_bus = event_bus

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def place_order(self, dto: PlaceOrderDTO) -> Order:
        """Place an order, reserving stock for every line.

        Steps:
        1. Validate the customer (and employee, when given) exist.
        2. For each item, sorted by stone id to avoid deadlocks:
           - snapshot the current catalog price;
           - reserve the quantity through the ledger.
        3. Persist order + items; record the initial history entry.

        Self-checkout purchases are recorded as Completed, staff-entered
        orders start Pending.

        Raises:
            CustomerNotFound: customer does not exist.
            EmployeeNotFound: the given employee does not exist.
            StoneNotFound: a stone does not exist.
            InsufficientStock: not enough stock for a line; no stock
                reserved by earlier lines survives.
            AmountOutOfRange: the order total is too large to store.
        """
        log = logger.bind(customer_id=dto.customer_id, self_checkout=dto.self_checkout)
        log.info("order.placement_started")

        if not self._customer_repo.get_by_id(dto.customer_id):
            raise CustomerNotFound(f"Customer {dto.customer_id} not found.")
        if dto.employee_id is not None and not self._employee_repo.exists(
            dto.employee_id
        ):
            raise EmployeeNotFound(f"Employee {dto.employee_id} not found.")

        status = OrderStatus.COMPLETED if dto.self_checkout else OrderStatus.PENDING

        lines = []
        for item_dto in sorted(dto.items, key=lambda i: i.stone_id):
            stone = self._stone_repo.get_by_id(item_dto.stone_id)
            if not stone:
                raise StoneNotFound(f"Stone {item_dto.stone_id} not found.")
            self._ledger.reserve(stone.id, item_dto.quantity)
            lines.append((stone.id, item_dto.quantity, stone.unit_price))

        expected_total = sum(
            (quantity * unit_price for _, quantity, unit_price in lines), Decimal("0.00")
        )
        if expected_total > MAX_ORDER_AMOUNT:
            log.warning("order.amount_out_of_range", total=str(expected_total))
            raise AmountOutOfRange(expected_total)

        order = self._order_repo.create(
            {
                "customer_id": dto.customer_id,
                "employee_id": dto.employee_id,
                "status": status,
                "notes": dto.notes,
            }
        )
        total = Decimal("0.00")
        for stone_id, quantity, unit_price in lines:
            item = self._order_repo.add_item(order, stone_id, quantity, unit_price)
            total += item.subtotal
        self._order_repo.update_total(order, total)

        self._order_repo.add_history(
            order_id=order.id,
            status=status,
            notes="Order placed",
        )

        order.add_domain_event(OrderPlaced(aggregate_id=order.id, status=status))
        if status == OrderStatus.COMPLETED:
            order.add_domain_event(OrderCompleted(aggregate_id=order.id))
        publish_on_commit(self._event_bus, order)

        log.info("order.placed", order_id=order.id, status=status, total=str(total))
        return self._order_repo.get_by_id(order.id) or order

    @transaction.atomic
    def transition(self, order_id: int, new_status: str, notes: str = "") -> Order:
        """Move an order to *new_status*.

        Acquires a row-level lock (``SELECT FOR UPDATE``) on the order
        before validating, so two concurrent requests serialise and the
        second one is judged against the status the first one wrote.

        Moving to Cancelled releases the stock of every line item whose
        stone still exists.  Moving to Completed does not touch inventory.

        Raises:
            OrderNotFound: order does not exist.
            OrderReadOnly: the order is Completed.
            NoChange: *new_status* is the current status.
            InvalidTransition: the edge is not allowed.
        """
        order = self._order_repo.get_for_update(order_id)
        if not order:
            raise OrderNotFound(f"Order {order_id} not found.")
        return self._apply_transition(order, new_status, notes)

    def cancel_order(self, order_id: int, notes: str = "") -> Order:
        """Cancel an order and release its reserved stock."""
        return self.transition(
            order_id, OrderStatus.CANCELLED, notes=notes or "Order cancelled"
        )

    @transaction.atomic
    def cancel_customer_order(
        self, order_id: int, customer_id: int, notes: str = ""
    ) -> Order:
        """Cancel an order on behalf of the customer who placed it.

        Customers can only withdraw their own orders, and only while they
        are still Pending; once staff start processing, cancelling is a
        staff decision (``cancel_order``).

        Raises:
            OrderNotFound: order does not exist.
            OrderNotOwned: the order belongs to another customer.
            OrderReadOnly: the order is Completed.
            NoChange: the order is already Cancelled.
            CancellationWindowClosed: the order is Processing.
        """
        order = self._order_repo.get_for_update(order_id)
        if not order:
            raise OrderNotFound(f"Order {order_id} not found.")
        if order.customer_id != customer_id:
            logger.warning(
                "order.cancellation_refused",
                order_id=order_id,
                customer_id=customer_id,
                reason="not_owner",
            )
            raise OrderNotOwned(
                f"Order {order_id} does not belong to customer {customer_id}."
            )
        if order.status == OrderStatus.PROCESSING:
            logger.warning(
                "order.cancellation_refused",
                order_id=order_id,
                customer_id=customer_id,
                reason="processing",
            )
            raise CancellationWindowClosed(order.status)
        return self._apply_transition(
            order, OrderStatus.CANCELLED, notes or "Cancelled by customer"
        )

    @transaction.atomic
    def assign_employee(self, order_id: int, employee_id: int) -> Order:
        """Assign (or reassign) an employee to an order.

        Allowed for every status except Completed; status and stock are
        not touched.

        Raises:
            OrderNotFound: order does not exist.
            EmployeeNotFound: employee does not exist.
            OrderReadOnly: the order is Completed.
        """
        order = self._lock_mutable(order_id)
        if not self._employee_repo.exists(employee_id):
            raise EmployeeNotFound(f"Employee {employee_id} not found.")
        return self._set_employee(order, employee_id)

    @transaction.atomic
    def unassign_employee(self, order_id: int) -> Order:
        """Clear an order's employee.

        Raises:
            OrderNotFound: order does not exist.
            OrderReadOnly: the order is Completed.
        """
        order = self._lock_mutable(order_id)
        return self._set_employee(order, None)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_order(self, order_id: int) -> Order:
        """Retrieve a single order by ID.

        Raises:
            OrderNotFound: if the order does not exist.
        """
        order = self._order_repo.get_by_id(order_id)
        if not order:
            raise OrderNotFound(f"Order {order_id} not found.")
        return order

    def list_orders(self, filters: Optional[Dict[str, Any]] = None) -> List[Order]:
        """Return a list of orders, optionally filtered."""
        return self._order_repo.list(filters)

    def list_customer_orders(self, customer_id: int) -> List[Order]:
        if not self._customer_repo.get_by_id(customer_id):
            raise CustomerNotFound(f"Customer {customer_id} not found.")
        return self._order_repo.list({"customer_id": customer_id})

    def list_active_orders(self) -> List[Order]:
        """Pending and Processing orders, read from the stored status."""
        return self._order_repo.list_by_statuses(ARCHIVED_STATES, exclude=True)

    def list_archived_orders(self) -> List[Order]:
        """Completed and Cancelled orders, read from the stored status."""
        return self._order_repo.list_by_statuses(ARCHIVED_STATES)

    def order_summary(self) -> OrderSummaryDTO:
        figures = self._order_repo.summary()
        archived = figures["completed_orders"] + figures["cancelled_orders"]
        return OrderSummaryDTO(
            total_orders=figures["total_orders"],
            pending_orders=figures["pending_orders"],
            processing_orders=figures["processing_orders"],
            active_orders=figures["total_orders"] - archived,
            archived_orders=archived,
            revenue=figures["revenue"] or Decimal("0.00"),
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _apply_transition(self, order: Order, new_status: str, notes: str) -> Order:
        order_id = order.id
        old_status = order.status
        log = logger.bind(
            order_id=order_id,
            current_status=old_status,
            new_status=new_status,
        )

        try:
            check_transition(old_status, new_status)
        except DomainError as exc:
            log.warning("order.transition_rejected", reason=type(exc).__name__)
            raise

        if new_status == OrderStatus.CANCELLED:
            self._release_items(order)

        self._order_repo.update_status(order, new_status)
        self._order_repo.add_history(
            order_id=order.id,
            status=new_status,
            notes=notes,
            old_status=old_status,
        )

        order.add_domain_event(
            OrderStatusChanged(
                aggregate_id=order.id, old_status=old_status, new_status=new_status
            )
        )
        if new_status == OrderStatus.CANCELLED:
            order.add_domain_event(OrderCancelled(aggregate_id=order.id))
        elif new_status == OrderStatus.COMPLETED:
            order.add_domain_event(OrderCompleted(aggregate_id=order.id))
        publish_on_commit(self._event_bus, order)

        log.info("order.status_updated")
        return self._order_repo.get_by_id(order_id) or order

    def _release_items(self, order: Order) -> None:
        """Return every line item's quantity to stock, in stone id order."""
        log = logger.bind(order_id=order.id)
        items = sorted(
            (item for item in order.items.all() if item.stone_id is not None),
            key=lambda item: item.stone_id,
        )
        for item in items:
            try:
                self._ledger.release(item.stone_id, item.quantity)
            except StoneNotFound:
                log.warning("order.release_skipped", stone_id=item.stone_id)

    def _lock_mutable(self, order_id: int) -> Order:
        order = self._order_repo.get_for_update(order_id)
        if not order:
            raise OrderNotFound(f"Order {order_id} not found.")
        if order.status == OrderStatus.COMPLETED:
            logger.warning("order.read_only", order_id=order_id)
            raise OrderReadOnly("Completed orders cannot be modified.")
        return order

    def _set_employee(self, order: Order, employee_id: Optional[int]) -> Order:
        previous = order.employee_id
        self._order_repo.update_employee(order, employee_id)
        order.add_domain_event(
            EmployeeAssigned(aggregate_id=order.id, employee_id=employee_id)
        )
        publish_on_commit(self._event_bus, order)
        logger.info(
            "order.employee_assigned",
            order_id=order.id,
            previous_employee_id=previous,
            employee_id=employee_id,
        )
        return self._order_repo.get_by_id(order.id) or order
