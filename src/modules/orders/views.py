"""Order API views.

Exposes the ``OrderService`` via HTTP using DRF ViewSets.
Domain exceptions are caught and translated into HTTP status codes;
the view never swallows generic exceptions.

Status mapping:
- ``NotFound`` (order, customer, employee, stone) -> 404
- ``InsufficientStock`` -> 409
- ``InvalidTransition``, ``AmountOutOfRange`` -> 400
- ``NoChange`` -> 200 with ``changed: false``
- ``OrderNotOwned`` -> 403
- ``OrderReadOnly`` -> 423
- DTO validation errors -> 400
"""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend
from pydantic import ValidationError as PydanticValidationError
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.filters import OrderingFilter
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.core.apps import get_event_bus
from modules.core.pagination import StandardResultsSetPagination
from modules.customers.repositories.django_repository import CustomerDjangoRepository
from modules.employees.repositories.django_repository import EmployeeDjangoRepository
from modules.orders.dtos import (
    AssignEmployeeDTO,
    CancelOrderDTO,
    PlaceOrderDTO,
    TransitionDTO,
)
from modules.orders.exceptions import (
    AmountOutOfRange,
    InvalidTransition,
    NoChange,
    OrderNotFound,
    OrderNotOwned,
    OrderReadOnly,
)
from modules.orders.filters import OrderFilter
from modules.orders.models import Order
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.serializers import OrderListSerializer, OrderSerializer
from modules.orders.services import OrderService
from modules.stones.exceptions import InsufficientStock
from modules.stones.ledger import InventoryLedger
from modules.stones.repositories.django_repository import StoneDjangoRepository
from shared.domain.exceptions import NotFound

ORDER_NOT_FOUND = {"detail": "Order not found."}


def _detail(exc: Exception, code: int) -> Response:
    return Response({"detail": str(exc)}, status=code)


class OrderViewSet(GenericViewSet):
    """ViewSet for Order operations.

    Uses ``OrderService`` with injected repositories (DIP).
    Does **not** extend ``ModelViewSet``: every write goes through the
    service/repository layer.
    """

    queryset = Order.objects.select_related("customer", "employee")
    lookup_value_regex = r"\d+"
    filterset_class = OrderFilter
    ordering_fields = ["order_date", "total_amount", "status"]
    ordering = ["-order_date", "-id"]
    filter_backends = [DjangoFilterBackend, OrderingFilter]
    pagination_class = StandardResultsSetPagination

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        stone_repository = StoneDjangoRepository()
        self._service = OrderService(
            order_repository=OrderDjangoRepository(),
            customer_repository=CustomerDjangoRepository(),
            employee_repository=EmployeeDjangoRepository(),
            stone_repository=stone_repository,
            ledger=InventoryLedger(stone_repository),
            event_bus=get_event_bus(),
        )

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    def create(self, request: Request) -> Response:
        """POST /api/v1/orders/

        Self-checkout purchases (``self_checkout: true``) are stored as
        Completed; staff-entered orders start Pending.
        """
        try:
            dto = PlaceOrderDTO.model_validate(request.data)
        except PydanticValidationError as exc:
            return _detail(exc, status.HTTP_400_BAD_REQUEST)

        try:
            order = self._service.place_order(dto)
        except NotFound as exc:
            return _detail(exc, status.HTTP_404_NOT_FOUND)
        except InsufficientStock as exc:
            return _detail(exc, status.HTTP_409_CONFLICT)
        except AmountOutOfRange as exc:
            return _detail(exc, status.HTTP_400_BAD_REQUEST)

        return Response(OrderSerializer(order).data, status=status.HTTP_201_CREATED)

    # ------------------------------------------------------------------
    # List / Retrieve
    # ------------------------------------------------------------------

    def list(self, request: Request) -> Response:
        """GET /api/v1/orders/

        Filtering (status, customer, employee, date range, total range)
        is handled by ``OrderFilter``.  Results are paginated.
        """
        queryset = self.filter_queryset(self.get_queryset())
        return self._paginated(queryset)

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/orders/{pk}/"""
        try:
            order = self._service.get_order(pk)
        except OrderNotFound:
            return Response(ORDER_NOT_FOUND, status=status.HTTP_404_NOT_FOUND)
        return Response(OrderSerializer(order).data)

    @action(detail=False, methods=["get"])
    def active(self, request: Request) -> Response:
        """GET /api/v1/orders/active/ (Pending and Processing)."""
        return self._paginated(self._service.list_active_orders())

    @action(detail=False, methods=["get"])
    def archived(self, request: Request) -> Response:
        """GET /api/v1/orders/archived/ (Completed and Cancelled)."""
        return self._paginated(self._service.list_archived_orders())

    @action(detail=False, methods=["get"])
    def summary(self, request: Request) -> Response:
        """GET /api/v1/orders/summary/"""
        return Response(self._service.order_summary().model_dump(mode="json"))

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @action(detail=True, methods=["post"])
    def transition(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/orders/{pk}/transition/

        Body: ``{"status": "Processing", "notes": "..."}``.
        """
        try:
            dto = TransitionDTO.model_validate(request.data)
        except PydanticValidationError as exc:
            return _detail(exc, status.HTTP_400_BAD_REQUEST)

        return self._run_transition(pk, dto.status, dto.notes)

    @action(detail=True, methods=["post"])
    def cancel(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/orders/{pk}/cancel/

        Cancels an order and releases its reserved stock.  Body:
        ``{"notes": "..."}``; with ``"customer_id"`` the customer who
        placed the order withdraws it, which only works while Pending.
        """
        try:
            dto = CancelOrderDTO.model_validate(request.data)
        except PydanticValidationError as exc:
            return _detail(exc, status.HTTP_400_BAD_REQUEST)

        if dto.customer_id is None:
            return self._run_transition(pk, "Cancelled", dto.notes or "Order cancelled")
        return self._run_transition(
            pk, "Cancelled", dto.notes, customer_id=dto.customer_id
        )

    @action(detail=True, methods=["post"])
    def assign(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/orders/{pk}/assign/

        Body: ``{"employee_id": 3}``; ``{"employee_id": null}`` unassigns.
        """
        try:
            dto = AssignEmployeeDTO.model_validate(request.data)
        except PydanticValidationError as exc:
            return _detail(exc, status.HTTP_400_BAD_REQUEST)

        try:
            if dto.employee_id is None:
                order = self._service.unassign_employee(pk)
            else:
                order = self._service.assign_employee(pk, dto.employee_id)
        except NotFound as exc:
            return _detail(exc, status.HTTP_404_NOT_FOUND)
        except OrderReadOnly as exc:
            return _detail(exc, status.HTTP_423_LOCKED)

        return Response(OrderSerializer(order).data)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _run_transition(
        self,
        pk: str | None,
        new_status: str,
        notes: str,
        customer_id: int | None = None,
    ) -> Response:
        try:
            if customer_id is None:
                order = self._service.transition(pk, new_status, notes=notes)
            else:
                order = self._service.cancel_customer_order(
                    pk, customer_id, notes=notes
                )
        except OrderNotFound:
            return Response(ORDER_NOT_FOUND, status=status.HTTP_404_NOT_FOUND)
        except OrderNotOwned as exc:
            return _detail(exc, status.HTTP_403_FORBIDDEN)
        except NoChange as exc:
            return Response({"changed": False, "detail": str(exc)})
        except InvalidTransition as exc:
            return _detail(exc, status.HTTP_400_BAD_REQUEST)
        except OrderReadOnly as exc:
            return _detail(exc, status.HTTP_423_LOCKED)

        return Response({"changed": True, "order": OrderSerializer(order).data})

    def _paginated(self, orders) -> Response:
        page = self.paginate_queryset(orders)
        serializer = OrderListSerializer(page, many=True)
        return self.get_paginated_response(serializer.data)
