"""Custom order API views.

Exposes ``CustomOrderService`` via HTTP.  ``AlreadyConverted`` maps to
409, ``InsufficientStock`` to 409, ``AmountOutOfRange`` and invalid bodies
to 400 and any ``NotFound`` to 404.
"""

from __future__ import annotations

from pydantic import ValidationError as PydanticValidationError
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.core.apps import get_event_bus
from modules.core.pagination import StandardResultsSetPagination
from modules.custom_orders.constants import CustomOrderStatus
from modules.custom_orders.dtos import ConvertCustomOrderDTO, SubmitCustomOrderDTO
from modules.custom_orders.exceptions import AlreadyConverted, CustomOrderNotFound
from modules.custom_orders.models import CustomOrder
from modules.custom_orders.repositories.django_repository import (
    CustomOrderDjangoRepository,
)
from modules.custom_orders.serializers import CustomOrderSerializer
from modules.custom_orders.services import CustomOrderService
from modules.customers.repositories.django_repository import CustomerDjangoRepository
from modules.orders.exceptions import AmountOutOfRange
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.serializers import OrderSerializer
from modules.stones.exceptions import InsufficientStock
from modules.stones.ledger import InventoryLedger
from modules.stones.repositories.django_repository import StoneDjangoRepository
from shared.domain.exceptions import NotFound


def _detail(exc: Exception, code: int) -> Response:
    return Response({"detail": str(exc)}, status=code)


class CustomOrderViewSet(GenericViewSet):
    """ViewSet for custom order requests and their conversion."""

    queryset = CustomOrder.objects.all()
    lookup_value_regex = r"\d+"
    pagination_class = StandardResultsSetPagination

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        stone_repository = StoneDjangoRepository()
        self._service = CustomOrderService(
            custom_order_repository=CustomOrderDjangoRepository(),
            order_repository=OrderDjangoRepository(),
            customer_repository=CustomerDjangoRepository(),
            stone_repository=stone_repository,
            ledger=InventoryLedger(stone_repository),
            event_bus=get_event_bus(),
        )

    def list(self, request: Request) -> Response:
        """GET /api/v1/custom-orders/?customer=&status="""
        customer = request.query_params.get("customer")
        status_value = request.query_params.get("status")
        if status_value and status_value not in CustomOrderStatus.values:
            return Response(
                {"detail": f"Unknown status '{status_value}'."},
                status=status.HTTP_400_BAD_REQUEST,
            )
        if customer is not None and not customer.isdigit():
            return Response(
                {"detail": "Customer must be an integer id."},
                status=status.HTTP_400_BAD_REQUEST,
            )

        custom_orders = self._service.list_custom_orders(
            customer_id=int(customer) if customer else None,
            status=status_value or None,
        )
        page = self.paginate_queryset(custom_orders)
        return self.get_paginated_response(CustomOrderSerializer(page, many=True).data)

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/custom-orders/{pk}/"""
        try:
            custom_order = self._service.get_custom_order(pk)
        except CustomOrderNotFound as exc:
            return _detail(exc, status.HTTP_404_NOT_FOUND)
        return Response(CustomOrderSerializer(custom_order).data)

    def create(self, request: Request) -> Response:
        """POST /api/v1/custom-orders/"""
        try:
            dto = SubmitCustomOrderDTO.model_validate(request.data)
        except PydanticValidationError as exc:
            return _detail(exc, status.HTTP_400_BAD_REQUEST)

        try:
            custom_order = self._service.submit(dto)
        except NotFound as exc:
            return _detail(exc, status.HTTP_404_NOT_FOUND)

        return Response(
            CustomOrderSerializer(custom_order).data, status=status.HTTP_201_CREATED
        )

    @action(detail=True, methods=["post"])
    def convert(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/custom-orders/{pk}/convert/

        An empty body converts without pricing; ``{"stone_id": 4,
        "unit_price": "120.00"}`` reserves stock and prices the order.
        """
        try:
            pricing = ConvertCustomOrderDTO.model_validate(request.data)
        except PydanticValidationError as exc:
            return _detail(exc, status.HTTP_400_BAD_REQUEST)

        try:
            order = self._service.convert(pk, pricing)
        except NotFound as exc:
            return _detail(exc, status.HTTP_404_NOT_FOUND)
        except (AlreadyConverted, InsufficientStock) as exc:
            return _detail(exc, status.HTTP_409_CONFLICT)
        except AmountOutOfRange as exc:
            return _detail(exc, status.HTTP_400_BAD_REQUEST)

        return Response(OrderSerializer(order).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=["post"])
    def reject(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/custom-orders/{pk}/reject/"""
        try:
            custom_order = self._service.reject(pk)
        except CustomOrderNotFound as exc:
            return _detail(exc, status.HTTP_404_NOT_FOUND)
        except AlreadyConverted as exc:
            return _detail(exc, status.HTTP_409_CONFLICT)

        return Response(CustomOrderSerializer(custom_order).data)
