"""Stone catalog API views.

Exposes the ``StoneService`` via HTTP using DRF ViewSets.
Domain exceptions are caught and translated into appropriate
HTTP status codes; the view never swallows generic exceptions.
"""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend
from pydantic import ValidationError as PydanticValidationError
from rest_framework import status
from rest_framework.filters import OrderingFilter, SearchFilter
from rest_framework.mixins import ListModelMixin
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.core.pagination import StandardResultsSetPagination
from modules.stones.dtos import CreateStoneDTO, UpdateStoneDTO
from modules.stones.exceptions import StoneNotFound
from modules.stones.filters import StoneFilter
from modules.stones.models import Stone
from modules.stones.repositories.django_repository import StoneDjangoRepository
from modules.stones.serializers import StoneSerializer
from modules.stones.services import StoneService

STONE_NOT_FOUND = {"detail": "Stone not found."}


class StoneViewSet(ListModelMixin, GenericViewSet):
    """ViewSet for catalog operations.

    Listing goes through the filter backends on a plain queryset; every
    write goes through ``StoneService``.
    """

    filterset_class = StoneFilter
    search_fields = ["name", "stone_type", "size"]
    ordering_fields = ["name", "unit_price", "quantity_in_stock"]
    ordering = ["name", "id"]
    filter_backends = [DjangoFilterBackend, SearchFilter, OrderingFilter]
    pagination_class = StandardResultsSetPagination
    queryset = Stone.objects.all()
    lookup_value_regex = r"\d+"
    serializer_class = StoneSerializer

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = StoneService(repository=StoneDjangoRepository())

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/stones/{pk}/"""
        try:
            stone = self._service.get_stone(pk)
        except StoneNotFound:
            return Response(STONE_NOT_FOUND, status=status.HTTP_404_NOT_FOUND)
        return Response(StoneSerializer(stone).data)

    def create(self, request: Request) -> Response:
        """POST /api/v1/stones/"""
        try:
            dto = CreateStoneDTO(**_pick(request.data, CreateStoneDTO))
        except (PydanticValidationError, TypeError) as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        stone = self._service.create_stone(dto)
        return Response(StoneSerializer(stone).data, status=status.HTTP_201_CREATED)

    def partial_update(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /api/v1/stones/{pk}/"""
        try:
            dto = UpdateStoneDTO(**_pick(request.data, UpdateStoneDTO))
        except (PydanticValidationError, TypeError) as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        try:
            stone = self._service.update_stone(pk, dto)
        except StoneNotFound:
            return Response(STONE_NOT_FOUND, status=status.HTTP_404_NOT_FOUND)
        return Response(StoneSerializer(stone).data)

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/v1/stones/{pk}/

        Order line items referencing the stone are detached, not deleted.
        """
        try:
            self._service.delete_stone(pk)
        except StoneNotFound:
            return Response(STONE_NOT_FOUND, status=status.HTTP_404_NOT_FOUND)
        return Response(status=status.HTTP_204_NO_CONTENT)


def _pick(data, dto_class) -> dict:
    """Keep only the request fields the DTO declares."""
    return {key: data[key] for key in dto_class.model_fields if key in data}
