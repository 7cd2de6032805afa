"""Stone DRF serializers for API output.

Input is validated by the Pydantic DTOs in ``dtos.py``.
"""

from __future__ import annotations

from rest_framework import serializers

from modules.stones.models import Stone


class StoneSerializer(serializers.ModelSerializer):
    """Read serializer for the Stone resource."""

    in_stock = serializers.BooleanField(read_only=True)

    class Meta:
        model = Stone
        fields = [
            "id",
            "name",
            "stone_type",
            "size",
            "unit_price",
            "quantity_in_stock",
            "in_stock",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields
