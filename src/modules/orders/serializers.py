"""Order DRF serializers for API output.

Input is validated by the Pydantic DTOs in ``dtos.py``; these
serializers only shape responses.
"""

from __future__ import annotations

from rest_framework import serializers

from modules.orders.archive import display_status, is_archived
from modules.orders.models import Order, OrderItem, OrderStatusHistory


class OrderItemSerializer(serializers.ModelSerializer):
    """Read serializer for order items with the price snapshot.

    ``stone_id`` / ``stone_name`` are ``null`` once the stone has been
    removed from the catalog.
    """

    stone_name = serializers.CharField(
        source="stone.name", read_only=True, default=None
    )

    class Meta:
        model = OrderItem
        fields = [
            "id",
            "stone_id",
            "stone_name",
            "quantity",
            "unit_price",
            "subtotal",
        ]
        read_only_fields = fields


class StatusHistorySerializer(serializers.ModelSerializer):
    class Meta:
        model = OrderStatusHistory
        fields = [
            "id",
            "old_status",
            "new_status",
            "notes",
            "created_at",
        ]
        read_only_fields = fields


class OrderListSerializer(serializers.ModelSerializer):
    """Lightweight serializer for order lists (no nested relations)."""

    display_status = serializers.SerializerMethodField()
    archived = serializers.SerializerMethodField()
    customer_name = serializers.CharField(source="customer.full_name", read_only=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "customer_id",
            "customer_name",
            "employee_id",
            "order_date",
            "status",
            "display_status",
            "archived",
            "total_amount",
        ]
        read_only_fields = fields

    def get_display_status(self, obj: Order) -> str:
        return display_status(obj)

    def get_archived(self, obj: Order) -> bool:
        return is_archived(obj.status)


class OrderSerializer(OrderListSerializer):
    """Read serializer for orders with nested items and history."""

    items = OrderItemSerializer(many=True, read_only=True)
    status_history = StatusHistorySerializer(many=True, read_only=True)

    class Meta(OrderListSerializer.Meta):
        fields = OrderListSerializer.Meta.fields + [
            "notes",
            "created_at",
            "updated_at",
            "items",
            "status_history",
        ]
        read_only_fields = fields
