"""Custom order DRF serializers for API output."""

from __future__ import annotations

from rest_framework import serializers

from modules.custom_orders.models import CustomOrder


class CustomOrderSerializer(serializers.ModelSerializer):
    customer_name = serializers.CharField(source="customer.full_name", read_only=True)

    class Meta:
        model = CustomOrder
        fields = [
            "id",
            "customer_id",
            "customer_name",
            "stone_type",
            "stone_description",
            "size",
            "requested_quantity",
            "status",
            "order_id",
            "created_at",
        ]
        read_only_fields = fields
