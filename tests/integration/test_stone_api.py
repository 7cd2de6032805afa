"""Integration tests for Stone catalog API endpoints."""

from __future__ import annotations

from decimal import Decimal

import pytest

from modules.orders.dtos import PlaceOrderDTO, PlaceOrderItemDTO
from modules.orders.models import OrderItem
from modules.stones.models import Stone

pytestmark = pytest.mark.integration

URL = "/api/v1/stones/"


class TestStoneCrud:
    def test_create(self, auth_client):
        response = auth_client.post(
            URL,
            {
                "name": "Nero Marquina",
                "stone_type": "Marble",
                "size": "60x60",
                "unit_price": "140.00",
                "quantity_in_stock": 12,
            },
            format="json",
        )

        assert response.status_code == 201
        assert response.data["in_stock"] is True
        assert Stone.objects.get(id=response.data["id"]).unit_price == Decimal("140.00")

    def test_create_negative_price_returns_400(self, auth_client):
        response = auth_client.post(
            URL, {"name": "Broken", "unit_price": "-1.00"}, format="json"
        )
        assert response.status_code == 400

    def test_create_oversized_price_returns_400(self, auth_client):
        response = auth_client.post(
            URL, {"name": "Gold Leaf", "unit_price": "123456789012.00"}, format="json"
        )

        assert response.status_code == 400
        assert not Stone.objects.filter(name="Gold Leaf").exists()

    def test_update_oversized_price_returns_400(self, auth_client, make_stone):
        stone = make_stone()

        response = auth_client.patch(
            f"{URL}{stone.id}/", {"unit_price": "123456789012.00"}, format="json"
        )

        assert response.status_code == 400
        stone.refresh_from_db()
        assert stone.unit_price == Decimal("50.00")

    def test_partial_update(self, auth_client, make_stone):
        stone = make_stone()

        response = auth_client.patch(
            f"{URL}{stone.id}/", {"quantity_in_stock": 0}, format="json"
        )

        assert response.status_code == 200
        assert response.data["quantity_in_stock"] == 0
        assert response.data["in_stock"] is False

    def test_retrieve_unknown_returns_404(self, auth_client):
        assert auth_client.get(f"{URL}424242/").status_code == 404

    def test_delete_keeps_order_lines(self, auth_client, make_stone, order_service, customer):
        stone = make_stone(stock=5, price="50.00")
        order = order_service.place_order(
            PlaceOrderDTO(
                customer_id=customer.id,
                items=[PlaceOrderItemDTO(stone_id=stone.id, quantity=2)],
            )
        )

        response = auth_client.delete(f"{URL}{stone.id}/")

        assert response.status_code == 204
        item = OrderItem.objects.get(order_id=order.id)
        assert item.stone_id is None
        assert item.subtotal == Decimal("100.00")

        detail = auth_client.get(f"/api/v1/orders/{order.id}/")
        assert detail.data["items"][0]["stone_name"] is None


class TestStoneFilters:
    def test_in_stock_filter(self, auth_client, make_stone):
        make_stone(name="Available", stock=3)
        make_stone(name="Sold out", stock=0)

        response = auth_client.get(URL, {"in_stock": "true"})

        assert [s["name"] for s in response.data["results"]] == ["Available"]

    def test_price_range(self, auth_client, make_stone):
        make_stone(name="Cheap", price="20.00")
        make_stone(name="Mid", price="80.00")
        make_stone(name="Premium", price="600.00")

        response = auth_client.get(URL, {"min_price": "50", "max_price": "100"})

        assert [s["name"] for s in response.data["results"]] == ["Mid"]
