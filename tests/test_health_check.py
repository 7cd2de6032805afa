from decimal import Decimal
from unittest.mock import patch

from modules.stones.models import Stone


class TestHealthCheck:
    def test_healthy_without_authentication(self, api_client):
        response = api_client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert "timestamp" in data
        assert data["services"]["database"]["status"] == "up"
        assert "response_time_ms" in data["services"]["database"]

    def test_reports_out_of_stock_stones(self, client):
        Stone.objects.create(name="Sold out", unit_price=Decimal("10.00"), quantity_in_stock=0)
        Stone.objects.create(name="Available", unit_price=Decimal("10.00"), quantity_in_stock=4)

        data = client.get("/health").json()

        assert data["services"]["inventory"]["out_of_stock"] == 1

    def test_failing_probe_returns_503(self, client):
        def _down():
            raise ConnectionError("database unreachable")

        with patch.dict("modules.core.views.PROBES", {"database": _down}):
            response = client.get("/health")

        assert response.status_code == 503
        assert response.json()["services"]["database"] == {"status": "down"}
