from decimal import Decimal

import pytest
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient

from modules.custom_orders.repositories.django_repository import (
    CustomOrderDjangoRepository,
)
from modules.custom_orders.services import CustomOrderService
from modules.customers.models import Customer
from modules.customers.repositories.django_repository import CustomerDjangoRepository
from modules.employees.models import Employee
from modules.employees.repositories.django_repository import EmployeeDjangoRepository
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.services import OrderService
from modules.stones.ledger import InventoryLedger
from modules.stones.models import Stone
from modules.stones.repositories.django_repository import StoneDjangoRepository
from shared.infrastructure.bus import InMemoryEventBus


@pytest.fixture(autouse=True)
def _use_db(db):
    """Automatically use the test database for all tests."""


@pytest.fixture()
def api_client():
    """DRF APIClient for testing API endpoints."""
    return APIClient()


@pytest.fixture()
def api_client_with_correlation(api_client):
    """APIClient pre-configured with a known correlation ID header."""
    cid = "test-correlation-id-fixture"
    api_client.defaults["HTTP_X_REQUEST_ID"] = cid
    return api_client, cid


@pytest.fixture()
def auth_client():
    """APIClient with a force-authenticated Django user."""
    client = APIClient()
    user = get_user_model().objects.create_user(
        username="staff", password="testpass123"
    )
    client.force_authenticate(user=user)
    return client


# ---------------------------------------------------------------------------
# Domain objects
# ---------------------------------------------------------------------------


@pytest.fixture()
def customer():
    return Customer.objects.create(
        first_name="Ana",
        last_name="Souza",
        email="ana@example.com",
    )


@pytest.fixture()
def employee():
    return Employee.objects.create(first_name="Marcos", last_name="Pereira")


@pytest.fixture()
def make_stone():
    """Factory fixture: ``make_stone(name, stock, price)``."""

    def _make(name="Marble 30x30", stock=10, price="50.00", **kwargs):
        return Stone.objects.create(
            name=name,
            unit_price=Decimal(price),
            quantity_in_stock=stock,
            **kwargs,
        )

    return _make


# ---------------------------------------------------------------------------
# Services
# ---------------------------------------------------------------------------


@pytest.fixture()
def event_bus():
    return InMemoryEventBus()


@pytest.fixture()
def ledger():
    return InventoryLedger(StoneDjangoRepository())


@pytest.fixture()
def order_service(ledger, event_bus):
    return OrderService(
        order_repository=OrderDjangoRepository(),
        customer_repository=CustomerDjangoRepository(),
        employee_repository=EmployeeDjangoRepository(),
        stone_repository=StoneDjangoRepository(),
        ledger=ledger,
        event_bus=event_bus,
    )


@pytest.fixture()
def custom_order_service(ledger, event_bus):
    return CustomOrderService(
        custom_order_repository=CustomOrderDjangoRepository(),
        order_repository=OrderDjangoRepository(),
        customer_repository=CustomerDjangoRepository(),
        stone_repository=StoneDjangoRepository(),
        ledger=ledger,
        event_bus=event_bus,
    )
