from __future__ import annotations

import random
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand

from modules.custom_orders.dtos import SubmitCustomOrderDTO
from modules.custom_orders.repositories.django_repository import (
    CustomOrderDjangoRepository,
)
from modules.custom_orders.services import CustomOrderService
from modules.customers.dtos import CreateCustomerDTO
from modules.customers.models import Customer
from modules.customers.repositories.django_repository import CustomerDjangoRepository
from modules.customers.services import CustomerService
from modules.employees.dtos import CreateEmployeeDTO
from modules.employees.models import Employee
from modules.employees.repositories.django_repository import EmployeeDjangoRepository
from modules.employees.services import EmployeeService
from modules.orders.constants import OrderStatus
from modules.orders.dtos import PlaceOrderDTO, PlaceOrderItemDTO
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.services import OrderService
from modules.stones.dtos import CreateStoneDTO
from modules.stones.exceptions import InsufficientStock
from modules.stones.ledger import InventoryLedger
from modules.stones.models import Stone
from modules.stones.repositories.django_repository import StoneDjangoRepository
from modules.stones.services import StoneService


class Command(BaseCommand):
    help = "Seed database with realistic development data."

    def add_arguments(self, parser):
        parser.add_argument("--orders", type=int, default=30)

    def handle(self, *args, **options):
        random.seed(42)
        self.stdout.write("Seeding development data...")

        stone_repository = StoneDjangoRepository()
        ledger = InventoryLedger(stone_repository)
        self._stones = StoneService(stone_repository)
        self._customers = CustomerService(CustomerDjangoRepository())
        self._employees = EmployeeService(EmployeeDjangoRepository())
        self._orders = OrderService(
            order_repository=OrderDjangoRepository(),
            customer_repository=CustomerDjangoRepository(),
            employee_repository=EmployeeDjangoRepository(),
            stone_repository=stone_repository,
            ledger=ledger,
        )
        self._custom_orders = CustomOrderService(
            custom_order_repository=CustomOrderDjangoRepository(),
            order_repository=OrderDjangoRepository(),
            customer_repository=CustomerDjangoRepository(),
            stone_repository=stone_repository,
            ledger=ledger,
        )

        users_created = self._seed_users()
        stones = self._seed_stones()
        customers = self._seed_customers()
        employees = self._seed_employees()
        orders_created = self._seed_orders(customers, employees, stones, options["orders"])
        requests_created = self._seed_custom_orders(customers)

        self.stdout.write(
            self.style.SUCCESS(
                "Seed completed: "
                f"users={users_created}, "
                f"stones={len(stones)}, "
                f"customers={len(customers)}, "
                f"employees={len(employees)}, "
                f"orders={orders_created}, "
                f"custom_orders={requests_created}"
            )
        )

    def _seed_users(self) -> int:
        User = get_user_model()
        created = 0
        if not User.objects.filter(username="admin").exists():
            User.objects.create_superuser("admin", password="admin123")
            created += 1
        if not User.objects.filter(username="staff").exists():
            User.objects.create_user("staff", password="staff123", is_staff=True)
            created += 1
        return created

    def _seed_stones(self) -> list[Stone]:
        self.stdout.write("Creating stones...")
        if Stone.objects.exists():
            return list(Stone.objects.all())
        catalog = [
            ("Carrara White", "Marble", "30x30", Decimal("85.00")),
            ("Nero Marquina", "Marble", "60x60", Decimal("140.00")),
            ("Calacatta Gold", "Marble", "60x120", Decimal("320.00")),
            ("Absolute Black", "Granite", "30x30", Decimal("70.00")),
            ("Kashmir White", "Granite", "60x60", Decimal("115.00")),
            ("Ubatuba Green", "Granite", "60x60", Decimal("98.50")),
            ("Travertine Classic", "Travertine", "40x40", Decimal("55.00")),
            ("Blue Pearl", "Granite", "slab", Decimal("640.00")),
            ("Crema Marfil", "Marble", "30x60", Decimal("92.00")),
            ("Slate Grey", "Slate", "30x30", Decimal("38.00")),
        ]
        stones = [
            self._stones.create_stone(
                CreateStoneDTO(
                    name=name,
                    stone_type=stone_type,
                    size=size,
                    unit_price=price,
                    quantity_in_stock=random.randint(5, 120),
                )
            )
            for name, stone_type, size, price in catalog
        ]
        self.stdout.write(self.style.SUCCESS("Creating stones... Done!"))
        return stones

    def _seed_customers(self) -> list[Customer]:
        self.stdout.write("Creating customers...")
        people = [
            ("Ana", "Souza", "ana@example.com"),
            ("Bruno", "Lima", "bruno@example.com"),
            ("Carla", "Mendes", "carla@example.com"),
            ("Daniel", "Costa", "daniel@example.com"),
            ("Helena", "Ferreira", "helena@example.com"),
            ("Julia", "Oliveira", "julia@example.com"),
        ]
        customers = []
        for first_name, last_name, email in people:
            existing = Customer.objects.filter(email=email).first()
            customers.append(
                existing
                or self._customers.create_customer(
                    CreateCustomerDTO(
                        first_name=first_name, last_name=last_name, email=email
                    )
                )
            )
        self.stdout.write(self.style.SUCCESS("Creating customers... Done!"))
        return customers

    def _seed_employees(self) -> list[Employee]:
        self.stdout.write("Creating employees...")
        if Employee.objects.exists():
            return list(Employee.objects.all())
        employees = [
            self._employees.create_employee(
                CreateEmployeeDTO(first_name=first, last_name=last, salary=salary)
            )
            for first, last, salary in [
                ("Marcos", "Pereira", Decimal("3200.00")),
                ("Paula", "Ribeiro", Decimal("3500.00")),
                ("Rafael", "Teixeira", Decimal("2900.00")),
            ]
        ]
        self.stdout.write(self.style.SUCCESS("Creating employees... Done!"))
        return employees

    def _seed_orders(
        self,
        customers: list[Customer],
        employees: list[Employee],
        stones: list[Stone],
        count: int,
    ) -> int:
        self.stdout.write("Creating orders...")
        if not customers or not stones:
            self.stdout.write(self.style.WARNING("Skipping orders (no customers/stones)."))
            return 0

        outcomes = [
            (OrderStatus.PENDING, 0.3),
            (OrderStatus.PROCESSING, 0.2),
            (OrderStatus.COMPLETED, 0.35),
            (OrderStatus.CANCELLED, 0.15),
        ]
        statuses = [s for s, _ in outcomes]
        weights = [w for _, w in outcomes]

        created = 0
        for _ in range(count):
            self_checkout = random.random() < 0.25
            picked = random.sample(stones, k=random.randint(1, min(3, len(stones))))
            dto = PlaceOrderDTO(
                customer_id=random.choice(customers).id,
                items=[
                    PlaceOrderItemDTO(stone_id=stone.id, quantity=random.randint(1, 4))
                    for stone in picked
                ],
                self_checkout=self_checkout,
            )
            try:
                order = self._orders.place_order(dto)
            except InsufficientStock:
                continue
            created += 1
            if self_checkout:
                continue

            if employees and random.random() < 0.6:
                self._orders.assign_employee(order.id, random.choice(employees).id)
            target = random.choices(statuses, weights=weights, k=1)[0]
            if target in (OrderStatus.PROCESSING, OrderStatus.COMPLETED):
                self._orders.transition(order.id, OrderStatus.PROCESSING)
            if target == OrderStatus.COMPLETED:
                self._orders.transition(order.id, OrderStatus.COMPLETED)
            elif target == OrderStatus.CANCELLED:
                self._orders.cancel_order(order.id, notes="Customer changed their mind")

        self.stdout.write(self.style.SUCCESS("Creating orders... Done!"))
        return created

    def _seed_custom_orders(self, customers: list[Customer]) -> int:
        self.stdout.write("Creating custom order requests...")
        requests = [
            ("Onyx", "Backlit honey onyx panel", "120x240", 2),
            ("Quartzite", "Taj Mahal quartzite countertop", "slab", 1),
            ("Marble", "Statuario with bookmatched veining", "60x120", 8),
        ]
        for stone_type, description, size, quantity in requests:
            self._custom_orders.submit(
                SubmitCustomOrderDTO(
                    customer_id=random.choice(customers).id,
                    stone_type=stone_type,
                    stone_description=description,
                    size=size,
                    requested_quantity=quantity,
                )
            )
        self.stdout.write(self.style.SUCCESS("Creating custom order requests... Done!"))
        return len(requests)
