"""Customer service layer (Use Cases)."""

from __future__ import annotations

from typing import TYPE_CHECKING, List

import structlog
from django.db import transaction

from modules.customers.exceptions import CustomerAlreadyExists, CustomerNotFound
from modules.customers.models import Customer

if TYPE_CHECKING:
    from modules.customers.dtos import CreateCustomerDTO, UpdateCustomerDTO
    from modules.customers.repositories.interfaces import ICustomerRepository

logger = structlog.get_logger(__name__)


class CustomerService:
    """Application service for Customer use-cases.

    Receives an ``ICustomerRepository`` via constructor injection (DIP).
    """

    def __init__(self, repository: ICustomerRepository) -> None:
        self._repo = repository

    @transaction.atomic
    def create_customer(self, dto: CreateCustomerDTO) -> Customer:
        """Register a customer.

        Raises:
            CustomerAlreadyExists: the email is already registered.
        """
        if self._repo.get_by_email(dto.email):
            logger.warning("customer.duplicate_email")
            raise CustomerAlreadyExists(f"Email '{dto.email}' already registered.")

        customer = Customer(
            first_name=dto.first_name,
            last_name=dto.last_name,
            email=dto.email,
            phone=dto.phone,
            address=dto.address,
        )
        customer = self._repo.save(customer)
        logger.info("customer.created", customer_id=customer.id)
        return customer

    @transaction.atomic
    def update_customer(self, id: int, dto: UpdateCustomerDTO) -> Customer:
        """Edit a customer's profile with the supplied fields.

        Raises:
            CustomerNotFound: if the customer does not exist.
            CustomerAlreadyExists: the new email belongs to another customer.
        """
        customer = self.get_customer(id)
        changed = dto.model_dump(exclude_none=True)

        if "email" in changed:
            owner = self._repo.get_by_email(changed["email"])
            if owner and owner.id != customer.id:
                logger.warning("customer.duplicate_email", customer_id=id)
                raise CustomerAlreadyExists(
                    f"Email '{changed['email']}' already registered."
                )

        for field, value in changed.items():
            setattr(customer, field, value)
        customer = self._repo.save(customer)
        logger.info("customer.updated", customer_id=id, fields=sorted(changed))
        return customer

    def get_customer(self, id: int) -> Customer:
        """Raises ``CustomerNotFound`` if the customer does not exist."""
        customer = self._repo.get_by_id(id)
        if not customer:
            raise CustomerNotFound(f"Customer {id} not found.")
        return customer

    def list_customers(self) -> List[Customer]:
        return self._repo.list()
