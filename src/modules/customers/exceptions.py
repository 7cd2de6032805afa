"""Customer domain exceptions.

Raised by the Service Layer when business rules are violated.
The API layer (Views) catches these and translates them into
appropriate HTTP responses.
"""

from __future__ import annotations

from shared.domain.exceptions import DomainError, NotFound


class CustomerAlreadyExists(DomainError):
    """A customer with the same email already exists."""


class CustomerNotFound(NotFound):
    """The requested customer does not exist."""
