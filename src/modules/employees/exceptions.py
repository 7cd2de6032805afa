"""Employee domain exceptions."""

from __future__ import annotations

from shared.domain.exceptions import NotFound


class EmployeeNotFound(NotFound):
    """The requested employee does not exist."""
