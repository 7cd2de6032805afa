"""Domain error kinds shared by every bounded context.

Each module declares its own concrete exceptions on top of these bases
so callers can handle a whole kind (e.g. any ``NotFound``) at once.
"""

from __future__ import annotations


class DomainError(Exception):
    """Base class for business-rule rejections raised by the service layer."""


class NotFound(DomainError):
    """A referenced entity does not exist."""
