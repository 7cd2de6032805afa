"""Repository base contract.

Services depend on these abstractions and receive a Django ORM
implementation from the composition root (views, management commands,
test fixtures).  Repositories only persist and load; stock and status
rules live in the ledger and the order state machine.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, Generic, List, Optional, TypeVar

T = TypeVar("T")


class IRepository(ABC, Generic[T]):
    """CRUD over one aggregate keyed by an integer id."""

    @abstractmethod
    def get_by_id(self, id: int) -> Optional[T]:
        """Return the entity, or ``None`` when it does not exist."""

    @abstractmethod
    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[T]:
        """Return entities matching ORM-style *filters* (all when ``None``)."""

    @abstractmethod
    def save(self, entity: T) -> T: ...

    @abstractmethod
    def delete(self, id: int) -> bool:
        """Remove the entity; ``False`` when there was nothing to remove."""

    def exists(self, id: int) -> bool:
        return self.get_by_id(id) is not None
