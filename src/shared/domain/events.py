"""Domain events raised by the order and custom-order aggregates.

Events are collected on the aggregate while a use case runs and handed
to the bus only after the surrounding transaction has committed (see
``shared.infrastructure.bus.publish_on_commit``).
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from datetime import datetime, timezone
from typing import Any, Dict, List
from uuid import UUID, uuid4

_METADATA = frozenset({"aggregate_id", "event_id", "occurred_on", "event_name"})


@dataclass(frozen=True)
class DomainEvent:
    """Immutable record of something that happened to an aggregate.

    ``aggregate_id`` is the integer primary key of the order or custom
    order that raised the event.
    """

    aggregate_id: int
    event_id: UUID = field(default_factory=uuid4)
    occurred_on: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    event_name: str = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "event_name", type(self).__name__)

    def payload(self) -> Dict[str, Any]:
        """Event-specific fields, without the bookkeeping ones."""
        return {
            f.name: getattr(self, f.name) for f in fields(self) if f.name not in _METADATA
        }


class DomainEventMixin:
    """Lets a model collect events until its transaction commits."""

    def _pending(self) -> List[DomainEvent]:
        try:
            return self.__dict__["_domain_events"]
        except KeyError:
            return self.__dict__.setdefault("_domain_events", [])

    def add_domain_event(self, event: DomainEvent) -> None:
        self._pending().append(event)

    def pull_domain_events(self) -> List[DomainEvent]:
        """Return the pending events and forget them."""
        pending = self._pending()
        events = list(pending)
        pending.clear()
        return events

    @property
    def domain_events(self) -> List[DomainEvent]:
        return list(self._pending())
