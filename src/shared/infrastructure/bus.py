"""In-memory event bus implementation."""

from __future__ import annotations

from typing import Dict, List, Type

import structlog
from django.db import transaction

from shared.domain.bus import IEventBus, IEventHandler
from shared.domain.events import DomainEvent, DomainEventMixin

logger = structlog.get_logger(__name__)


class InMemoryEventBus(IEventBus):
    """Simple in-process event bus.

    Handlers run synchronously in subscription order.  A failing handler
    is logged and does not prevent the remaining handlers from running:
    events are published after the business transaction has committed,
    so there is nothing left to roll back.
    """

    def __init__(self) -> None:
        self._handlers: Dict[Type[DomainEvent], List[IEventHandler]] = {}

    def subscribe(self, event_class: Type[DomainEvent], handler: IEventHandler) -> None:
        handlers = self._handlers.setdefault(event_class, [])
        if handler not in handlers:
            handlers.append(handler)

    def handlers_for(self, event_class: Type[DomainEvent]) -> List[IEventHandler]:
        return list(self._handlers.get(event_class, []))

    def publish(self, event: DomainEvent) -> None:
        for handler in self._handlers.get(type(event), []):
            try:
                handler.handle(event)
            except Exception:
                logger.exception(
                    "event_bus.handler_failed",
                    event_name=event.event_name,
                    aggregate_id=event.aggregate_id,
                    handler=type(handler).__name__,
                )


def publish_on_commit(bus: IEventBus | None, aggregate: DomainEventMixin) -> None:
    """Hand the aggregate's pending events to *bus* once the transaction commits.

    Events collected on a rolled-back transaction are discarded together
    with the data that produced them.  With no bus configured the events
    are simply dropped.
    """
    events = aggregate.pull_domain_events()
    if bus is None or not events:
        return

    def _publish() -> None:
        for event in events:
            bus.publish(event)

    transaction.on_commit(_publish)


class EventLogHandler:
    """Write each received event to *log* as ``event`` plus its payload.

    ``id_field`` names the key the aggregate id is logged under
    (``order_id``, ``custom_order_id``).
    """

    def __init__(self, log, event: str, id_field: str) -> None:
        self._log = log
        self._event = event
        self._id_field = id_field

    def handle(self, event: DomainEvent) -> None:
        self._log.info(self._event, **{self._id_field: event.aggregate_id}, **event.payload())
