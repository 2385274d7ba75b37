"""In-memory event bus implementation."""

from __future__ import annotations

from typing import Dict, Iterable, List, Type

import structlog

from shared.domain.bus import IEventBus, IEventHandler
from shared.domain.events import DomainEvent

logger = structlog.get_logger(__name__)


class InMemoryEventBus(IEventBus):
    """Synchronous in-process bus.

    Handlers run in subscription order, most specific event class first.
    A handler error propagates to the publisher.
    """

    def __init__(self) -> None:
        self._handlers: Dict[Type[DomainEvent], List[IEventHandler]] = {}

    def subscribe(self, event_class: Type[DomainEvent], handler: IEventHandler) -> None:
        handlers = self._handlers.setdefault(event_class, [])
        if handler not in handlers:
            handlers.append(handler)

    def publish(self, event: DomainEvent) -> None:
        delivered = 0
        for event_class in type(event).__mro__:
            for handler in self._handlers.get(event_class, []):
                handler.handle(event)
                delivered += 1
        logger.debug(
            "event_bus.published",
            event_name=event.event_name,
            aggregate_id=str(event.aggregate_id),
            handler_count=delivered,
        )

    def publish_all(self, events: Iterable[DomainEvent]) -> None:
        for event in events:
            self.publish(event)


# Global bus instance (singleton)

event_bus = InMemoryEventBus()
