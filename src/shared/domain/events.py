"""Domain events primitives shared by every bounded context."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from datetime import datetime, timezone
from typing import Any, ClassVar, Dict, Type
from uuid import UUID, uuid4


@dataclass(frozen=True)
class DomainEvent:
    """Base domain event (immutable).

    ``aggregate_id`` is the numeric id (orders, profiles) or principal
    (role choice) of the aggregate that produced the event.  Subclasses are
    registered by class name so the outbox relay can rebuild them from a
    stored payload.
    """

    aggregate_id: Any
    actor: str = ""
    event_id: UUID = field(default_factory=uuid4)
    occurred_on: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    event_name: str = field(init=False)

    registry: ClassVar[Dict[str, Type[DomainEvent]]] = {}

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        DomainEvent.registry[cls.__name__] = cls

    def __post_init__(self) -> None:
        object.__setattr__(self, "event_name", self.__class__.__name__)

    @classmethod
    def from_payload(cls, event_name: str, payload: Dict[str, Any]) -> DomainEvent:
        """Rebuild an event from its outbox payload.

        Raises ``KeyError`` for an unknown ``event_name``.
        """
        event_class = cls.registry[event_name]
        init_names = {f.name for f in fields(event_class) if f.init}
        kwargs = {key: value for key, value in payload.items() if key in init_names}
        if "event_id" in kwargs:
            kwargs["event_id"] = UUID(str(kwargs["event_id"]))
        if isinstance(kwargs.get("occurred_on"), str):
            kwargs["occurred_on"] = datetime.fromisoformat(kwargs["occurred_on"])
        return event_class(**kwargs)


class DomainEventMixin:
    """Mixin for aggregate roots that collect domain events in memory."""

    _domain_events: list[DomainEvent]

    def add_domain_event(self, event: DomainEvent) -> None:
        if not hasattr(self, "_domain_events"):
            self._domain_events = []
        self._domain_events.append(event)

    def clear_domain_events(self) -> None:
        if hasattr(self, "_domain_events"):
            self._domain_events.clear()

    @property
    def domain_events(self) -> list[DomainEvent]:
        if not hasattr(self, "_domain_events"):
            self._domain_events = []
        return list(self._domain_events)
