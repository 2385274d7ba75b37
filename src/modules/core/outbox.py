"""Outbox writer shared by the Django repositories.

Turns the domain events collected on an aggregate into ``OutboxEvent``
rows.  Must be called inside the transaction that persists the aggregate.
"""

from __future__ import annotations

import json
from dataclasses import asdict
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Dict
from uuid import UUID

import structlog

from modules.core.models import OutboxEvent
from shared.domain.events import DomainEvent

logger = structlog.get_logger(__name__)


def record_domain_events(entity: Any, topic: str) -> int:
    """Persist and clear the pending domain events of *entity*.

    Returns the number of outbox rows written.
    """
    events = entity.domain_events if hasattr(entity, "domain_events") else []
    for event in events:
        OutboxEvent.objects.create(
            event_type=event.event_name,
            aggregate_id=str(event.aggregate_id),
            payload=serialize_event_payload(event),
            topic=topic,
        )
    if hasattr(entity, "clear_domain_events"):
        entity.clear_domain_events()
    if events:
        logger.debug("outbox.recorded", topic=topic, event_count=len(events))
    return len(events)


def serialize_event_payload(event: DomainEvent) -> Dict[str, Any]:
    data = asdict(event)
    normalized = _normalize_for_json(data)
    return json.loads(json.dumps(normalized))


def _normalize_for_json(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, UUID):
        return str(value)
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (list, tuple)):
        return [_normalize_for_json(item) for item in value]
    if isinstance(value, dict):
        return {key: _normalize_for_json(val) for key, val in value.items()}
    return value
