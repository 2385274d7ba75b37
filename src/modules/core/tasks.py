"""Celery tasks of the core module."""

from __future__ import annotations

import structlog
from celery import shared_task
from django.conf import settings
from django.db import transaction

from modules.core.models import EventStatus, OutboxEvent
from shared.domain.events import DomainEvent
from shared.infrastructure.bus import event_bus

logger = structlog.get_logger(__name__)


@shared_task(name="core.publish_outbox_events")
def publish_outbox_events(batch_size: int | None = None) -> dict:
    """Relay pending outbox rows to the in-process event bus.

    Rows are processed oldest first.  A row whose handler raises is marked
    FAILED with the error and left for inspection; the batch continues.
    """
    limit = batch_size or settings.OUTBOX_BATCH_SIZE
    published = failed = 0

    with transaction.atomic():
        pending = list(
            OutboxEvent.objects.select_for_update(skip_locked=True)
            .filter(status=EventStatus.PENDING)
            .order_by("created_at", "id")[:limit]
        )
        for row in pending:
            log = logger.bind(outbox_id=str(row.id), event_type=row.event_type)
            try:
                event = DomainEvent.from_payload(row.event_type, row.payload)
                event_bus.publish(event)
            except Exception as exc:
                log.warning("outbox.publish_failed", error=str(exc))
                row.mark_as_failed(f"{type(exc).__name__}: {exc}")
                failed += 1
                continue
            row.mark_as_published()
            published += 1

    logger.info("outbox.relay_finished", published=published, failed=failed)
    return {"published": published, "failed": failed}
