"""Base abstract models and shared persistence infrastructure.

Provides:
- ``TimestampedModel``: created_at / updated_at bookkeeping.
- ``BaseModel``: UUIDv7 primary key on top of the timestamps, for
  records that are never addressed by a business id (audit rows, outbox).
- ``Sequence``: named counters that hand out the sequential numeric ids
  used as the public handle of profiles and orders.
- ``OutboxEvent``: Transactional Outbox pattern for reliable domain events.
"""

from __future__ import annotations

import uuid6
from django.db import models, transaction
from django.utils import timezone

# ---------------------------------------------------------------------------
# Base models
# ---------------------------------------------------------------------------


class TimestampedModel(models.Model):
    """Abstract base with timestamp bookkeeping only (no primary key)."""

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True

    def save(self, *args, **kwargs) -> None:
        """Ensure ``updated_at`` is refreshed even when ``update_fields`` is passed."""
        update_fields = kwargs.get("update_fields")
        if update_fields is not None and "updated_at" not in update_fields:
            kwargs["update_fields"] = list(update_fields) + ["updated_at"]
        super().save(*args, **kwargs)


class BaseModel(TimestampedModel):
    """Abstract base with UUIDv7 PK and timestamp bookkeeping."""

    id = models.UUIDField(
        primary_key=True,
        default=uuid6.uuid7,
        editable=False,
    )

    class Meta:
        abstract = True


# ---------------------------------------------------------------------------
# Sequential ids
# ---------------------------------------------------------------------------


class Sequence(models.Model):
    """Named monotonic counter.

    ``allocate`` locks the row for the rest of the caller's transaction, so
    two writers never receive the same value.  If the caller's transaction
    rolls back, so does the increment: committed ids have no gaps.
    """

    name = models.CharField(max_length=50, primary_key=True)
    next_value = models.PositiveBigIntegerField(default=0)

    class Meta:
        db_table = "sequences"

    @classmethod
    def allocate(cls, name: str, start: int = 1) -> int:
        """Return the next value of *name* and advance the counter."""
        with transaction.atomic():
            sequence, _ = cls.objects.select_for_update().get_or_create(
                name=name, defaults={"next_value": start}
            )
            value = sequence.next_value
            sequence.next_value = value + 1
            sequence.save(update_fields=["next_value"])
        return value

    @classmethod
    def peek(cls, name: str, start: int = 1) -> int:
        """Return the value ``allocate`` would hand out next, without locking."""
        value = cls.objects.filter(name=name).values_list("next_value", flat=True).first()
        return start if value is None else value

    def __str__(self) -> str:
        return f"{self.name}={self.next_value}"


# ---------------------------------------------------------------------------
# Transactional Outbox
# ---------------------------------------------------------------------------


class EventStatus(models.TextChoices):
    PENDING = "PENDING", "Pending"
    PUBLISHED = "PUBLISHED", "Published"
    FAILED = "FAILED", "Failed"


class OutboxEvent(BaseModel):
    """Transactional Outbox for reliable domain event delivery.

    Events are persisted in the **same database transaction** as the
    registry or order change that produced them.  The
    ``core.publish_outbox_events`` Celery task relays ``PENDING`` rows to
    the in-process event bus.

    Workflow:
    1. Repository creates ``OutboxEvent`` inside ``transaction.atomic()``.
    2. Relay task queries ``status=PENDING`` ordered by ``created_at``.
    3. On success -> ``mark_as_published()``.
    4. On failure -> ``mark_as_failed(error)`` increments ``retry_count``.
    """

    event_type = models.CharField(max_length=100)
    payload = models.JSONField()
    aggregate_id = models.CharField(max_length=255)
    topic = models.CharField(max_length=100)
    status = models.CharField(
        max_length=20,
        choices=EventStatus.choices,
        default=EventStatus.PENDING,
    )
    processed_at = models.DateTimeField(null=True, blank=True, default=None)
    error_message = models.TextField(null=True, blank=True, default=None)  # noqa: DJ01
    retry_count = models.PositiveIntegerField(default=0)

    class Meta:
        db_table = "outbox_events"
        ordering = ["created_at"]
        indexes = [
            models.Index(
                fields=["event_type"],
                name="outbox_event_type_idx",
            ),
            models.Index(
                fields=["aggregate_id"],
                name="outbox_aggregate_id_idx",
            ),
            models.Index(
                fields=["status", "created_at"],
                name="outbox_status_created_idx",
            ),
        ]

    # ------------------------------------------------------------------
    # State transitions
    # ------------------------------------------------------------------

    def mark_as_published(self) -> None:
        """Mark event as successfully published."""
        self.status = EventStatus.PUBLISHED
        self.processed_at = timezone.now()
        self.error_message = None
        self.save(update_fields=["status", "processed_at", "error_message", "updated_at"])

    def mark_as_failed(self, error: str) -> None:
        """Mark event as failed and record the error."""
        self.status = EventStatus.FAILED
        self.error_message = error
        self.retry_count += 1
        self.save(
            update_fields=[
                "status",
                "error_message",
                "retry_count",
                "updated_at",
            ]
        )

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------

    def __str__(self) -> str:
        return f"{self.event_type} [{self.status}] ({self.aggregate_id})"
