"""Unit tests for the OutboxEvent model.

Rows are normally written by ``record_domain_events``; here they are
created directly to exercise the status bookkeeping the relay relies on.
"""

from __future__ import annotations

import uuid

import pytest

from modules.core.models import EventStatus, OutboxEvent

pytestmark = pytest.mark.unit


def _pick_up_event(**overrides) -> OutboxEvent:
    fields = {
        "event_type": "PickUpConfirmed",
        "payload": {"aggregate_id": 3, "actor": "0xtransporter", "quantity": 8},
        "aggregate_id": "3",
        "topic": "orders",
    }
    fields.update(overrides)
    return OutboxEvent.objects.create(**fields)


class TestNewOutboxEvent:
    def test_starts_pending_and_unprocessed(self):
        event = _pick_up_event()
        event.refresh_from_db()

        assert event.status == EventStatus.PENDING
        assert event.processed_at is None
        assert event.error_message is None
        assert event.retry_count == 0

    def test_primary_key_is_time_ordered_uuid(self):
        event = _pick_up_event()

        assert isinstance(event.id, uuid.UUID)
        assert event.id.version == 7

    def test_payload_round_trips_through_json_column(self):
        payload = {"aggregate_id": 3, "ear_tags": [101, 102], "transit_phase": ""}
        event = _pick_up_event(payload=payload)
        event.refresh_from_db()

        assert event.payload == payload

    def test_str_names_type_status_and_aggregate(self):
        assert str(_pick_up_event()) == "PickUpConfirmed [PENDING] (3)"


class TestOutboxEventBookkeeping:
    def test_published_row_gets_processed_at(self):
        event = _pick_up_event()
        before = event.updated_at

        event.mark_as_published()
        event.refresh_from_db()

        assert event.status == EventStatus.PUBLISHED
        assert event.processed_at is not None
        assert event.updated_at > before

    def test_each_failure_is_counted_and_last_error_kept(self):
        event = _pick_up_event()

        event.mark_as_failed("HerderNotFound: herder 9")
        event.mark_as_failed("TimeoutError: bus")
        event.refresh_from_db()

        assert event.status == EventStatus.FAILED
        assert event.retry_count == 2
        assert event.error_message == "TimeoutError: bus"

    def test_publishing_after_failure_clears_error_keeps_count(self):
        event = _pick_up_event()
        event.mark_as_failed("Handler crashed")

        event.mark_as_published()
        event.refresh_from_db()

        assert event.status == EventStatus.PUBLISHED
        assert event.error_message is None
        assert event.retry_count == 1

