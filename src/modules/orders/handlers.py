"""Event handlers for Orders domain events."""

from __future__ import annotations

import structlog

from modules.orders.events import DeliveryConfirmed, OrderStatusChanged
from shared.domain.bus import IEventHandler

logger = structlog.get_logger(__name__)


class OrderStatusChangedHandler(IEventHandler[OrderStatusChanged]):
    """Subscribed to the base class, so it sees every lifecycle event."""

    def handle(self, event: OrderStatusChanged) -> None:
        logger.info(
            f"Order {event.aggregate_id}: {event.event_name}",
            order_id=event.aggregate_id,
            old_status=event.old_status,
            new_status=event.new_status,
            transit_phase=event.transit_phase,
            actor=event.actor,
        )


class DeliveryConfirmedHandler(IEventHandler[DeliveryConfirmed]):
    def handle(self, event: DeliveryConfirmed) -> None:
        logger.info(
            f"Order {event.aggregate_id} delivered",
            order_id=event.aggregate_id,
            ear_tags=list(event.ear_tags),
        )


order_status_changed_handler = OrderStatusChangedHandler()
delivery_confirmed_handler = DeliveryConfirmedHandler()
