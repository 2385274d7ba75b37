"""Django ORM implementation of the Order repository.

Satisfies ``IOrderRepository`` using Django's QuerySet API.  Order ids
come from the ``order`` sequence, so an order placed in a transaction
that rolls back does not consume an id.

Concurrency control on transitions uses ``select_for_update()``; there
is no ``version`` field on the model.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import structlog
from django.db import transaction

from modules.core.models import Sequence
from modules.core.outbox import record_domain_events
from modules.orders.constants import ORDER_FIRST_ID, ORDER_SEQUENCE
from modules.orders.models import Order, OrderStatusHistory
from modules.orders.repositories.interfaces import IOrderRepository
from shared.domain.limits import parse_id

logger = structlog.get_logger(__name__)

OUTBOX_TOPIC = "orders"


class OrderDjangoRepository(IOrderRepository):
    """Concrete Order repository backed by Django ORM."""

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    @transaction.atomic
    def create(self, order: Order) -> Order:
        order.id = Sequence.allocate(ORDER_SEQUENCE, start=ORDER_FIRST_ID)
        order.save(force_insert=True)
        logger.info("order.created", order_id=order.id, buyer=order.buyer)
        return order

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def get_by_id(self, id: int) -> Optional[Order]:
        """Returns ``None`` for non-existent or malformed ids."""
        order_id = parse_id(id)
        if order_id is None:
            return None
        return (
            Order.objects.select_related("herder", "transporter")
            .filter(id=order_id)
            .first()
        )

    def get_for_update(self, id: int) -> Optional[Order]:
        """Retrieve an order with a row-level lock (SELECT FOR UPDATE).

        ``of=("self",)`` keeps the lock off the joined profile rows.
        Returns ``None`` for non-existent or malformed ids.
        """
        order_id = parse_id(id)
        if order_id is None:
            return None
        return (
            Order.objects.select_for_update(of=("self",))
            .select_related("herder", "transporter")
            .filter(id=order_id)
            .first()
        )

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Order]:
        """List orders with optional Django ORM look-ups.

        Examples of valid filters::

            {"status": "PLACED"}
            {"buyer": "slaughterhouse-1"}
            {"herder_id": 1}
        """
        queryset = Order.objects.select_related("herder", "transporter").order_by("id")
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset)

    def next_id(self) -> int:
        return Sequence.peek(ORDER_SEQUENCE, start=ORDER_FIRST_ID)

    # ------------------------------------------------------------------
    # Save (IRepository contract)
    # ------------------------------------------------------------------

    @transaction.atomic
    def save(self, entity: Order) -> Order:
        """Persist an order and write its pending events to the outbox."""
        entity.save()
        events = record_domain_events(entity, OUTBOX_TOPIC)
        logger.info("order.saved", order_id=entity.id, event_count=events)
        return entity

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------

    @transaction.atomic
    def add_history(
        self,
        order: Order,
        actor: str,
        old_status: Optional[str],
        old_phase: str = "",
        notes: str = "",
    ) -> OrderStatusHistory:
        history = OrderStatusHistory.objects.create(
            order=order,
            actor=actor,
            old_status=old_status,
            new_status=order.status,
            old_phase=old_phase,
            new_phase=order.transit_phase,
            notes=notes,
        )
        logger.info(
            "order.history_added",
            order_id=order.id,
            old_status=old_status,
            new_status=order.status,
            new_phase=order.transit_phase,
        )
        return history

    def get_history(self, order_id: int) -> List[OrderStatusHistory]:
        return list(
            OrderStatusHistory.objects.filter(order_id=order_id).order_by(
                "created_at", "id"
            )
        )
