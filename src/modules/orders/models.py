"""Order and OrderStatusHistory models.

Business rules implemented:
- Order ids are sequential from 0, allocated by the service from
  ``core.Sequence``.
- Status transitions follow ``VALID_TRANSITIONS``; ``IN_TRANSIT`` carries
  an explicit ``transit_phase`` (enforced at service layer).
- Each status or phase change generates an append-only history record
  with the acting principal.
- ``herder`` and ``transporter`` FKs use PROTECT: profiles are never
  deleted while orders reference them.
"""

from __future__ import annotations

from django.db import models

from modules.core.models import BaseModel, TimestampedModel
from modules.orders.constants import (
    PHASE_TRANSITIONS,
    TERMINAL_STATES,
    VALID_TRANSITIONS,
    OrderStatus,
    TransitPhase,
)
from modules.participants.constants import PRINCIPAL_MAX_LENGTH
from shared.domain.events import DomainEventMixin


class Order(DomainEventMixin, TimestampedModel):
    """Order aggregate root.

    ``buyer`` is the principal that placed the order.  ``transporter``,
    ``distance``, ``picked_up_quantity`` and ``ear_tags`` are filled in as
    the order moves through transport and delivery.
    """

    id: models.PositiveBigIntegerField = models.PositiveBigIntegerField(
        primary_key=True, editable=False
    )
    herder: models.ForeignKey = models.ForeignKey(
        "participants.Herder",
        on_delete=models.PROTECT,
        related_name="orders",
    )
    buyer: models.CharField = models.CharField(max_length=PRINCIPAL_MAX_LENGTH)
    quantity: models.PositiveIntegerField = models.PositiveIntegerField()
    status: models.CharField = models.CharField(
        max_length=20,
        choices=OrderStatus.choices,
        default=OrderStatus.PLACED,
    )
    transit_phase: models.CharField = models.CharField(
        max_length=20,
        choices=TransitPhase.choices,
        blank=True,
        default="",
    )
    transporter: models.ForeignKey = models.ForeignKey(
        "participants.Transporter",
        on_delete=models.PROTECT,
        related_name="orders",
        null=True,
        blank=True,
    )
    distance: models.PositiveIntegerField = models.PositiveIntegerField(
        null=True, blank=True
    )
    picked_up_quantity: models.PositiveIntegerField = models.PositiveIntegerField(
        null=True, blank=True
    )
    ear_tags: models.JSONField = models.JSONField(default=list, blank=True)

    class Meta:
        db_table = "orders"
        ordering = ["id"]
        indexes = [
            models.Index(fields=["status"], name="orders_status_idx"),
            models.Index(fields=["buyer"], name="orders_buyer_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity__gte=1),
                name="orders_quantity_positive",
            ),
        ]

    # ------------------------------------------------------------------
    # State Machine helpers
    # ------------------------------------------------------------------

    @property
    def is_terminal(self) -> bool:
        """Return ``True`` if the order is in a terminal state."""
        return self.status in TERMINAL_STATES

    def can_transition_to(self, new_status: str) -> bool:
        """Check whether transitioning to *new_status* is valid.

        Leaving ``IN_TRANSIT`` additionally requires the goods to have
        been picked up.
        """
        allowed = VALID_TRANSITIONS.get(self.status, set())
        if new_status not in allowed:
            return False
        if self.status == OrderStatus.IN_TRANSIT:
            return self.transit_phase == TransitPhase.PICKED_UP
        return True

    def can_advance_phase_to(self, new_phase: str) -> bool:
        """Check whether the ``IN_TRANSIT`` sub-phase may move to *new_phase*."""
        if self.status != OrderStatus.IN_TRANSIT:
            return False
        return PHASE_TRANSITIONS.get(self.transit_phase) == new_phase

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------

    def __str__(self) -> str:
        phase = f"/{self.transit_phase}" if self.transit_phase else ""
        return f"Order #{self.id} ({self.status}{phase})"


class OrderStatusHistory(BaseModel):
    """Append-only audit trail for order status and phase changes.

    Each record captures a single change with the responsible principal.
    ``old_status`` is ``None`` for the record written at placement.
    """

    order: models.ForeignKey = models.ForeignKey(
        "orders.Order",
        on_delete=models.CASCADE,
        related_name="status_history",
    )
    actor: models.CharField = models.CharField(max_length=PRINCIPAL_MAX_LENGTH)
    old_status: models.CharField = models.CharField(  # noqa: DJ01
        max_length=20,
        choices=OrderStatus.choices,
        null=True,
        blank=True,
    )
    new_status: models.CharField = models.CharField(
        max_length=20,
        choices=OrderStatus.choices,
    )
    old_phase: models.CharField = models.CharField(
        max_length=20, choices=TransitPhase.choices, blank=True, default=""
    )
    new_phase: models.CharField = models.CharField(
        max_length=20, choices=TransitPhase.choices, blank=True, default=""
    )
    notes: models.TextField = models.TextField(blank=True, default="")

    class Meta:
        db_table = "order_status_history"
        ordering = ["created_at", "id"]
        indexes = [
            models.Index(
                fields=["order", "created_at"],
                name="osh_order_created_idx",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.order} : {self.old_status} -> {self.new_status}"
