"""Order domain constants.

Defines the order status choices, the ``IN_TRANSIT`` sub-phases and the
transition tables of the order state machine.
"""

from django.db import models


class OrderStatus(models.TextChoices):
    PLACED = "PLACED", "Placed"
    CONFIRMED = "CONFIRMED", "Confirmed"
    REJECTED = "REJECTED", "Rejected"
    IN_TRANSIT = "IN_TRANSIT", "In transit"
    COMPLETED = "COMPLETED", "Completed"


class TransitPhase(models.TextChoices):
    """Sub-phases of ``IN_TRANSIT``; empty outside that status."""

    ASSIGNED = "ASSIGNED", "Transporter assigned"
    ACCEPTED = "ACCEPTED", "Transporter accepted"
    PICKED_UP = "PICKED_UP", "Picked up"


VALID_TRANSITIONS: dict[str, set[str]] = {
    OrderStatus.PLACED: {OrderStatus.CONFIRMED, OrderStatus.REJECTED},
    OrderStatus.CONFIRMED: {OrderStatus.IN_TRANSIT},
    OrderStatus.IN_TRANSIT: {OrderStatus.COMPLETED},
    OrderStatus.REJECTED: set(),
    OrderStatus.COMPLETED: set(),
}

# Phase an IN_TRANSIT order must be in -> phase it moves to.
PHASE_TRANSITIONS: dict[str, str] = {
    TransitPhase.ASSIGNED: TransitPhase.ACCEPTED,
    TransitPhase.ACCEPTED: TransitPhase.PICKED_UP,
}

TERMINAL_STATES: set[str] = {OrderStatus.REJECTED, OrderStatus.COMPLETED}

ORDER_SEQUENCE = "order"
ORDER_FIRST_ID = 0
