"""Domain events for the Orders bounded context."""

from __future__ import annotations

from dataclasses import dataclass

from shared.domain.events import DomainEvent


@dataclass(frozen=True)
class OrderStatusChanged(DomainEvent):
    """Base of every order lifecycle event.

    Subscribing to it receives every transition, sub-phase changes
    included.
    """

    old_status: str = ""
    new_status: str = ""
    transit_phase: str = ""


@dataclass(frozen=True)
class OrderPlaced(OrderStatusChanged):
    herder_id: int = 0
    quantity: int = 0


@dataclass(frozen=True)
class OrderConfirmed(OrderStatusChanged):
    pass


@dataclass(frozen=True)
class OrderRejected(OrderStatusChanged):
    pass


@dataclass(frozen=True)
class TransportationRequested(OrderStatusChanged):
    transporter_id: int = 0
    distance: int = 0


@dataclass(frozen=True)
class TransportationAccepted(OrderStatusChanged):
    pass


@dataclass(frozen=True)
class PickUpConfirmed(OrderStatusChanged):
    picked_up_quantity: int = 0


@dataclass(frozen=True)
class DeliveryConfirmed(OrderStatusChanged):
    ear_tags: tuple = ()
