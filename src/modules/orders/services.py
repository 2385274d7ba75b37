"""Order service layer (Use Cases).

Orchestrates the order lifecycle between a buyer, a herder and a
transporter.  All write operations are atomic: the service defines the
unit-of-work boundary and every check runs before anything is written.

Check order for each transition:
1. The order exists (``OrderNotFound``).
2. The order is in the required status / transit phase
   (``InvalidOrderStatus``).
3. The principal is the actor for that stage (``UnauthorizedActor``).
4. The arguments are well formed (``InvalidOrderArgument``).
5. Referenced profiles exist (``HerderNotFound``, ``TransporterNotFound``).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List, Optional, Sequence

import structlog
from django.db import transaction

from modules.orders.constants import OrderStatus, TransitPhase
from modules.orders.events import (
    DeliveryConfirmed,
    OrderConfirmed,
    OrderPlaced,
    OrderRejected,
    PickUpConfirmed,
    TransportationAccepted,
    TransportationRequested,
)
from modules.orders.exceptions import (
    InvalidOrderArgument,
    InvalidOrderStatus,
    OrderNotFound,
    UnauthorizedActor,
)
from modules.orders.models import Order
from modules.participants.exceptions import HerderNotFound, TransporterNotFound
from modules.participants.models import Herder, Transporter
from shared.domain.limits import POSITIVE_INT_MAX

if TYPE_CHECKING:
    from modules.orders.events import OrderStatusChanged
    from modules.orders.models import OrderStatusHistory
    from modules.orders.repositories.interfaces import IOrderRepository
    from modules.participants.repositories.interfaces import IParticipantRepository

logger = structlog.get_logger(__name__)


class OrderService:
    """Application service for Order use-cases.

    Receives repositories via constructor injection (DIP).  The acting
    principal is always an explicit argument.
    """

    def __init__(
        self,
        order_repository: IOrderRepository,
        participant_repository: IParticipantRepository,
    ) -> None:
        self._order_repo = order_repository
        self._participant_repo = participant_repository

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def place_order(self, principal: str, herder_id: int, quantity: int) -> Order:
        """Place an order for *quantity* head of livestock from a herder.

        Any principal may buy; the caller becomes the order's buyer.

        Raises:
            InvalidOrderArgument: *quantity* is not within 1..POSITIVE_INT_MAX.
            HerderNotFound: no registered herder has id *herder_id*.
        """
        log = logger.bind(principal=principal, herder_id=herder_id, quantity=quantity)

        if not _is_positive_int(quantity):
            raise InvalidOrderArgument(
                f"Quantity must be an integer between 1 and {POSITIVE_INT_MAX}."
            )

        herder = self._participant_repo.get_profile(Herder, herder_id)
        if not herder or not herder.registered:
            raise HerderNotFound(f"Herder {herder_id} not found.")

        order = self._order_repo.create(
            Order(herder=herder, buyer=principal, quantity=quantity)
        )
        self._record(
            order,
            principal,
            OrderPlaced,
            old_status=None,
            notes="Order placed",
            herder_id=herder.id,
            quantity=quantity,
        )
        log.info("order.placed", order_id=order.id)
        return order

    @transaction.atomic
    def confirm_order(self, order_id: int, principal: str, accept: bool) -> Order:
        """Accept or reject a ``PLACED`` order as its herder.

        Raises:
            OrderNotFound, InvalidOrderStatus, UnauthorizedActor.
        """
        order = self._lock(order_id)
        new_status = OrderStatus.CONFIRMED if accept else OrderStatus.REJECTED
        self._require_transition(order, new_status)
        self._require_actor(order, principal, order.herder.principal, "herder")

        old_status = order.status
        order.status = new_status
        event = OrderConfirmed if accept else OrderRejected
        self._record(order, principal, event, old_status=old_status)

        logger.info(
            "order.confirmed" if accept else "order.rejected",
            order_id=order.id,
            principal=principal,
        )
        return order

    @transaction.atomic
    def request_transportation(
        self,
        order_id: int,
        principal: str,
        transporter_principal: str,
        distance: int,
    ) -> Order:
        """Assign a transporter to a ``CONFIRMED`` order as its buyer.

        Raises:
            OrderNotFound, InvalidOrderStatus, UnauthorizedActor.
            InvalidOrderArgument: *distance* is not within 1..POSITIVE_INT_MAX.
            TransporterNotFound: *transporter_principal* owns no registered
                transporter.
        """
        order = self._lock(order_id)
        self._require_transition(order, OrderStatus.IN_TRANSIT)
        self._require_actor(order, principal, order.buyer, "buyer")

        if not _is_positive_int(distance):
            raise InvalidOrderArgument(
                f"Distance must be an integer between 1 and {POSITIVE_INT_MAX}."
            )

        transporter = self._participant_repo.get_profile_by_principal(
            Transporter, transporter_principal
        )
        if not transporter or not transporter.registered:
            raise TransporterNotFound(
                f"No transporter registered for {transporter_principal}."
            )

        old_status = order.status
        order.status = OrderStatus.IN_TRANSIT
        order.transit_phase = TransitPhase.ASSIGNED
        order.transporter = transporter
        order.distance = distance
        self._record(
            order,
            principal,
            TransportationRequested,
            old_status=old_status,
            transporter_id=transporter.id,
            distance=distance,
        )
        logger.info(
            "order.transportation_requested",
            order_id=order.id,
            transporter_id=transporter.id,
            distance=distance,
        )
        return order

    @transaction.atomic
    def confirm_transportation_request(self, order_id: int, principal: str) -> Order:
        """Accept the transport job as the assigned transporter.

        Raises:
            OrderNotFound, InvalidOrderStatus, UnauthorizedActor.
        """
        order = self._lock(order_id)
        self._require_phase(order, TransitPhase.ACCEPTED)
        self._require_actor(order, principal, order.transporter.principal, "transporter")

        old_phase = order.transit_phase
        order.transit_phase = TransitPhase.ACCEPTED
        self._record(
            order,
            principal,
            TransportationAccepted,
            old_status=order.status,
            old_phase=old_phase,
        )
        logger.info("order.transportation_accepted", order_id=order.id)
        return order

    confirm_delivery_request = confirm_transportation_request

    @transaction.atomic
    def confirm_pick_up(self, order_id: int, principal: str, quantity: int) -> Order:
        """Record the number of head picked up from the herder.

        Raises:
            OrderNotFound, InvalidOrderStatus, UnauthorizedActor.
            InvalidOrderArgument: *quantity* is not within 1..ordered.
        """
        order = self._lock(order_id)
        self._require_phase(order, TransitPhase.PICKED_UP)
        self._require_actor(order, principal, order.transporter.principal, "transporter")

        if not _is_positive_int(quantity) or quantity > order.quantity:
            raise InvalidOrderArgument(
                f"Picked up quantity must be between 1 and {order.quantity}."
            )

        old_phase = order.transit_phase
        order.transit_phase = TransitPhase.PICKED_UP
        order.picked_up_quantity = quantity
        self._record(
            order,
            principal,
            PickUpConfirmed,
            old_status=order.status,
            old_phase=old_phase,
            picked_up_quantity=quantity,
        )
        logger.info("order.picked_up", order_id=order.id, quantity=quantity)
        return order

    @transaction.atomic
    def confirm_delivery(
        self, order_id: int, principal: str, ear_tags: Sequence[int]
    ) -> Order:
        """Complete the order as its buyer, recording the delivered ear tags.

        Raises:
            OrderNotFound, InvalidOrderStatus, UnauthorizedActor.
            InvalidOrderArgument: *ear_tags* is empty, has duplicates or
                negative values, or exceeds the picked up quantity.
        """
        order = self._lock(order_id)
        self._require_transition(order, OrderStatus.COMPLETED)
        self._require_actor(order, principal, order.buyer, "buyer")

        tags = list(ear_tags)
        _validate_ear_tags(tags, order.picked_up_quantity or 0)

        old_status, old_phase = order.status, order.transit_phase
        order.status = OrderStatus.COMPLETED
        order.transit_phase = ""
        order.ear_tags = tags
        self._record(
            order,
            principal,
            DeliveryConfirmed,
            old_status=old_status,
            old_phase=old_phase,
            ear_tags=tuple(tags),
        )
        logger.info("order.completed", order_id=order.id, ear_tag_count=len(tags))
        return order

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_order(self, order_id: int) -> Order:
        """Retrieve a single order by id.

        Raises:
            OrderNotFound: if the order does not exist.
        """
        order = self._order_repo.get_by_id(order_id)
        if not order:
            raise OrderNotFound(f"Order {order_id} not found.")
        return order

    def list_orders(self, filters: Optional[Dict[str, Any]] = None) -> List[Order]:
        """Return a list of orders, optionally filtered."""
        return self._order_repo.list(filters)

    def next_order_id(self) -> int:
        """The id the next order will get, equal to the number of orders placed."""
        return self._order_repo.next_id()

    def get_history(self, order_id: int) -> List[OrderStatusHistory]:
        """Raises ``OrderNotFound`` for an unknown order."""
        order = self.get_order(order_id)
        return self._order_repo.get_history(order.id)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _lock(self, order_id: int) -> Order:
        order = self._order_repo.get_for_update(order_id)
        if not order:
            raise OrderNotFound(f"Order {order_id} not found.")
        return order

    def _require_transition(self, order: Order, new_status: str) -> None:
        if not order.can_transition_to(new_status):
            logger.warning(
                "order.invalid_transition",
                order_id=order.id,
                current_status=order.status,
                transit_phase=order.transit_phase,
                new_status=new_status,
            )
            raise InvalidOrderStatus(
                f"Cannot move order {order.id} from {_describe(order)} to {new_status}."
            )

    def _require_phase(self, order: Order, new_phase: str) -> None:
        if not order.can_advance_phase_to(new_phase):
            logger.warning(
                "order.invalid_transition",
                order_id=order.id,
                current_status=order.status,
                transit_phase=order.transit_phase,
                new_phase=new_phase,
            )
            raise InvalidOrderStatus(
                f"Cannot move order {order.id} from {_describe(order)} to {new_phase}."
            )

    def _require_actor(
        self, order: Order, principal: str, expected: str, stage_role: str
    ) -> None:
        if principal != expected:
            logger.warning(
                "order.unauthorized_actor",
                order_id=order.id,
                principal=principal,
                required=stage_role,
            )
            raise UnauthorizedActor(
                f"Only the order's {stage_role} may perform this action on order {order.id}."
            )

    def _record(
        self,
        order: Order,
        principal: str,
        event_class: type[OrderStatusChanged],
        old_status: Optional[str],
        old_phase: str = "",
        notes: str = "",
        **event_fields: Any,
    ) -> None:
        """Save the order with its lifecycle event and append a history row."""
        order.add_domain_event(
            event_class(
                aggregate_id=order.id,
                actor=principal,
                old_status=old_status or "",
                new_status=order.status,
                transit_phase=order.transit_phase,
                **event_fields,
            )
        )
        self._order_repo.save(order)
        self._order_repo.add_history(
            order,
            actor=principal,
            old_status=old_status,
            old_phase=old_phase,
            notes=notes,
        )


def _is_positive_int(value: Any) -> bool:
    """A non-bool int that fits a ``PositiveIntegerField`` and is not zero."""
    return (
        isinstance(value, int)
        and not isinstance(value, bool)
        and 0 < value <= POSITIVE_INT_MAX
    )


def _validate_ear_tags(tags: List[Any], picked_up: int) -> None:
    if not tags:
        raise InvalidOrderArgument("At least one ear tag is required.")
    for tag in tags:
        if not isinstance(tag, int) or isinstance(tag, bool) or tag < 0:
            raise InvalidOrderArgument(f"Ear tag {tag!r} is not a non-negative integer.")
    if len(set(tags)) != len(tags):
        raise InvalidOrderArgument("Ear tags must be distinct.")
    if len(tags) > picked_up:
        raise InvalidOrderArgument(
            f"Got {len(tags)} ear tags for {picked_up} head picked up."
        )


def _describe(order: Order) -> str:
    if order.transit_phase:
        return f"{order.status}/{order.transit_phase}"
    return order.status
