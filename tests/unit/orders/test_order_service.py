"""Unit tests for OrderService.

Covers:
- Placement with sequential ids starting at 0.
- The full lifecycle PLACED -> CONFIRMED -> IN_TRANSIT -> COMPLETED.
- Rejection and terminal states.
- Actor checks at every stage.
- Argument validation (quantities, distance, ear tags).
- Check order: state before actor before arguments.
- History and outbox records for every transition.
"""

from __future__ import annotations

import pytest

from modules.core.models import OutboxEvent
from modules.orders.constants import OrderStatus, TransitPhase
from modules.orders.exceptions import (
    InvalidOrderArgument,
    InvalidOrderStatus,
    OrderNotFound,
    UnauthorizedActor,
)
from modules.orders.models import Order
from modules.participants.constants import Role
from modules.participants.dtos import RegisterTransporterDTO
from modules.participants.exceptions import HerderNotFound, TransporterNotFound
from shared.domain.exceptions import (
    InvalidArgumentError,
    InvalidStateError,
    NotFoundError,
    PermissionDeniedError,
)
from shared.domain.limits import POSITIVE_INT_MAX

pytestmark = pytest.mark.unit

BUYER = "0xbuyer"
STRANGER = "0xstranger"


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def placed(order_service, herder):
    return order_service.place_order(BUYER, herder.id, 10)


@pytest.fixture()
def confirmed(order_service, placed, herder):
    return order_service.confirm_order(placed.id, herder.principal, accept=True)


@pytest.fixture()
def assigned(order_service, confirmed, transporter):
    return order_service.request_transportation(
        confirmed.id, BUYER, transporter.principal, 100
    )


@pytest.fixture()
def accepted(order_service, assigned, transporter):
    return order_service.confirm_transportation_request(assigned.id, transporter.principal)


@pytest.fixture()
def picked_up(order_service, accepted, transporter):
    return order_service.confirm_pick_up(accepted.id, transporter.principal, 10)


@pytest.fixture()
def completed(order_service, picked_up):
    return order_service.confirm_delivery(picked_up.id, BUYER, [123, 124])


# ---------------------------------------------------------------------------
# Placement
# ---------------------------------------------------------------------------


class TestPlaceOrder:
    def test_place_order(self, order_service, herder):
        order = order_service.place_order(BUYER, herder.id, 10)

        assert order.id == 0
        assert order.status == OrderStatus.PLACED
        assert order.transit_phase == ""
        assert order.buyer == BUYER
        assert order.herder_id == herder.id
        assert order.quantity == 10

    def test_ids_increase_from_zero(self, order_service, herder):
        assert order_service.next_order_id() == 0

        ids = [order_service.place_order(BUYER, herder.id, 1).id for _ in range(3)]

        assert ids == [0, 1, 2]
        assert order_service.next_order_id() == 3

    def test_any_principal_may_buy(self, order_service, herder, slaughterhouse, transporter):
        by_slaughterhouse = order_service.place_order(slaughterhouse.principal, herder.id, 5)
        by_transporter = order_service.place_order(transporter.principal, herder.id, 5)

        assert by_slaughterhouse.buyer == slaughterhouse.principal
        assert by_transporter.buyer == transporter.principal

    def test_unknown_herder(self, order_service, herder):
        with pytest.raises(HerderNotFound) as exc_info:
            order_service.place_order(BUYER, herder.id + 1, 10)

        assert isinstance(exc_info.value, NotFoundError)
        assert order_service.next_order_id() == 0

    @pytest.mark.parametrize("quantity", [0, -3, True, 2.0, POSITIVE_INT_MAX + 1, 10**20])
    def test_invalid_quantity(self, order_service, herder, quantity):
        with pytest.raises(InvalidOrderArgument) as exc_info:
            order_service.place_order(BUYER, herder.id, quantity)

        assert isinstance(exc_info.value, InvalidArgumentError)
        assert not Order.objects.exists()

    def test_largest_storable_quantity(self, order_service, herder):
        order = order_service.place_order(BUYER, herder.id, POSITIVE_INT_MAX)

        order.refresh_from_db()
        assert order.quantity == POSITIVE_INT_MAX

    @pytest.mark.parametrize("herder_id", [10**20, -1, 1.0, True, "1.0"])
    def test_herder_id_outside_id_range(self, order_service, herder, herder_id):
        with pytest.raises(HerderNotFound):
            order_service.place_order(BUYER, herder_id, 10)

    def test_failed_placement_does_not_consume_an_id(self, order_service, herder):
        order_service.place_order(BUYER, herder.id, 1)
        with pytest.raises(HerderNotFound):
            order_service.place_order(BUYER, 999, 1)

        assert order_service.place_order(BUYER, herder.id, 1).id == 1


# ---------------------------------------------------------------------------
# Lifecycle
# ---------------------------------------------------------------------------


class TestLifecycle:
    def test_end_to_end(self, order_service, completed, transporter):
        order = order_service.get_order(completed.id)

        assert order.status == OrderStatus.COMPLETED
        assert order.transit_phase == ""
        assert order.transporter_id == transporter.id
        assert order.distance == 100
        assert order.picked_up_quantity == 10
        assert order.ear_tags == [123, 124]
        assert order.is_terminal

    def test_confirm(self, confirmed):
        assert confirmed.status == OrderStatus.CONFIRMED

    def test_request_transportation(self, assigned, transporter):
        assert assigned.status == OrderStatus.IN_TRANSIT
        assert assigned.transit_phase == TransitPhase.ASSIGNED
        assert assigned.transporter == transporter
        assert assigned.distance == 100

    def test_confirm_transportation_request(self, accepted):
        assert accepted.status == OrderStatus.IN_TRANSIT
        assert accepted.transit_phase == TransitPhase.ACCEPTED

    def test_confirm_delivery_request_is_an_alias(self, order_service, assigned, transporter):
        order = order_service.confirm_delivery_request(assigned.id, transporter.principal)
        assert order.transit_phase == TransitPhase.ACCEPTED

    def test_confirm_pick_up(self, picked_up):
        assert picked_up.transit_phase == TransitPhase.PICKED_UP
        assert picked_up.picked_up_quantity == 10

    def test_partial_pick_up(self, order_service, accepted, transporter):
        order = order_service.confirm_pick_up(accepted.id, transporter.principal, 4)
        assert order.picked_up_quantity == 4

    def test_reject(self, order_service, placed, herder, transporter):
        order = order_service.confirm_order(placed.id, herder.principal, accept=False)

        assert order.status == OrderStatus.REJECTED
        assert order.is_terminal

    def test_rejected_order_is_frozen(self, order_service, placed, herder, transporter):
        order_service.confirm_order(placed.id, herder.principal, accept=False)

        with pytest.raises(InvalidOrderStatus) as exc_info:
            order_service.confirm_order(placed.id, herder.principal, accept=True)
        assert isinstance(exc_info.value, InvalidStateError)

        with pytest.raises(InvalidOrderStatus):
            order_service.request_transportation(placed.id, BUYER, transporter.principal, 1)
        with pytest.raises(InvalidOrderStatus):
            order_service.confirm_transportation_request(placed.id, transporter.principal)
        with pytest.raises(InvalidOrderStatus):
            order_service.confirm_pick_up(placed.id, transporter.principal, 1)
        with pytest.raises(InvalidOrderStatus):
            order_service.confirm_delivery(placed.id, BUYER, [1])

    def test_completed_order_is_frozen(self, order_service, completed, transporter):
        with pytest.raises(InvalidOrderStatus):
            order_service.confirm_delivery(completed.id, BUYER, [5])
        with pytest.raises(InvalidOrderStatus):
            order_service.confirm_pick_up(completed.id, transporter.principal, 1)

    def test_stages_cannot_be_skipped(self, order_service, placed, herder, transporter):
        with pytest.raises(InvalidOrderStatus):
            order_service.request_transportation(placed.id, BUYER, transporter.principal, 10)
        with pytest.raises(InvalidOrderStatus):
            order_service.confirm_delivery(placed.id, BUYER, [1])

    def test_stages_cannot_be_repeated(self, order_service, accepted, transporter):
        with pytest.raises(InvalidOrderStatus):
            order_service.confirm_transportation_request(accepted.id, transporter.principal)

    def test_pick_up_requires_acceptance(self, order_service, assigned, transporter):
        with pytest.raises(InvalidOrderStatus):
            order_service.confirm_pick_up(assigned.id, transporter.principal, 10)

    def test_delivery_requires_pick_up(self, order_service, accepted):
        with pytest.raises(InvalidOrderStatus):
            order_service.confirm_delivery(accepted.id, BUYER, [1])


# ---------------------------------------------------------------------------
# Actors
# ---------------------------------------------------------------------------


class TestActors:
    def test_only_herder_confirms(self, order_service, placed, transporter):
        for principal in (BUYER, STRANGER, transporter.principal):
            with pytest.raises(UnauthorizedActor) as exc_info:
                order_service.confirm_order(placed.id, principal, accept=True)
            assert isinstance(exc_info.value, PermissionDeniedError)

    def test_only_buyer_requests_transportation(
        self, order_service, confirmed, herder, transporter
    ):
        for principal in (herder.principal, STRANGER, transporter.principal):
            with pytest.raises(UnauthorizedActor):
                order_service.request_transportation(
                    confirmed.id, principal, transporter.principal, 100
                )

    def test_only_assigned_transporter_accepts(
        self, order_service, participant_service, assigned
    ):
        participant_service.choose_role("0xother-truck", Role.TRANSPORTER)
        participant_service.register_transporter(
            "0xother-truck", RegisterTransporterDTO(location="Darkhan", truck_info="Kamaz")
        )
        for principal in (BUYER, STRANGER, "0xother-truck"):
            with pytest.raises(UnauthorizedActor):
                order_service.confirm_transportation_request(assigned.id, principal)

    def test_only_assigned_transporter_picks_up(self, order_service, accepted, herder):
        for principal in (BUYER, herder.principal, STRANGER):
            with pytest.raises(UnauthorizedActor):
                order_service.confirm_pick_up(accepted.id, principal, 10)

    def test_only_buyer_confirms_delivery(self, order_service, picked_up, transporter):
        for principal in (transporter.principal, STRANGER):
            with pytest.raises(UnauthorizedActor):
                order_service.confirm_delivery(picked_up.id, principal, [1])

    def test_state_is_checked_before_actor(self, order_service, placed):
        with pytest.raises(InvalidOrderStatus):
            order_service.confirm_delivery(placed.id, STRANGER, [1])

    def test_actor_is_checked_before_arguments(self, order_service, accepted):
        with pytest.raises(UnauthorizedActor):
            order_service.confirm_pick_up(accepted.id, STRANGER, 0)


# ---------------------------------------------------------------------------
# Arguments
# ---------------------------------------------------------------------------


class TestArguments:
    @pytest.mark.parametrize("distance", [0, -1, POSITIVE_INT_MAX + 1, 10**20])
    def test_invalid_distance(self, order_service, confirmed, transporter, distance):
        with pytest.raises(InvalidOrderArgument):
            order_service.request_transportation(
                confirmed.id, BUYER, transporter.principal, distance
            )

    def test_unregistered_transporter(self, order_service, confirmed, herder):
        with pytest.raises(TransporterNotFound):
            order_service.request_transportation(confirmed.id, BUYER, herder.principal, 10)

        order = order_service.get_order(confirmed.id)
        assert order.status == OrderStatus.CONFIRMED
        assert order.transporter is None

    def test_argument_checked_before_transporter(self, order_service, confirmed):
        with pytest.raises(InvalidOrderArgument):
            order_service.request_transportation(confirmed.id, BUYER, STRANGER, 0)

    @pytest.mark.parametrize("quantity", [0, 11])
    def test_pick_up_quantity_out_of_range(
        self, order_service, accepted, transporter, quantity
    ):
        with pytest.raises(InvalidOrderArgument):
            order_service.confirm_pick_up(accepted.id, transporter.principal, quantity)

        assert order_service.get_order(accepted.id).transit_phase == TransitPhase.ACCEPTED

    @pytest.mark.parametrize(
        "ear_tags",
        [[], [1, 1], [-1], [1] + list(range(2, 12)), ["a"]],
        ids=["empty", "duplicate", "negative", "too-many", "not-int"],
    )
    def test_invalid_ear_tags(self, order_service, picked_up, ear_tags):
        with pytest.raises(InvalidOrderArgument):
            order_service.confirm_delivery(picked_up.id, BUYER, ear_tags)

        assert order_service.get_order(picked_up.id).status == OrderStatus.IN_TRANSIT

    def test_ear_tags_limited_by_picked_up_quantity(
        self, order_service, accepted, transporter
    ):
        order_service.confirm_pick_up(accepted.id, transporter.principal, 2)

        with pytest.raises(InvalidOrderArgument):
            order_service.confirm_delivery(accepted.id, BUYER, [1, 2, 3])

        order = order_service.confirm_delivery(accepted.id, BUYER, [1, 2])
        assert order.status == OrderStatus.COMPLETED


# ---------------------------------------------------------------------------
# Missing orders
# ---------------------------------------------------------------------------


class TestOrderNotFound:
    @pytest.mark.parametrize(
        ("method", "args"),
        [
            ("get_order", ()),
            ("get_history", ()),
            ("confirm_order", ("0xh", True)),
            ("request_transportation", (BUYER, "0xt", 1)),
            ("confirm_transportation_request", ("0xt",)),
            ("confirm_pick_up", ("0xt", 1)),
            ("confirm_delivery", (BUYER, [1])),
        ],
    )
    def test_missing_order(self, order_service, method, args):
        with pytest.raises(OrderNotFound) as exc_info:
            getattr(order_service, method)(42, *args)

        assert isinstance(exc_info.value, NotFoundError)

    @pytest.mark.parametrize(
        "order_id", ["not-a-number", "-1", "1e3", " 0", 0.9, 0.0, True, False, 10**20]
    )
    def test_malformed_id(self, order_service, placed, order_id):
        with pytest.raises(OrderNotFound):
            order_service.get_order(order_id)

    def test_digit_string_id(self, order_service, placed):
        assert order_service.get_order("0") == placed


# ---------------------------------------------------------------------------
# History and events
# ---------------------------------------------------------------------------


class TestHistoryAndEvents:
    def test_history_records_every_step(self, order_service, completed, herder, transporter):
        history = order_service.get_history(completed.id)

        assert [(h.old_status, h.new_status, h.new_phase, h.actor) for h in history] == [
            (None, OrderStatus.PLACED, "", BUYER),
            (OrderStatus.PLACED, OrderStatus.CONFIRMED, "", herder.principal),
            (OrderStatus.CONFIRMED, OrderStatus.IN_TRANSIT, TransitPhase.ASSIGNED, BUYER),
            (
                OrderStatus.IN_TRANSIT,
                OrderStatus.IN_TRANSIT,
                TransitPhase.ACCEPTED,
                transporter.principal,
            ),
            (
                OrderStatus.IN_TRANSIT,
                OrderStatus.IN_TRANSIT,
                TransitPhase.PICKED_UP,
                transporter.principal,
            ),
            (OrderStatus.IN_TRANSIT, OrderStatus.COMPLETED, "", BUYER),
        ]
        assert history[-1].old_phase == TransitPhase.PICKED_UP

    def test_failed_transition_writes_nothing(self, order_service, placed):
        events_before = OutboxEvent.objects.count()

        with pytest.raises(UnauthorizedActor):
            order_service.confirm_order(placed.id, STRANGER, accept=True)

        assert OutboxEvent.objects.count() == events_before
        assert len(order_service.get_history(placed.id)) == 1

    def test_lifecycle_events_in_outbox(self, completed):
        rows = OutboxEvent.objects.filter(topic="orders").order_by("created_at", "id")

        assert [row.event_type for row in rows] == [
            "OrderPlaced",
            "OrderConfirmed",
            "TransportationRequested",
            "TransportationAccepted",
            "PickUpConfirmed",
            "DeliveryConfirmed",
        ]
        assert all(row.aggregate_id == str(completed.id) for row in rows)
        assert rows.last().payload["ear_tags"] == [123, 124]

    def test_rejection_event(self, order_service, placed, herder):
        order_service.confirm_order(placed.id, herder.principal, accept=False)

        row = OutboxEvent.objects.get(event_type="OrderRejected")
        assert row.payload["old_status"] == "PLACED"
        assert row.payload["new_status"] == "REJECTED"
        assert row.payload["actor"] == herder.principal


class TestListOrders:
    def test_list_with_filters(self, order_service, herder, slaughterhouse):
        first = order_service.place_order(BUYER, herder.id, 1)
        second = order_service.place_order(slaughterhouse.principal, herder.id, 2)
        order_service.confirm_order(second.id, herder.principal, accept=True)

        assert order_service.list_orders() == [first, second]
        assert order_service.list_orders({"buyer": BUYER}) == [first]
        assert order_service.list_orders({"status": OrderStatus.CONFIRMED}) == [second]
