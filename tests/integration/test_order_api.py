"""Integration tests for Order API endpoints.

Covers:
- The full lifecycle over HTTP, each step as the authenticated actor.
- Listing with filters, retrieval, next id and history.
- Domain exception mapping (400, 403, 404, 409).
- Authentication enforcement (401 without token).
"""

from __future__ import annotations

import pytest

from modules.orders.constants import OrderStatus, TransitPhase

pytestmark = pytest.mark.integration

BUYER = "0xbuyer"


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def buyer(client_for):
    return client_for(BUYER)


@pytest.fixture()
def herder_client(client_for, herder):
    return client_for(herder.principal)


@pytest.fixture()
def transporter_client(client_for, transporter):
    return client_for(transporter.principal)


@pytest.fixture()
def order_id(buyer, herder):
    response = buyer.post("/api/v1/orders/", {"herder_id": herder.id, "quantity": 10}, format="json")
    assert response.status_code == 201
    return response.json()["id"]


@pytest.fixture()
def confirmed_id(order_id, herder_client):
    herder_client.post(f"/api/v1/orders/{order_id}/confirm/", {"accept": True}, format="json")
    return order_id


# ---------------------------------------------------------------------------
# Lifecycle
# ---------------------------------------------------------------------------


class TestLifecycle:
    def test_place_order(self, buyer, herder):
        response = buyer.post(
            "/api/v1/orders/", {"herder_id": herder.id, "quantity": 10}, format="json"
        )

        assert response.status_code == 201
        body = response.json()
        assert body["id"] == 0
        assert body["herder_id"] == herder.id
        assert body["buyer"] == BUYER
        assert body["status"] == OrderStatus.PLACED
        assert body["transporter_id"] is None
        assert body["transporter_principal"] is None

    def test_end_to_end(self, buyer, herder_client, transporter_client, transporter, order_id):
        url = f"/api/v1/orders/{order_id}"

        response = herder_client.post(f"{url}/confirm/", {"accept": True}, format="json")
        assert response.json()["status"] == OrderStatus.CONFIRMED

        response = buyer.post(
            f"{url}/request-transportation/",
            {"transporter": transporter.principal, "distance": 100},
            format="json",
        )
        assert response.status_code == 200
        assert response.json()["transit_phase"] == TransitPhase.ASSIGNED
        assert response.json()["transporter_principal"] == transporter.principal

        response = transporter_client.post(f"{url}/confirm-transportation/")
        assert response.json()["transit_phase"] == TransitPhase.ACCEPTED

        response = transporter_client.post(f"{url}/confirm-pickup/", {"quantity": 10}, format="json")
        assert response.json()["transit_phase"] == TransitPhase.PICKED_UP

        response = buyer.post(f"{url}/confirm-delivery/", {"ear_tags": [123, 124]}, format="json")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == OrderStatus.COMPLETED
        assert body["ear_tags"] == [123, 124]
        assert body["picked_up_quantity"] == 10
        assert body["distance"] == 100

        history = buyer.get(f"{url}/history/").json()
        assert [entry["new_status"] for entry in history] == [
            "PLACED",
            "CONFIRMED",
            "IN_TRANSIT",
            "IN_TRANSIT",
            "IN_TRANSIT",
            "COMPLETED",
        ]
        assert history[-1]["actor"] == BUYER

    def test_reject(self, herder_client, order_id):
        response = herder_client.post(
            f"/api/v1/orders/{order_id}/confirm/", {"accept": False}, format="json"
        )

        assert response.status_code == 200
        assert response.json()["status"] == OrderStatus.REJECTED

    def test_confirm_defaults_to_accept(self, herder_client, order_id):
        response = herder_client.post(f"/api/v1/orders/{order_id}/confirm/")

        assert response.json()["status"] == OrderStatus.CONFIRMED


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------


class TestQueries:
    def test_next_id(self, buyer, herder):
        assert buyer.get("/api/v1/orders/next-id/").json() == {"next_id": 0}

        buyer.post("/api/v1/orders/", {"herder_id": herder.id, "quantity": 1}, format="json")

        assert buyer.get("/api/v1/orders/next-id/").json() == {"next_id": 1}

    def test_retrieve(self, buyer, order_id):
        response = buyer.get(f"/api/v1/orders/{order_id}/")

        assert response.status_code == 200
        assert response.json()["quantity"] == 10

    def test_list_and_filter(self, buyer, client_for, herder, confirmed_id):
        other = client_for("0xother-buyer")
        other.post("/api/v1/orders/", {"herder_id": herder.id, "quantity": 3}, format="json")

        body = buyer.get("/api/v1/orders/").json()
        assert body["count"] == 2
        assert [order["id"] for order in body["results"]] == [0, 1]

        assert buyer.get("/api/v1/orders/", {"buyer": BUYER}).json()["count"] == 1
        confirmed = buyer.get("/api/v1/orders/", {"status": "CONFIRMED"}).json()
        assert [order["id"] for order in confirmed["results"]] == [confirmed_id]
        assert buyer.get("/api/v1/orders/", {"herder": herder.id}).json()["count"] == 2

    def test_list_page_size(self, buyer, herder):
        for _ in range(3):
            buyer.post("/api/v1/orders/", {"herder_id": herder.id, "quantity": 1}, format="json")

        body = buyer.get("/api/v1/orders/", {"page_size": 2}).json()

        assert body["count"] == 3
        assert len(body["results"]) == 2
        assert body["next"] is not None


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class TestErrors:
    def test_requires_authentication(self, api_client):
        assert api_client.get("/api/v1/orders/").status_code == 401

    def test_unknown_order_is_404(self, buyer):
        response = buyer.get("/api/v1/orders/99/")

        assert response.status_code == 404
        assert response.json()["errors"][0]["code"] == "order_not_found"

    def test_transition_on_unknown_order_is_404(self, buyer):
        response = buyer.post("/api/v1/orders/99/confirm-delivery/", {"ear_tags": [1]}, format="json")

        assert response.status_code == 404

    def test_unknown_herder_is_404(self, buyer):
        response = buyer.post("/api/v1/orders/", {"herder_id": 5, "quantity": 1}, format="json")

        assert response.status_code == 404
        assert response.json()["errors"][0]["code"] == "herder_not_found"

    def test_wrong_actor_is_403(self, buyer, order_id):
        response = buyer.post(f"/api/v1/orders/{order_id}/confirm/", {"accept": True}, format="json")

        assert response.status_code == 403
        assert response.json()["errors"][0]["code"] == "unauthorized_actor"

    def test_wrong_phase_is_409(self, transporter_client, order_id):
        response = transporter_client.post(f"/api/v1/orders/{order_id}/confirm-pickup/", {"quantity": 1}, format="json")

        assert response.status_code == 409
        assert response.json()["errors"][0]["code"] == "invalid_order_status"

    def test_invalid_quantity_is_400(self, buyer, herder):
        response = buyer.post("/api/v1/orders/", {"herder_id": herder.id, "quantity": 0}, format="json")

        assert response.status_code == 400
        body = response.json()
        assert body["type"] == "validation_error"
        assert body["errors"][0]["code"] == "invalid_order_argument"

    @pytest.mark.parametrize("quantity", [2_147_483_648, 10**20])
    def test_quantity_beyond_column_range_is_400(self, buyer, herder, quantity):
        response = buyer.post(
            "/api/v1/orders/", {"herder_id": herder.id, "quantity": quantity}, format="json"
        )

        assert response.status_code == 400
        assert response.json()["errors"][0]["code"] == "invalid_order_argument"
        assert buyer.get("/api/v1/orders/next-id/").json() == {"next_id": 0}

    def test_oversized_herder_id_is_404(self, buyer, herder):
        response = buyer.post("/api/v1/orders/", {"herder_id": 10**20, "quantity": 1}, format="json")

        assert response.status_code == 404
        assert response.json()["errors"][0]["code"] == "herder_not_found"

    def test_distance_beyond_column_range_is_400(self, buyer, transporter, confirmed_id):
        response = buyer.post(
            f"/api/v1/orders/{confirmed_id}/request-transportation/",
            {"transporter": transporter.principal, "distance": 10**20},
            format="json",
        )

        assert response.status_code == 400
        assert response.json()["errors"][0]["code"] == "invalid_order_argument"

    def test_oversized_order_id_is_404(self, buyer, order_id):
        response = buyer.get("/api/v1/orders/99999999999999999999/")

        assert response.status_code == 404
        assert response.json()["errors"][0]["code"] == "order_not_found"

    def test_oversized_list_filter_is_400(self, buyer, order_id):
        response = buyer.get("/api/v1/orders/", {"herder": 10**20})

        assert response.status_code == 400
        assert response.json()["type"] == "validation_error"

    def test_non_object_body_is_400(self, buyer):
        response = buyer.post("/api/v1/orders/", [1, 2], format="json")

        assert response.status_code == 400
        assert response.json()["type"] == "validation_error"

    def test_missing_field_is_400(self, buyer):
        response = buyer.post("/api/v1/orders/", {"quantity": 1}, format="json")

        assert response.status_code == 400
        assert response.json()["errors"][0]["attr"] == "herder_id"

    def test_unregistered_transporter_is_404(self, buyer, confirmed_id):
        response = buyer.post(
            f"/api/v1/orders/{confirmed_id}/request-transportation/",
            {"transporter": "0xnobody", "distance": 10},
            format="json",
        )

        assert response.status_code == 404
        assert response.json()["errors"][0]["code"] == "transporter_not_found"

    def test_duplicate_ear_tags_is_400(
        self, buyer, transporter_client, transporter, confirmed_id
    ):
        url = f"/api/v1/orders/{confirmed_id}"
        buyer.post(
            f"{url}/request-transportation/",
            {"transporter": transporter.principal, "distance": 10},
            format="json",
        )
        transporter_client.post(f"{url}/confirm-transportation/")
        transporter_client.post(f"{url}/confirm-pickup/", {"quantity": 5}, format="json")

        response = buyer.post(f"{url}/confirm-delivery/", {"ear_tags": [7, 7]}, format="json")

        assert response.status_code == 400
        assert response.json()["errors"][0]["code"] == "invalid_order_argument"
