import pytest

from django.contrib.auth import get_user_model

from rest_framework.test import APIClient

from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.services import OrderService
from modules.participants.constants import Role
from modules.participants.dtos import (
    RegisterHerderDTO,
    RegisterSlaughterhouseDTO,
    RegisterTransporterDTO,
)
from modules.participants.repositories.django_repository import (
    ParticipantDjangoRepository,
)
from modules.participants.services import ParticipantService

HERDER = "0xherder"
SLAUGHTERHOUSE = "0xslaughterhouse"
TRANSPORTER = "0xtransporter"
BUYER = "0xbuyer"
STRANGER = "0xstranger"


@pytest.fixture(autouse=True)
def _use_db(db):
    """Automatically use the test database for all tests."""


@pytest.fixture()
def api_client():
    """DRF APIClient for testing API endpoints."""
    return APIClient()


@pytest.fixture()
def api_client_with_correlation(api_client):
    """APIClient pre-configured with a known correlation ID header."""
    cid = "test-correlation-id-fixture"
    api_client.defaults["HTTP_X_REQUEST_ID"] = cid
    return api_client, cid


@pytest.fixture()
def client_for():
    """Build an APIClient force-authenticated as the user named *principal*."""

    def _client_for(principal: str) -> APIClient:
        user, _ = get_user_model().objects.get_or_create(username=principal)
        client = APIClient()
        client.force_authenticate(user=user)
        return client

    return _client_for


# ---------------------------------------------------------------------------
# Services and registered participants
# ---------------------------------------------------------------------------


@pytest.fixture()
def participant_service():
    return ParticipantService(repository=ParticipantDjangoRepository())


@pytest.fixture()
def order_service():
    return OrderService(
        order_repository=OrderDjangoRepository(),
        participant_repository=ParticipantDjangoRepository(),
    )


@pytest.fixture()
def herder(participant_service):
    participant_service.choose_role(HERDER, Role.HERDER)
    return participant_service.register_herder(
        HERDER,
        RegisterHerderDTO(location="Arkhangai", total_livestock=100, price_per_kg=12000),
    )


@pytest.fixture()
def slaughterhouse(participant_service):
    participant_service.choose_role(SLAUGHTERHOUSE, Role.SLAUGHTERHOUSE)
    return participant_service.register_slaughterhouse(
        SLAUGHTERHOUSE, RegisterSlaughterhouseDTO(location="Ulaanbaatar", price_per_kg=15000)
    )


@pytest.fixture()
def transporter(participant_service):
    participant_service.choose_role(TRANSPORTER, Role.TRANSPORTER)
    return participant_service.register_transporter(
        TRANSPORTER,
        RegisterTransporterDTO(location="Ulaanbaatar", truck_info="Isuzu Elf", price_per_km=2500),
    )
