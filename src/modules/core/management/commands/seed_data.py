from __future__ import annotations

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand

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

HERDER = "herder"
SLAUGHTERHOUSE = "slaughterhouse"
TRANSPORTER = "transporter"
BUYER = "buyer"


class Command(BaseCommand):
    help = "Seed database with demo participants, one completed order and one open order."

    def add_arguments(self, parser):
        parser.add_argument(
            "--password",
            default="demo12345",
            help="Password given to every demo user.",
        )

    def handle(self, *args, **options):
        self.stdout.write("Seeding demo data...")
        participant_repo = ParticipantDjangoRepository()
        self._participants = ParticipantService(participant_repo)
        self._orders = OrderService(OrderDjangoRepository(), participant_repo)

        users_created = self._seed_users(options["password"])
        profiles_created = self._seed_profiles()
        orders_created = self._seed_orders()

        self.stdout.write(
            self.style.SUCCESS(
                "Seed completed: "
                f"users={users_created}, "
                f"profiles={profiles_created}, "
                f"orders={orders_created}"
            )
        )

    def _seed_users(self, password: str) -> int:
        User = get_user_model()
        created = 0
        if not User.objects.filter(username="admin").exists():
            User.objects.create_superuser("admin", password=password)
            created += 1
        for username in (HERDER, SLAUGHTERHOUSE, TRANSPORTER, BUYER):
            if not User.objects.filter(username=username).exists():
                User.objects.create_user(username, password=password)
                created += 1
        return created

    def _seed_profiles(self) -> int:
        self.stdout.write("Registering profiles...")
        created = 0
        if self._ensure_role(HERDER, Role.HERDER):
            self._participants.register_herder(
                HERDER,
                RegisterHerderDTO(
                    location="Arkhangai",
                    total_livestock=100,
                    price_per_kg=12000,
                    aimag_total_livestock=5_000_000,
                    aimag_pasture_carrying_capacity=4_000_000,
                    aimag_total_herder_number=30_000,
                ),
            )
            created += 1
        if self._ensure_role(SLAUGHTERHOUSE, Role.SLAUGHTERHOUSE):
            self._participants.register_slaughterhouse(
                SLAUGHTERHOUSE,
                RegisterSlaughterhouseDTO(location="Ulaanbaatar", price_per_kg=15000),
            )
            created += 1
        if self._ensure_role(TRANSPORTER, Role.TRANSPORTER):
            self._participants.register_transporter(
                TRANSPORTER,
                RegisterTransporterDTO(
                    location="Ulaanbaatar", truck_info="Isuzu Elf, 40 head", price_per_km=2500
                ),
            )
            created += 1
        return created

    def _ensure_role(self, principal: str, role: Role) -> bool:
        """Choose *role* for *principal*; ``False`` if it was already seeded."""
        if self._participants.get_role(principal) != Role.NONE:
            return False
        self._participants.choose_role(principal, role)
        return True

    def _seed_orders(self) -> int:
        if self._orders.next_order_id() > 0:
            return 0
        self.stdout.write("Running one order through its lifecycle...")
        herder_id = self._participants.herder_id_for(HERDER)

        order = self._orders.place_order(BUYER, herder_id, 10)
        self._orders.confirm_order(order.id, HERDER, accept=True)
        self._orders.request_transportation(order.id, BUYER, TRANSPORTER, 100)
        self._orders.confirm_transportation_request(order.id, TRANSPORTER)
        self._orders.confirm_pick_up(order.id, TRANSPORTER, 10)
        self._orders.confirm_delivery(order.id, BUYER, [123, 124])

        # Left open so the lifecycle can be explored through the API.
        self._orders.place_order(SLAUGHTERHOUSE, herder_id, 5)
        return 2
