"""Participant registry models.

Business rules implemented:
- A principal chooses its role once (``ParticipantRole.principal`` unique).
- A principal owns at most one profile of each kind (``principal`` unique
  on every profile table).
- Profile ids are sequential per kind, starting at 1, and allocated by the
  service from ``core.Sequence`` (never by the database).
- Declared prices and livestock counts are stored as given; only their
  sign is constrained.
"""

from __future__ import annotations

from django.db import models

from modules.core.models import BaseModel, TimestampedModel
from modules.participants.constants import PRINCIPAL_MAX_LENGTH, Role
from shared.domain.events import DomainEventMixin


class ParticipantRole(DomainEventMixin, BaseModel):
    """The one-time role choice of a principal.

    A principal with no row has ``Role.NONE``.  Rows are never updated
    after creation.
    """

    principal: models.CharField = models.CharField(
        max_length=PRINCIPAL_MAX_LENGTH, unique=True
    )
    role: models.CharField = models.CharField(
        max_length=20,
        choices=Role.choices,
    )

    class Meta:
        db_table = "participant_roles"
        constraints = [
            models.CheckConstraint(
                condition=~models.Q(role=Role.NONE),
                name="participant_roles_role_chosen",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.principal} ({self.role})"


class ParticipantProfile(DomainEventMixin, TimestampedModel):
    """Abstract profile keyed by a sequential numeric id."""

    id: models.PositiveBigIntegerField = models.PositiveBigIntegerField(
        primary_key=True, editable=False
    )
    principal: models.CharField = models.CharField(
        max_length=PRINCIPAL_MAX_LENGTH, unique=True
    )
    location: models.CharField = models.CharField(max_length=255)
    registered: models.BooleanField = models.BooleanField(default=False)

    class Meta:
        abstract = True
        ordering = ["id"]

    def __str__(self) -> str:
        return f"{self.__class__.__name__} #{self.id} ({self.principal})"


class Herder(ParticipantProfile):
    """Livestock producer.

    The ``aimag_*`` fields are regional statistics for the herder's aimag
    (province), stored for context only.
    """

    total_livestock: models.PositiveIntegerField = models.PositiveIntegerField(default=0)
    price_per_kg: models.PositiveIntegerField = models.PositiveIntegerField(default=0)
    aimag_total_livestock: models.PositiveIntegerField = models.PositiveIntegerField(
        default=0
    )
    aimag_pasture_carrying_capacity: models.PositiveIntegerField = (
        models.PositiveIntegerField(default=0)
    )
    aimag_total_herder_number: models.PositiveIntegerField = (
        models.PositiveIntegerField(default=0)
    )

    class Meta(ParticipantProfile.Meta):
        db_table = "herders"


class Slaughterhouse(ParticipantProfile):
    price_per_kg: models.PositiveIntegerField = models.PositiveIntegerField(default=0)

    class Meta(ParticipantProfile.Meta):
        db_table = "slaughterhouses"


class Transporter(ParticipantProfile):
    truck_info: models.CharField = models.CharField(max_length=255)
    price_per_km: models.PositiveIntegerField = models.PositiveIntegerField(default=0)

    class Meta(ParticipantProfile.Meta):
        db_table = "transporters"
