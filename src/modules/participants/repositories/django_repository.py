"""Django ORM implementation of the Participant repository.

Satisfies ``IParticipantRepository`` using Django's QuerySet API.
Error handling follows the Null Object pattern: look-ups return ``None``
and the Service Layer decides which domain exception to raise.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Type

import structlog
from django.db import transaction

from modules.core.models import Sequence
from modules.core.outbox import record_domain_events
from modules.participants.constants import PROFILE_FIRST_ID
from modules.participants.models import ParticipantRole
from modules.participants.repositories.interfaces import P, IParticipantRepository
from shared.domain.limits import parse_id

logger = structlog.get_logger(__name__)

OUTBOX_TOPIC = "participants"


class ParticipantDjangoRepository(IParticipantRepository):
    """Concrete Participant repository backed by Django ORM."""

    # ------------------------------------------------------------------
    # Roles
    # ------------------------------------------------------------------

    def get_role(self, principal: str) -> Optional[ParticipantRole]:
        return ParticipantRole.objects.filter(principal=principal).first()

    @transaction.atomic
    def save_role(self, role: ParticipantRole) -> ParticipantRole:
        role.save(force_insert=True)
        record_domain_events(role, OUTBOX_TOPIC)
        logger.info("participant.role_saved", principal=role.principal, role=role.role)
        return role

    # ------------------------------------------------------------------
    # Profiles
    # ------------------------------------------------------------------

    def get_profile(self, profile_class: Type[P], id: int) -> Optional[P]:
        """Returns ``None`` for unknown or malformed ids."""
        profile_id = parse_id(id)
        if profile_id is None:
            return None
        return profile_class.objects.filter(id=profile_id).first()

    def get_profile_by_principal(
        self, profile_class: Type[P], principal: str
    ) -> Optional[P]:
        return profile_class.objects.filter(principal=principal).first()

    def list_profiles(
        self, profile_class: Type[P], filters: Optional[Dict[str, Any]] = None
    ) -> List[P]:
        """List profiles with optional Django ORM look-ups.

        Examples of valid filters::

            {"location__icontains": "arkhangai"}
            {"registered": True}
        """
        queryset = profile_class.objects.all().order_by("id")
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset)

    @transaction.atomic
    def create_profile(self, profile: P, sequence: str) -> P:
        profile.id = Sequence.allocate(sequence, start=PROFILE_FIRST_ID)
        profile.save(force_insert=True)
        logger.info(
            "participant.profile_created",
            kind=profile.__class__.__name__,
            profile_id=profile.id,
            principal=profile.principal,
        )
        return profile

    @transaction.atomic
    def save_profile(self, profile: P) -> P:
        profile.save()
        events = record_domain_events(profile, OUTBOX_TOPIC)
        logger.info(
            "participant.profile_saved",
            kind=profile.__class__.__name__,
            profile_id=profile.id,
            event_count=events,
        )
        return profile
