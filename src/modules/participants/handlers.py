"""Event handlers for Participants domain events."""

from __future__ import annotations

import structlog

from modules.participants.events import RoleChosen
from shared.domain.bus import IEventHandler
from shared.domain.events import DomainEvent

logger = structlog.get_logger(__name__)


class RoleChosenHandler(IEventHandler[RoleChosen]):
    def handle(self, event: RoleChosen) -> None:
        logger.info(
            f"Principal {event.aggregate_id} chose role {event.role}",
            principal=str(event.aggregate_id),
            role=event.role,
        )


class ProfileRegisteredHandler(IEventHandler[DomainEvent]):
    """Shared by the three profile registration events."""

    def handle(self, event: DomainEvent) -> None:
        logger.info(
            f"{event.event_name} for profile {event.aggregate_id}",
            profile_id=event.aggregate_id,
            principal=event.actor,
        )


role_chosen_handler = RoleChosenHandler()
profile_registered_handler = ProfileRegisteredHandler()
