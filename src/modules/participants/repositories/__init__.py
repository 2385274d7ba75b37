"""Participant repositories package."""

from modules.participants.repositories.django_repository import (
    ParticipantDjangoRepository,
)
from modules.participants.repositories.interfaces import IParticipantRepository

__all__ = ["IParticipantRepository", "ParticipantDjangoRepository"]
