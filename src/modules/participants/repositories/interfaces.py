"""Participant repository interface.

Covers the role map and the three profile tables.  Profile look-ups take
the profile model class (``Herder``, ``Slaughterhouse``, ``Transporter``)
so one contract serves every kind.

The Service Layer depends exclusively on this contract (DIP).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Type, TypeVar

if TYPE_CHECKING:
    from modules.participants.models import ParticipantProfile, ParticipantRole

P = TypeVar("P", bound="ParticipantProfile")


class IParticipantRepository(ABC):
    """Repository contract for roles and participant profiles."""

    # ------------------------------------------------------------------
    # Roles
    # ------------------------------------------------------------------

    @abstractmethod
    def get_role(self, principal: str) -> Optional[ParticipantRole]:
        """Return the role row of *principal*, or ``None`` if none chosen."""

    @abstractmethod
    def save_role(self, role: ParticipantRole) -> ParticipantRole:
        """Persist a new role row together with its domain events."""

    # ------------------------------------------------------------------
    # Profiles
    # ------------------------------------------------------------------

    @abstractmethod
    def get_profile(self, profile_class: Type[P], id: int) -> Optional[P]:
        """Retrieve a profile by numeric id, or ``None``."""

    @abstractmethod
    def get_profile_by_principal(
        self, profile_class: Type[P], principal: str
    ) -> Optional[P]:
        """Retrieve the profile owned by *principal*, or ``None``."""

    @abstractmethod
    def list_profiles(
        self, profile_class: Type[P], filters: Optional[Dict[str, Any]] = None
    ) -> List[P]:
        """List profiles of one kind ordered by id."""

    @abstractmethod
    def create_profile(self, profile: P, sequence: str) -> P:
        """Assign the next id of *sequence* to *profile* and insert it."""

    @abstractmethod
    def save_profile(self, profile: P) -> P:
        """Persist *profile* and write its pending domain events to the outbox."""
