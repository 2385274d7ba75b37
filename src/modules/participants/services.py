"""Participant service layer (Use Cases).

Owns the identity and role registry: the one-time role choice of a
principal and the Herder / Slaughterhouse / Transporter profiles.  All
write operations are atomic; every check runs before anything is written.

Rules enforced:
- A role is chosen once and never changes.
- Registering a profile requires the matching role.
- A principal registers at most one profile of each kind.
- Profile ids are allocated sequentially per kind, starting at 1.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Type

import structlog
from django.db import transaction

from modules.participants.constants import (
    CHOOSABLE_ROLES,
    HERDER_SEQUENCE,
    SLAUGHTERHOUSE_SEQUENCE,
    TRANSPORTER_SEQUENCE,
    Role,
)
from modules.participants.events import (
    HerderRegistered,
    RoleChosen,
    SlaughterhouseRegistered,
    TransporterRegistered,
)
from modules.participants.exceptions import (
    AlreadyRegistered,
    HerderNotFound,
    InvalidRoleChoice,
    ParticipantNotFound,
    RoleAlreadyAssigned,
    SlaughterhouseNotFound,
    TransporterNotFound,
    WrongRole,
)
from modules.participants.models import (
    Herder,
    ParticipantProfile,
    ParticipantRole,
    Slaughterhouse,
    Transporter,
)

if TYPE_CHECKING:
    from modules.participants.dtos import (
        RegisterHerderDTO,
        RegisterSlaughterhouseDTO,
        RegisterTransporterDTO,
    )
    from modules.participants.repositories.interfaces import IParticipantRepository
    from shared.domain.events import DomainEvent

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class _ProfileKind:
    model: Type[ParticipantProfile]
    role: Role
    sequence: str
    event: Type[DomainEvent]
    not_found: Type[ParticipantNotFound]


HERDER_KIND = _ProfileKind(
    Herder, Role.HERDER, HERDER_SEQUENCE, HerderRegistered, HerderNotFound
)
SLAUGHTERHOUSE_KIND = _ProfileKind(
    Slaughterhouse,
    Role.SLAUGHTERHOUSE,
    SLAUGHTERHOUSE_SEQUENCE,
    SlaughterhouseRegistered,
    SlaughterhouseNotFound,
)
TRANSPORTER_KIND = _ProfileKind(
    Transporter,
    Role.TRANSPORTER,
    TRANSPORTER_SEQUENCE,
    TransporterRegistered,
    TransporterNotFound,
)


class ParticipantService:
    """Application service for the identity and role registry.

    Receives an ``IParticipantRepository`` via constructor injection (DIP).
    The acting principal is always an explicit argument.
    """

    def __init__(self, repository: IParticipantRepository) -> None:
        self._repo = repository

    # ------------------------------------------------------------------
    # Roles
    # ------------------------------------------------------------------

    @transaction.atomic
    def choose_role(self, principal: str, role: str) -> ParticipantRole:
        """Assign *role* to *principal* for good.

        Raises:
            InvalidRoleChoice: *role* is ``NONE`` or not a known role.
            RoleAlreadyAssigned: the principal already chose a role.
        """
        log = logger.bind(principal=principal, role=role)

        if role not in CHOOSABLE_ROLES:
            raise InvalidRoleChoice(f"Role {role!r} cannot be chosen.")

        existing = self._repo.get_role(principal)
        if existing:
            log.warning("participant.role_already_assigned", current_role=existing.role)
            raise RoleAlreadyAssigned(
                f"Principal {principal} already has role {existing.role}."
            )

        assignment = ParticipantRole(principal=principal, role=Role(role))
        assignment.add_domain_event(
            RoleChosen(aggregate_id=principal, actor=principal, role=str(role))
        )
        assignment = self._repo.save_role(assignment)
        log.info("participant.role_chosen")
        return assignment

    def get_role(self, principal: str) -> Role:
        """Return the role of *principal*; ``Role.NONE`` if none was chosen."""
        assignment = self._repo.get_role(principal)
        return Role(assignment.role) if assignment else Role.NONE

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def register_herder(self, principal: str, dto: RegisterHerderDTO) -> Herder:
        """Register the herder profile of *principal*.

        Raises:
            WrongRole: the principal's role is not ``HERDER``.
            AlreadyRegistered: the principal already owns a herder profile.
        """
        return self._register(principal, HERDER_KIND, dto.model_dump())

    def register_slaughterhouse(
        self, principal: str, dto: RegisterSlaughterhouseDTO
    ) -> Slaughterhouse:
        """Same contract as ``register_herder`` for role ``SLAUGHTERHOUSE``."""
        return self._register(principal, SLAUGHTERHOUSE_KIND, dto.model_dump())

    def register_transporter(
        self, principal: str, dto: RegisterTransporterDTO
    ) -> Transporter:
        """Same contract as ``register_herder`` for role ``TRANSPORTER``."""
        return self._register(principal, TRANSPORTER_KIND, dto.model_dump())

    @transaction.atomic
    def _register(
        self, principal: str, kind: _ProfileKind, fields: Dict[str, Any]
    ) -> Any:
        log = logger.bind(principal=principal, kind=kind.model.__name__)

        role = self.get_role(principal)
        if role != kind.role:
            log.warning("participant.wrong_role", role=role)
            raise WrongRole(
                f"Principal {principal} has role {role}, "
                f"{kind.role} is required to register a {kind.model.__name__}."
            )

        if self._repo.get_profile_by_principal(kind.model, principal):
            log.warning("participant.already_registered")
            raise AlreadyRegistered(
                f"Principal {principal} already registered a {kind.model.__name__}."
            )

        profile = self._repo.create_profile(
            kind.model(principal=principal, registered=True, **fields),
            kind.sequence,
        )
        profile.add_domain_event(kind.event(aggregate_id=profile.id, actor=principal))
        profile = self._repo.save_profile(profile)

        log.info("participant.registered", profile_id=profile.id)
        return profile

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_herder(self, id: int) -> Herder:
        """Raises ``HerderNotFound`` for an unknown id."""
        return self._get(HERDER_KIND, id)

    def get_slaughterhouse(self, id: int) -> Slaughterhouse:
        """Raises ``SlaughterhouseNotFound`` for an unknown id."""
        return self._get(SLAUGHTERHOUSE_KIND, id)

    def get_transporter(self, id: int) -> Transporter:
        """Raises ``TransporterNotFound`` for an unknown id."""
        return self._get(TRANSPORTER_KIND, id)

    def herder_id_for(self, principal: str) -> int:
        return self._id_for(HERDER_KIND, principal)

    def slaughterhouse_id_for(self, principal: str) -> int:
        return self._id_for(SLAUGHTERHOUSE_KIND, principal)

    def transporter_id_for(self, principal: str) -> int:
        return self._id_for(TRANSPORTER_KIND, principal)

    def list_herders(self, filters: Optional[Dict[str, Any]] = None) -> List[Herder]:
        return self._repo.list_profiles(Herder, filters)

    def list_slaughterhouses(
        self, filters: Optional[Dict[str, Any]] = None
    ) -> List[Slaughterhouse]:
        return self._repo.list_profiles(Slaughterhouse, filters)

    def list_transporters(
        self, filters: Optional[Dict[str, Any]] = None
    ) -> List[Transporter]:
        return self._repo.list_profiles(Transporter, filters)

    def _get(self, kind: _ProfileKind, id: int) -> Any:
        profile = self._repo.get_profile(kind.model, id)
        if not profile:
            raise kind.not_found(f"{kind.model.__name__} {id} not found.")
        return profile

    def _id_for(self, kind: _ProfileKind, principal: str) -> int:
        profile = self._repo.get_profile_by_principal(kind.model, principal)
        if not profile:
            raise kind.not_found(f"No {kind.model.__name__} registered for {principal}.")
        return profile.id
