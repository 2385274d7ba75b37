"""Participant registry exceptions.

Raised by the Service Layer when registry rules are violated.  Each one
subclasses a shared error kind so the API layer can translate it into
an HTTP response without knowing the concrete class.
"""

from __future__ import annotations

from shared.domain.exceptions import (
    ConflictError,
    InvalidArgumentError,
    NotFoundError,
    PermissionDeniedError,
)


class RoleAlreadyAssigned(ConflictError):
    """The principal has already chosen a role; roles never change."""

    code = "role_already_assigned"


class InvalidRoleChoice(InvalidArgumentError):
    """The requested role is not one a principal can choose."""

    code = "invalid_role"


class WrongRole(PermissionDeniedError):
    """The principal's role does not allow this registration."""

    code = "wrong_role"


class AlreadyRegistered(ConflictError):
    """The principal already owns a profile of this kind."""

    code = "already_registered"


class ParticipantNotFound(NotFoundError):
    """No profile matches the given id or principal."""

    code = "participant_not_found"


class HerderNotFound(ParticipantNotFound):
    code = "herder_not_found"


class SlaughterhouseNotFound(ParticipantNotFound):
    code = "slaughterhouse_not_found"


class TransporterNotFound(ParticipantNotFound):
    code = "transporter_not_found"
