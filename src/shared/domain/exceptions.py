"""Domain error kinds.

Each bounded context subclasses one of these kinds for its own
exceptions.  The API layer maps the kinds (not the concrete classes) onto
HTTP responses, so a new domain exception only has to pick its kind.
"""

from __future__ import annotations


class DomainError(Exception):
    """Base class for every business-rule violation."""

    code = "domain_error"


class NotFoundError(DomainError):
    """A referenced entity (profile, order) does not exist."""

    code = "not_found"


class ConflictError(DomainError):
    """The operation would repeat a one-time fact (role, registration)."""

    code = "conflict"


class PermissionDeniedError(DomainError):
    """The acting principal may not perform the operation."""

    code = "permission_denied"


class InvalidStateError(DomainError):
    """The aggregate is not in the phase the operation requires."""

    code = "invalid_state"


class InvalidArgumentError(DomainError):
    """An argument is structurally invalid for the operation."""

    code = "invalid_argument"
