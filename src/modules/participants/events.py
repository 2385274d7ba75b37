"""Domain events for the Participants bounded context."""

from __future__ import annotations

from dataclasses import dataclass

from shared.domain.events import DomainEvent


@dataclass(frozen=True)
class RoleChosen(DomainEvent):
    """A principal chose its one-time role (``aggregate_id`` is the principal)."""

    role: str = ""


@dataclass(frozen=True)
class HerderRegistered(DomainEvent):
    """Raised when a herder profile is registered."""


@dataclass(frozen=True)
class SlaughterhouseRegistered(DomainEvent):
    """Raised when a slaughterhouse profile is registered."""


@dataclass(frozen=True)
class TransporterRegistered(DomainEvent):
    """Raised when a transporter profile is registered."""
