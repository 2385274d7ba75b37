"""Order domain exceptions.

Raised by the Service Layer when lifecycle rules are violated.
The API layer translates them into HTTP responses by error kind.
"""

from __future__ import annotations

from shared.domain.exceptions import (
    InvalidArgumentError,
    InvalidStateError,
    NotFoundError,
    PermissionDeniedError,
)


class OrderNotFound(NotFoundError):
    """The requested order does not exist."""

    code = "order_not_found"


class InvalidOrderStatus(InvalidStateError):
    """The order is not in the (sub-)phase the operation requires."""

    code = "invalid_order_status"


class UnauthorizedActor(PermissionDeniedError):
    """The principal is not the designated actor for the order's stage."""

    code = "unauthorized_actor"


class InvalidOrderArgument(InvalidArgumentError):
    """Quantity, distance or ear tags are structurally invalid."""

    code = "invalid_order_argument"
