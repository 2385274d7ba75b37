"""Order repository interface.

Extends ``IRepository[Order]`` with the methods required by the order
lifecycle: creation under a sequential id, row locking for transitions,
status history tracking and next-id look-up.

The Service Layer depends exclusively on this contract (DIP).
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.orders.models import Order, OrderStatusHistory


class IOrderRepository(IRepository["Order"]):
    """Repository contract for the Order aggregate root.

    The Order aggregate includes its OrderStatusHistory records.
    Mutations must be atomic.
    """

    @abstractmethod
    def create(self, order: Order) -> Order:
        """Allocate the next order id and insert *order*."""

    @abstractmethod
    def get_by_id(self, id: int) -> Optional[Order]:
        """Retrieve an order with its herder and transporter."""

    @abstractmethod
    def get_for_update(self, id: int) -> Optional[Order]:
        """Retrieve an order holding a row-level lock until commit."""

    @abstractmethod
    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Order]:
        """List orders with optional filters."""

    @abstractmethod
    def add_history(
        self,
        order: Order,
        actor: str,
        old_status: Optional[str],
        old_phase: str = "",
        notes: str = "",
    ) -> OrderStatusHistory:
        """Record the order's current status and phase in its audit trail."""

    @abstractmethod
    def get_history(self, order_id: int) -> List[OrderStatusHistory]:
        """Return the audit trail of an order, oldest first."""

    @abstractmethod
    def next_id(self) -> int:
        """Return the id the next placed order will receive."""
