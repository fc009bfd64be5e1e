"""Order repository interface.

Extends ``IRepository[Order]`` with the methods required by the Order
aggregate: creation with its staged children, row-locked loading,
version-checked saving and the reporting look-ups.

The Service Layer depends exclusively on this contract (DIP).
"""

from __future__ import annotations

from abc import abstractmethod
from datetime import datetime
from typing import TYPE_CHECKING, Any, List, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.orders.models import Order


class IOrderRepository(IRepository["Order"]):
    """Repository contract for the Order aggregate root.

    The Order aggregate includes OrderItem children and
    OrderStatusHistory records.  Mutations must be atomic.
    """

    @abstractmethod
    def create(self, order: Order) -> Order:
        """Insert a freshly opened order together with its staged items and history."""

    @abstractmethod
    def save(self, entity: Order) -> Order:
        """Persist a status change and the staged history entries.

        Raises:
            OrderConflict: if the stored version no longer matches.
        """

    @abstractmethod
    def get_for_update(self, id: str) -> Optional[Order]:
        """Retrieve an order with a row-level lock (SELECT FOR UPDATE)."""

    @abstractmethod
    def list_by_user(self, user_id: Any) -> List[Order]:
        """Orders owned by *user_id*, newest first."""

    @abstractmethod
    def list_by_status(self, status: str) -> List[Order]:
        """Orders currently in *status*, newest first."""

    @abstractmethod
    def list_created_between(self, start: datetime, end: datetime) -> List[Order]:
        """Orders created within ``[start, end]``, newest first."""
