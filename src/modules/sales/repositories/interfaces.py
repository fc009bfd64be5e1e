"""Sale repository interface."""

from __future__ import annotations

from abc import abstractmethod
from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Dict, List

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.sales.models import Sale


class ISaleRepository(IRepository["Sale"]):
    """Repository contract for the Sale record (sale + item copies)."""

    @abstractmethod
    def create(self, data: Dict[str, Any]) -> Sale:
        """Insert a sale and its items atomically.

        ``data`` holds the sale fields plus ``items``: a list of dicts with
        ``product_id``, ``name``, ``unit_price``, ``quantity``, ``image``.
        """

    @abstractmethod
    def list_by_user(self, user_id: Any) -> List[Sale]:
        """Sales of *user_id*, newest first."""

    @abstractmethod
    def list_created_between(self, start: datetime, end: datetime) -> List[Sale]:
        """Sales recorded within ``[start, end]``, newest first."""

    @abstractmethod
    def totals_between(self, start: datetime, end: datetime) -> tuple[int, Decimal]:
        """``(count, revenue)`` of the sales recorded within ``[start, end]``."""
