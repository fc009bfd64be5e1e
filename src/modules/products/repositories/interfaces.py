"""Product repository interface.

Extends ``IRepository[Product]`` with the row-locking look-up required
by the inventory ledger.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.products.models import Product


class IProductRepository(IRepository["Product"]):
    """Repository contract for the Product aggregate."""

    @abstractmethod
    def get_for_update(self, id: str) -> Optional["Product"]:
        """Retrieve a product with a row-level lock (SELECT FOR UPDATE).

        Used by the inventory ledger so concurrent deliveries touching
        the same product serialize.  Returns ``None`` if the product
        does not exist.
        """

    @abstractmethod
    def save_stock(self, entity: "Product") -> "Product":
        """Persist only the inventory counters of *entity*."""
