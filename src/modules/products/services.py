"""Product service layer: catalog look-up and the inventory ledger.

``decrement_stock`` is the only code path that mutates ``stock`` and
``purchase_count``.  It is invoked by the order orchestrator once per
line item when an order is delivered for the first time, inside the
orchestrator's unit of work.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
from django.db import transaction

from modules.products.exceptions import ProductNotFound

if TYPE_CHECKING:
    from modules.products.models import Product
    from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


class ProductService:
    """Application service for Product use-cases.

    Receives an ``IProductRepository`` via constructor injection (DIP).
    """

    def __init__(self, repository: IProductRepository) -> None:
        self._repo = repository

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def decrement_stock(self, product_id: str, quantity: int) -> Product:
        """Take *quantity* units of a product out of inventory.

        Stock floors at zero: an over-sold quantity is absorbed, not
        rejected.  ``purchase_count`` always grows by the full quantity.

        Raises:
            ProductNotFound: if the product does not exist.
        """
        product = self._repo.get_for_update(str(product_id))
        if not product:
            raise ProductNotFound(f"Product {product_id} not found.")

        log = logger.bind(product_id=str(product_id), quantity=quantity)

        shortfall = product.consume(quantity)
        if shortfall:
            log.warning("inventory.stock_clamped", shortfall=shortfall)

        self._repo.save_stock(product)
        log.info(
            "inventory.stock_decremented",
            remaining=product.stock,
            purchase_count=product.purchase_count,
        )
        return product

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_product(self, product_id: str) -> Product:
        """Retrieve a single product by ID.

        Raises:
            ProductNotFound: if the product does not exist.
        """
        product = self._repo.get_by_id(str(product_id))
        if not product:
            raise ProductNotFound(f"Product {product_id} not found.")
        return product
