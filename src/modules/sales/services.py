"""Sale service layer: sale recording and sales reporting.

``create_from_order`` is the sale recorder.  It derives a sale from a
delivered order by copying the order's commercial facts; nothing is read
back from the sale to influence the order afterwards.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any, List

import structlog
from django.db import transaction
from django.utils import timezone

from modules.sales.dtos import SaleOutputDTO, SalesReportDTO
from modules.sales.exceptions import SaleNotFound
from modules.sales.models import SALE_STATUS_COMPLETED

if TYPE_CHECKING:
    from modules.orders.models import Order
    from modules.sales.models import Sale
    from modules.sales.repositories.interfaces import ISaleRepository

logger = structlog.get_logger(__name__)


class SaleService:
    """Application service for Sale use-cases.

    Receives an ``ISaleRepository`` via constructor injection (DIP).
    """

    def __init__(self, repository: ISaleRepository) -> None:
        self._repo = repository

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def create_from_order(self, order: Order) -> Sale:
        """Record the sale of a delivered order.

        Items, totals, customer snapshot and payment method are copied;
        ``delivered_at`` is the moment the sale is recorded.
        """
        sale = self._repo.create(
            {
                "order_id": order.id,
                "user_id": order.user_id,
                "total": order.total,
                "subtotal": order.subtotal,
                "discount": order.discount,
                "payment_method": order.payment_method,
                "customer_name": order.customer_name,
                "customer_email": order.customer_email,
                "customer_phone": order.customer_phone,
                "shipping_address": dict(order.shipping_address),
                "delivered_at": timezone.now(),
                "status": SALE_STATUS_COMPLETED,
                "items": [
                    {
                        "product_id": item.product_id,
                        "name": item.name,
                        "unit_price": item.unit_price,
                        "quantity": item.quantity,
                        "image": item.image,
                    }
                    for item in order.items.all()
                ],
            }
        )
        logger.info(
            "sale.recorded",
            sale_id=str(sale.id),
            order_id=str(order.id),
            total=str(sale.total),
        )
        return sale

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_sale(self, sale_id: str) -> Sale:
        """Retrieve a single sale by ID.

        Raises:
            SaleNotFound: if the sale does not exist.
        """
        sale = self._repo.get_by_id(str(sale_id))
        if not sale:
            raise SaleNotFound(f"Sale {sale_id} not found.")
        return sale

    def list_sales(self, filters: dict[str, Any] | None = None) -> List[Sale]:
        return self._repo.list(filters)

    def list_user_sales(self, user_id: Any) -> List[Sale]:
        return self._repo.list_by_user(user_id)

    def list_sales_by_date_range(self, start: datetime, end: datetime) -> List[Sale]:
        return self._repo.list_created_between(start, end)

    def sales_report(self, start: datetime, end: datetime) -> SalesReportDTO:
        """Count and revenue of the sales recorded in ``[start, end]``."""
        total_sales, total_revenue = self._repo.totals_between(start, end)
        sales = self._repo.list_created_between(start, end)
        logger.info(
            "sale.report_generated",
            start=start.isoformat(),
            end=end.isoformat(),
            total_sales=total_sales,
        )
        return SalesReportDTO(
            start=start,
            end=end,
            total_sales=total_sales,
            total_revenue=total_revenue,
            sales=[SaleOutputDTO.from_entity(sale) for sale in sales],
        )
