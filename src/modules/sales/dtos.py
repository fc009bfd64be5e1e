"""Sale output DTOs (Pydantic v2, immutable).

- ``SaleItemOutputDTO`` / ``SaleOutputDTO``: plain-data view of a sale.
- ``SalesReportDTO``: count, revenue and the sales of a reporting window.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict

if TYPE_CHECKING:
    from modules.sales.models import Sale


class SaleItemOutputDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    product_id: Optional[UUID]
    name: str
    unit_price: Decimal
    quantity: int
    image: str


class SaleOutputDTO(BaseModel):
    """Immutable DTO for sale API responses."""

    model_config = ConfigDict(frozen=True)

    id: UUID
    order_id: UUID
    user_id: int
    items: List[SaleItemOutputDTO]
    total: Decimal
    subtotal: Decimal
    discount: Decimal
    customer: Dict[str, Any]
    payment_method: str
    status: str
    created_at: datetime
    delivered_at: datetime

    @classmethod
    def from_entity(cls, sale: Sale) -> SaleOutputDTO:
        """Build an output DTO from a Sale model instance.

        Assumes ``items`` is prefetched.
        """
        items = [
            SaleItemOutputDTO(
                product_id=item.product_id,
                name=item.name,
                unit_price=item.unit_price,
                quantity=item.quantity,
                image=item.image,
            )
            for item in sale.items.all()
        ]
        return cls(
            id=sale.id,
            order_id=sale.order_id,
            user_id=sale.user_id,
            items=items,
            total=sale.total,
            subtotal=sale.subtotal,
            discount=sale.discount,
            customer={
                "name": sale.customer_name,
                "email": sale.customer_email,
                "phone": sale.customer_phone,
                "address": sale.shipping_address,
            },
            payment_method=sale.payment_method,
            status=sale.status,
            created_at=sale.created_at,
            delivered_at=sale.delivered_at,
        )


class SalesReportDTO(BaseModel):
    """Sales figures for a reporting window."""

    model_config = ConfigDict(frozen=True)

    start: datetime
    end: datetime
    total_sales: int
    total_revenue: Decimal
    sales: List[SaleOutputDTO]
