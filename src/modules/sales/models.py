"""Sale and SaleItem models.

A sale is the immutable commercial record of a delivered order.  It holds
*copies* of the order's items, money fields, customer snapshot and
payment method, so later order edits or deletion never alter historical
figures.  ``order_id`` and ``user_id`` are plain copied identifiers, not
foreign keys; ``order_id`` is unique, so an order yields at most one sale.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any

from django.db import models

from modules.core.models import BaseModel
from modules.sales.exceptions import SaleIsImmutable


SALE_STATUS_COMPLETED = "completed"

_MONEY = {"max_digits": 12, "decimal_places": 2}


class Sale(BaseModel):
    order_id = models.UUIDField(unique=True, editable=False)
    user_id = models.BigIntegerField(db_index=True, editable=False)

    total = models.DecimalField(**_MONEY)
    subtotal = models.DecimalField(**_MONEY, default=Decimal("0.00"))
    discount = models.DecimalField(**_MONEY, default=Decimal("0.00"))
    payment_method = models.CharField(max_length=50, blank=True, default="")

    customer_name = models.CharField(max_length=255)
    customer_email = models.EmailField(blank=True, default="")
    customer_phone = models.CharField(max_length=50, blank=True, default="")
    shipping_address = models.JSONField(default=dict, blank=True)

    delivered_at = models.DateTimeField()
    status = models.CharField(max_length=20, default=SALE_STATUS_COMPLETED)

    class Meta:
        db_table = "sales"
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["-created_at"], name="sales_created_idx"),
        ]

    def save(self, *args: Any, **kwargs: Any) -> None:
        if not self._state.adding:
            raise SaleIsImmutable(f"Sale {self.id} cannot be modified.")
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        return f"Sale {self.id} (order {self.order_id}, {self.total})"


class SaleItem(BaseModel):
    """Copy of one order line item at the moment of delivery."""

    sale = models.ForeignKey(
        "sales.Sale",
        on_delete=models.CASCADE,
        related_name="items",
    )
    product_id = models.UUIDField(null=True, blank=True)
    name = models.CharField(max_length=255)
    unit_price = models.DecimalField(**_MONEY)
    quantity = models.PositiveIntegerField()
    image = models.CharField(max_length=500, blank=True, default="")
    position = models.PositiveSmallIntegerField(default=0)

    class Meta:
        db_table = "sale_items"
        ordering = ["position"]

    def __str__(self) -> str:
        return f"{self.name} x{self.quantity}"
