"""Product model: catalog display fields plus the inventory counters.

Inventory rules:
- ``stock`` never goes below zero; over-sold quantities are clamped to zero.
- ``purchase_count`` only grows, by the full ordered quantity.
- Both counters change only through ``ProductService.decrement_stock``.
"""

from __future__ import annotations

from decimal import Decimal

from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models

from modules.core.models import BaseModel


class Product(BaseModel):
    name = models.CharField(max_length=255)
    description = models.TextField(blank=True, default="")
    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
    )
    image = models.CharField(max_length=500, blank=True, default="")
    stock = models.PositiveIntegerField(default=0)
    purchase_count = models.PositiveIntegerField(default=0)

    class Meta:
        db_table = "products"
        ordering = ["name"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(price__gte=0),
                name="products_price_non_negative",
            ),
        ]

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def clean(self) -> None:
        super().clean()
        if self.price is not None and self.price < 0:
            raise ValidationError({"price": "Price cannot be negative."})

    # ------------------------------------------------------------------
    # Inventory
    # ------------------------------------------------------------------

    def consume(self, quantity: int) -> int:
        """Take *quantity* units out of stock, flooring at zero.

        Returns the number of units that could not be covered by stock.
        """
        shortfall = max(0, quantity - self.stock)
        self.stock = max(0, self.stock - quantity)
        self.purchase_count += quantity
        return shortfall

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------

    def __str__(self) -> str:
        return f"{self.name} (stock {self.stock})"
