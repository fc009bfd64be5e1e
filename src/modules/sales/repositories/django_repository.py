"""Django ORM implementation of the Sale repository."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

import structlog
from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import Count, QuerySet, Sum

from modules.sales.exceptions import SaleIsImmutable
from modules.sales.models import Sale, SaleItem
from modules.sales.repositories.interfaces import ISaleRepository

logger = structlog.get_logger(__name__)

CENTS = Decimal("0.01")


class SaleDjangoRepository(ISaleRepository):
    """Concrete Sale repository backed by Django ORM."""

    @transaction.atomic
    def create(self, data: Dict[str, Any]) -> Sale:
        fields = dict(data)
        items = fields.pop("items", [])

        sale = Sale(**fields)
        sale.save(force_insert=True)
        for position, item in enumerate(items):
            SaleItem(sale=sale, position=position, **item).save(force_insert=True)

        logger.info("sale.persisted", sale_id=str(sale.id), item_count=len(items))
        return sale

    def save(self, entity: Sale) -> Sale:
        if not entity._state.adding:
            raise SaleIsImmutable(f"Sale {entity.id} cannot be modified.")
        entity.save(force_insert=True)
        return entity

    def get_by_id(self, id: str) -> Optional[Sale]:
        try:
            return Sale.objects.prefetch_related("items").filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def queryset(self) -> QuerySet:
        """Base listing queryset, newest first, for DRF filter backends."""
        return Sale.objects.prefetch_related("items").order_by("-created_at", "-id")

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Sale]:
        queryset = self.queryset()
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset)

    def list_by_user(self, user_id: Any) -> List[Sale]:
        return self.list({"user_id": user_id})

    def list_created_between(self, start: datetime, end: datetime) -> List[Sale]:
        return self.list({"created_at__range": (start, end)})

    def totals_between(self, start: datetime, end: datetime) -> tuple[int, Decimal]:
        result = Sale.objects.filter(created_at__range=(start, end)).aggregate(
            count=Count("id"),
            revenue=Sum("total"),
        )
        revenue = result["revenue"] or Decimal("0")
        # SQLite drops the scale of summed decimals.
        return result["count"] or 0, revenue.quantize(CENTS)

    def exists(self, id: str) -> bool:
        try:
            return Sale.objects.filter(id=id).exists()
        except (ValueError, ValidationError):
            return False

    def delete(self, id: str) -> bool:
        raise SaleIsImmutable(f"Sale {id} cannot be deleted.")
