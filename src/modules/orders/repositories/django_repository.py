"""Django ORM implementation of the Order repository.

Satisfies ``IOrderRepository`` using Django's QuerySet API.

Concurrency control on status updates is two-fold:

- ``get_for_update`` takes a row-level lock (``select_for_update()``) where
  the backend supports it.
- ``save`` issues a conditional ``UPDATE ... WHERE version = n`` and raises
  ``OrderConflict`` when no row matches, which also covers backends that
  silently ignore ``FOR UPDATE`` (SQLite).
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

import structlog
from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import F, QuerySet
from django.utils import timezone

from modules.orders.exceptions import OrderConflict
from modules.orders.models import Order, OrderItem, OrderStatusHistory
from modules.orders.repositories.interfaces import IOrderRepository

logger = structlog.get_logger(__name__)

_RELATIONS = ("items", "status_history")


class OrderDjangoRepository(IOrderRepository):
    """Concrete Order repository backed by Django ORM."""

    # ------------------------------------------------------------------
    # Create (aggregate root + children)
    # ------------------------------------------------------------------

    @transaction.atomic
    def create(self, order: Order) -> Order:
        """Insert the order, then its staged items and history, atomically."""
        order.save(force_insert=True)

        items: List[OrderItem] = order.pop_staged("items")
        for item in items:
            item.order_id = order.id
            item.save(force_insert=True)

        self._write_history(order)

        logger.info("order.persisted", order_id=str(order.id), item_count=len(items))
        return order

    # ------------------------------------------------------------------
    # Update
    # ------------------------------------------------------------------

    @transaction.atomic
    def save(self, entity: Order) -> Order:
        """Persist status fields with an optimistic version check."""
        if entity._state.adding:
            return self.create(entity)

        now = entity.updated_at or timezone.now()
        updated = Order.objects.filter(id=entity.id, version=entity.version).update(
            status=entity.status,
            delivered_at=entity.delivered_at,
            updated_at=now,
            version=F("version") + 1,
        )
        if updated == 0:
            logger.warning(
                "order.version_conflict",
                order_id=str(entity.id),
                expected_version=entity.version,
            )
            raise OrderConflict(f"Order {entity.id} was modified concurrently.")

        entity.version += 1
        entity.updated_at = now
        self._write_history(entity)
        return entity

    def _write_history(self, order: Order) -> None:
        entries: List[OrderStatusHistory] = order.pop_staged("history")
        for entry in entries:
            entry.order_id = order.id
            entry.save(force_insert=True)
            logger.info(
                "order.history_added",
                order_id=str(order.id),
                old_status=entry.old_status,
                new_status=entry.new_status,
            )

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def get_by_id(self, id: str) -> Optional[Order]:
        """Retrieve an order with prefetched items and history.

        Returns ``None`` for non-existent or invalid IDs.
        """
        try:
            return Order.objects.prefetch_related(*_RELATIONS).filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def get_for_update(self, id: str) -> Optional[Order]:
        """Retrieve an order with a row-level lock (SELECT FOR UPDATE).

        Items are prefetched so the caller can iterate over them while
        the row is locked.  Returns ``None`` for non-existent or invalid IDs.
        """
        try:
            return (
                Order.objects.select_for_update()
                .prefetch_related(*_RELATIONS)
                .filter(id=id)
                .first()
            )
        except (ValueError, ValidationError):
            return None

    def queryset(self) -> QuerySet:
        """Base listing queryset, newest first, for DRF filter backends."""
        return Order.objects.prefetch_related(*_RELATIONS).order_by(
            "-created_at", "-id"
        )

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Order]:
        """List orders (newest first) with optional Django ORM look-ups.

        Supported filter keys include ``status``, ``user_id`` and
        ``created_at__range``.
        """
        queryset = self.queryset()
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset)

    def list_by_user(self, user_id: Any) -> List[Order]:
        return self.list({"user_id": user_id})

    def list_by_status(self, status: str) -> List[Order]:
        return self.list({"status": status})

    def list_created_between(self, start: datetime, end: datetime) -> List[Order]:
        return self.list({"created_at__range": (start, end)})

    def exists(self, id: str) -> bool:
        try:
            return Order.objects.filter(id=id).exists()
        except (ValueError, ValidationError):
            return False

    # ------------------------------------------------------------------
    # Delete
    # ------------------------------------------------------------------

    @transaction.atomic
    def delete(self, id: str) -> bool:
        """Hard-delete an order with its items and history."""
        if not self.exists(id):
            return False
        Order.objects.filter(id=id).delete()
        logger.info("order.deleted", order_id=str(id))
        return True
