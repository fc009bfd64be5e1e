"""Order aggregate: Order, OrderItem and OrderStatusHistory models.

Business rules implemented:
- An order is opened in PENDING with exactly one history entry.
- Every status change appends one history entry (status, actor, timestamp).
- ``delivered_at`` is set the first time DELIVERED is applied, never again.
- Line items snapshot name / unit price / image at checkout; they are never
  re-derived from the live product.  ``product`` becomes NULL if the product
  is deleted later.
- Money fields are non-negative; ``total`` is caller-supplied.
- ``version`` backs optimistic concurrency control in the repository.

Children (items, history) are *staged* on the in-memory aggregate and
written by the repository keyed by ``order_id``; domain code never walks
from a child back to its order.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Mapping, Optional, Sequence

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone

from modules.core.models import BaseModel
from modules.orders.constants import OrderStatus, parse_status
from modules.orders.exceptions import OrderValidationError


_MONEY = {"max_digits": 12, "decimal_places": 2}
_ZERO = Decimal("0.00")


class Order(BaseModel):
    """Order aggregate root."""

    user: models.ForeignKey = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="orders",
        editable=False,
    )
    status: models.CharField = models.CharField(
        max_length=20,
        choices=OrderStatus.choices,
        default=OrderStatus.PENDING,
    )
    total: models.DecimalField = models.DecimalField(
        **_MONEY, validators=[MinValueValidator(_ZERO)]
    )
    subtotal: models.DecimalField = models.DecimalField(
        **_MONEY, default=_ZERO, validators=[MinValueValidator(_ZERO)]
    )
    shipping_cost: models.DecimalField = models.DecimalField(
        **_MONEY, default=_ZERO, validators=[MinValueValidator(_ZERO)]
    )
    discount: models.DecimalField = models.DecimalField(
        **_MONEY, default=_ZERO, validators=[MinValueValidator(_ZERO)]
    )
    payment_method: models.CharField = models.CharField(
        max_length=50, blank=True, default=""
    )

    # Customer snapshot, copied at checkout.
    customer_name: models.CharField = models.CharField(max_length=255)
    customer_email: models.EmailField = models.EmailField(blank=True, default="")
    customer_phone: models.CharField = models.CharField(
        max_length=50, blank=True, default=""
    )
    shipping_address: models.JSONField = models.JSONField(default=dict, blank=True)

    delivered_at: models.DateTimeField = models.DateTimeField(null=True, blank=True)
    version: models.PositiveIntegerField = models.PositiveIntegerField(default=1)

    class Meta:
        db_table = "orders"
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["status"], name="orders_status_idx"),
            models.Index(fields=["-created_at"], name="orders_created_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(total__gte=0)
                & models.Q(subtotal__gte=0)
                & models.Q(shipping_cost__gte=0)
                & models.Q(discount__gte=0),
                name="orders_money_non_negative",
            ),
        ]

    # ------------------------------------------------------------------
    # Factory
    # ------------------------------------------------------------------

    @classmethod
    def open(
        cls,
        *,
        user_id: Any,
        items: Sequence[Mapping[str, Any]],
        total: Optional[Decimal],
        customer: Mapping[str, Any],
        actor: str,
        subtotal: Optional[Decimal] = None,
        shipping_cost: Optional[Decimal] = None,
        discount: Optional[Decimal] = None,
        payment_method: str = "",
    ) -> Order:
        """Build an unsaved PENDING order with staged items and history.

        ``items`` entries carry ``product_id`` (optional), ``name``,
        ``unit_price``, ``quantity`` and ``image``.

        Raises:
            OrderValidationError: empty items, quantity < 1, missing total
                or a negative monetary value.
        """
        if not items:
            raise OrderValidationError("Order must have at least one item.")
        if total is None:
            raise OrderValidationError("Order total is required.")
        for item in items:
            quantity = item.get("quantity")
            if quantity is None or quantity < 1:
                raise OrderValidationError("Item quantity must be at least 1.")

        money = {
            "total": total,
            "subtotal": subtotal if subtotal is not None else _ZERO,
            "shipping_cost": shipping_cost if shipping_cost is not None else _ZERO,
            "discount": discount if discount is not None else _ZERO,
        }
        for field, value in money.items():
            if value < 0:
                raise OrderValidationError(f"{field} cannot be negative.")

        order = cls(
            user_id=user_id,
            status=OrderStatus.PENDING,
            payment_method=payment_method or "",
            customer_name=customer.get("name", ""),
            customer_email=customer.get("email") or "",
            customer_phone=customer.get("phone") or "",
            shipping_address=dict(customer.get("address") or {}),
            **money,
        )
        order._staged("items").extend(
            OrderItem(
                order_id=order.id,
                product_id=item.get("product_id"),
                name=item["name"],
                unit_price=item["unit_price"],
                quantity=item["quantity"],
                image=item.get("image") or "",
                position=position,
            )
            for position, item in enumerate(items)
        )
        order._record(None, OrderStatus.PENDING, actor, timezone.now())
        return order

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def apply_status_change(
        self,
        new_status: OrderStatus | str,
        actor: str,
        at: Optional[datetime] = None,
    ) -> OrderStatusHistory:
        """Move the order to *new_status* and stage the history entry.

        Any status is accepted from any other.  ``delivered_at`` is only
        set when DELIVERED is applied while it is still unset.

        Raises:
            InvalidOrderStatus: if *new_status* is not an order status.
        """
        new_status = parse_status(new_status)
        now = at or timezone.now()
        entry = self._record(self.status, new_status, actor, now)
        self.status = new_status
        self.updated_at = now
        if new_status == OrderStatus.DELIVERED and self.delivered_at is None:
            self.delivered_at = now
        return entry

    def _record(
        self,
        old_status: Optional[str],
        new_status: str,
        actor: str,
        at: datetime,
    ) -> OrderStatusHistory:
        entry = OrderStatusHistory(
            order_id=self.id,
            old_status=old_status,
            new_status=new_status,
            changed_by=actor,
            changed_at=at,
        )
        self._staged("history").append(entry)
        return entry

    # ------------------------------------------------------------------
    # Staged children
    # ------------------------------------------------------------------

    def _staged(self, kind: str) -> List[Any]:
        staged: Dict[str, List[Any]] = self.__dict__.setdefault("_staged_children", {})
        return staged.setdefault(kind, [])

    def pop_staged(self, kind: str) -> List[Any]:
        """Hand the staged children of *kind* to the repository and forget them."""
        pending = list(self._staged(kind))
        self._staged(kind).clear()
        return pending

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------

    def __str__(self) -> str:
        return f"Order {self.id} ({self.status})"


class OrderItem(BaseModel):
    """Line item snapshot.

    ``unit_price``, ``name`` and ``image`` are copied from the checkout
    request and never follow later product edits.
    """

    order: models.ForeignKey = models.ForeignKey(
        "orders.Order",
        on_delete=models.CASCADE,
        related_name="items",
    )
    product: models.ForeignKey = models.ForeignKey(
        "products.Product",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="order_items",
    )
    name: models.CharField = models.CharField(max_length=255)
    unit_price: models.DecimalField = models.DecimalField(
        **_MONEY, validators=[MinValueValidator(_ZERO)]
    )
    quantity: models.PositiveIntegerField = models.PositiveIntegerField(
        validators=[MinValueValidator(1)],
    )
    image: models.CharField = models.CharField(max_length=500, blank=True, default="")
    position: models.PositiveSmallIntegerField = models.PositiveSmallIntegerField(
        default=0
    )

    class Meta:
        db_table = "order_items"
        ordering = ["position"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity__gte=1),
                name="order_items_quantity_positive",
            ),
        ]

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity

    def __str__(self) -> str:
        return f"{self.name} x{self.quantity}"


class OrderStatusHistory(BaseModel):
    """Append-only audit trail for order status changes.

    Audit records are immutable: the repository only ever inserts them.
    ``old_status`` is NULL for the entry written when the order is opened.
    """

    order: models.ForeignKey = models.ForeignKey(
        "orders.Order",
        on_delete=models.CASCADE,
        related_name="status_history",
    )
    old_status: models.CharField = models.CharField(  # noqa: DJ01
        max_length=20,
        choices=OrderStatus.choices,
        null=True,
        blank=True,
    )
    new_status: models.CharField = models.CharField(
        max_length=20,
        choices=OrderStatus.choices,
    )
    changed_by: models.CharField = models.CharField(max_length=255)
    changed_at: models.DateTimeField = models.DateTimeField()

    class Meta:
        db_table = "order_status_history"
        ordering = ["changed_at", "id"]
        indexes = [
            models.Index(
                fields=["order", "changed_at"],
                name="osh_order_changed_idx",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.order_id} : {self.old_status} -> {self.new_status}"
