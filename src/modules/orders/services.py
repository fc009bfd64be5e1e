"""Order service layer: the order lifecycle orchestrator.

Coordinates the Order aggregate, the inventory ledger
(``ProductService``) and the sale recorder (``SaleService``).

Business rules enforced:
- Checkout opens a PENDING order owned by the calling principal.
- Every status change is recorded in the order history.
- Checkout only references products that exist.
- Delivery gate: the first time an order becomes DELIVERED, stock is
  decremented once per line item with a product and one sale is
  recorded.  Repeating DELIVERED later, directly or after another
  status, never fires it again.
- The status change, stock decrements and sale creation form one unit of
  work: either all of them land or none does.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional, Union
from uuid import UUID

import pydantic
import structlog
from django.contrib.auth import get_user_model
from django.db import DatabaseError, IntegrityError, transaction

from modules.core.exceptions import InternalError
from modules.orders.constants import (
    STATUS_CHANGE_MAX_ATTEMPTS,
    OrderStatus,
    parse_status,
)
from modules.orders.dtos import CreateOrderDTO
from modules.orders.exceptions import (
    OrderConflict,
    OrderNotFound,
    OrderValidationError,
    UserNotFound,
)
from modules.orders.models import Order

if TYPE_CHECKING:
    from modules.core.principal import Principal
    from modules.orders.repositories.interfaces import IOrderRepository
    from modules.products.services import ProductService
    from modules.sales.services import SaleService

logger = structlog.get_logger(__name__)


class OrderService:
    """Application service for Order use-cases.

    Receives the order repository and the collaborating services via
    constructor injection (DIP).
    """

    def __init__(
        self,
        order_repository: IOrderRepository,
        product_service: ProductService,
        sale_service: SaleService,
    ) -> None:
        self._order_repo = order_repository
        self._product_service = product_service
        self._sale_service = sale_service

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def create_order(
        self,
        request: Union[CreateOrderDTO, Mapping[str, Any]],
        principal: Principal,
    ) -> Order:
        """Open a new PENDING order for *principal*.

        Raises:
            OrderValidationError: malformed checkout request.
            UserNotFound: the principal does not resolve to a user.
            ProductNotFound: an item references an unknown product.
            InternalError: the store failed.
        """
        dto = _as_create_dto(request)
        log = logger.bind(user_id=principal.user_id)
        log.info("order.creation_started", item_count=len(dto.items))

        if not get_user_model().objects.filter(pk=principal.user_id).exists():
            raise UserNotFound(f"User {principal.user_id} not found.")

        order = Order.open(
            user_id=principal.user_id,
            items=[item.as_item() for item in dto.items],
            total=dto.total,
            subtotal=dto.subtotal,
            shipping_cost=dto.shipping_cost,
            discount=dto.discount,
            customer=dto.customer.as_snapshot(),
            payment_method=dto.payment_method,
            actor=principal.actor,
        )

        try:
            with transaction.atomic():
                self._ensure_products(dto)
                self._order_repo.create(order)
        except DatabaseError as exc:
            log.exception("order.store_failure", operation="create_order")
            raise InternalError() from exc

        log.info("order.created", order_id=str(order.id), total=str(order.total))
        return self._order_repo.get_by_id(str(order.id)) or order

    def change_status(
        self,
        order_id: Union[UUID, str],
        new_status: Union[OrderStatus, str],
        principal: Principal,
    ) -> Order:
        """Apply a status change and, on first delivery, its side effects.

        The whole unit of work runs inside one ``transaction.atomic()``
        scope.  A concurrent modification rolls the scope back and the
        unit is retried once against freshly loaded state.

        Raises:
            OrderNotFound: the order does not exist.
            InvalidOrderStatus: *new_status* is not an order status.
            ProductNotFound: an item references a product that vanished.
            OrderConflict: the order kept changing underneath us.
            InternalError: the store failed.
        """
        log = logger.bind(
            order_id=str(order_id),
            requested_status=str(new_status),
            actor=principal.actor,
        )

        attempt = 0
        while True:
            attempt += 1
            try:
                with transaction.atomic():
                    order = self._change_status_once(order_id, new_status, principal)
            except (OrderConflict, IntegrityError) as exc:
                # The only unique constraint touched here is one sale per order.
                if attempt >= STATUS_CHANGE_MAX_ATTEMPTS:
                    log.warning("order.conflict", attempts=attempt)
                    if isinstance(exc, OrderConflict):
                        raise
                    raise OrderConflict(
                        f"Order {order_id} was modified concurrently."
                    ) from exc
                log.info("order.conflict_retry", attempt=attempt)
                continue
            except DatabaseError as exc:
                log.exception("order.store_failure", operation="change_status")
                raise InternalError() from exc

            return self._order_repo.get_by_id(str(order_id)) or order

    def _change_status_once(
        self,
        order_id: Union[UUID, str],
        new_status: Union[OrderStatus, str],
        principal: Principal,
    ) -> Order:
        order = self._order_repo.get_for_update(str(order_id))
        if not order:
            raise OrderNotFound(f"Order {order_id} not found.")

        status = parse_status(new_status)
        old_status = order.status
        # delivered_at is only ever set once, on the first delivery.
        first_delivery = order.delivered_at is None

        order.apply_status_change(status, principal.actor)

        if (
            status == OrderStatus.DELIVERED
            and old_status != OrderStatus.DELIVERED
            and first_delivery
        ):
            self._fulfil(order)

        self._order_repo.save(order)
        logger.info(
            "order.status_changed",
            order_id=str(order.id),
            old_status=old_status,
            new_status=status,
        )
        return order

    def _ensure_products(self, dto: CreateOrderDTO) -> None:
        product_ids = {item.product_id for item in dto.items if item.product_id}
        for product_id in sorted(product_ids, key=str):
            self._product_service.get_product(str(product_id))

    def _fulfil(self, order: Order) -> None:
        """Decrement stock per line item, then record the sale."""
        # Product rows are locked in id order to avoid deadlocks.
        items = sorted(
            (item for item in order.items.all() if item.product_id is not None),
            key=lambda item: str(item.product_id),
        )
        for item in items:
            self._product_service.decrement_stock(item.product_id, item.quantity)

        self._sale_service.create_from_order(order)
        logger.info("order.delivered", order_id=str(order.id), item_count=len(items))

    @transaction.atomic
    def delete_order(self, order_id: Union[UUID, str]) -> None:
        """Administrative hard delete; bypasses every lifecycle rule.

        Sales already recorded for the order are kept.

        Raises:
            OrderNotFound: the order does not exist.
        """
        if not self._order_repo.delete(str(order_id)):
            raise OrderNotFound(f"Order {order_id} not found.")
        logger.info("order.deleted_by_admin", order_id=str(order_id))

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_order(self, order_id: Union[UUID, str]) -> Order:
        """Retrieve a single order by ID.

        Raises:
            OrderNotFound: if the order does not exist.
        """
        order = self._order_repo.get_by_id(str(order_id))
        if not order:
            raise OrderNotFound(f"Order {order_id} not found.")
        return order

    def list_orders(self, filters: Optional[Dict[str, Any]] = None) -> List[Order]:
        """Return orders newest first, optionally filtered."""
        return self._order_repo.list(filters)

    def list_user_orders(self, user_id: Any) -> List[Order]:
        return self._order_repo.list_by_user(user_id)

    def list_my_orders(self, principal: Principal) -> List[Order]:
        return self._order_repo.list_by_user(principal.user_id)

    def list_orders_by_status(self, status: Union[OrderStatus, str]) -> List[Order]:
        """Raises ``InvalidOrderStatus`` for an unknown status string."""
        return self._order_repo.list_by_status(parse_status(status))

    def list_orders_by_date_range(self, start: datetime, end: datetime) -> List[Order]:
        return self._order_repo.list_created_between(start, end)


def _as_create_dto(request: Union[CreateOrderDTO, Mapping[str, Any]]) -> CreateOrderDTO:
    if isinstance(request, CreateOrderDTO):
        return request
    try:
        return CreateOrderDTO.model_validate(dict(request))
    except pydantic.ValidationError as exc:
        raise OrderValidationError(_describe(exc)) from exc


def _describe(exc: pydantic.ValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"])
        parts.append(f"{location}: {error['msg']}" if location else error["msg"])
    return "; ".join(parts)
