"""Order domain constants.

Defines the order status choices and the explicit parser used for
every status string coming from outside the service layer.

There is no transition table: any status may follow any other
(DELIVERED and CANCELLED are not terminal).  The only rule attached to
a transition is the delivery gate in ``OrderService.change_status``.
"""

from __future__ import annotations

from typing import Dict

from django.db import models

from modules.orders.exceptions import InvalidOrderStatus


class OrderStatus(models.TextChoices):
    PENDING = "PENDING", "Pendiente"
    PROCESSING = "PROCESSING", "Procesando"
    SHIPPED = "SHIPPED", "Enviado"
    DELIVERED = "DELIVERED", "Entregado"
    CANCELLED = "CANCELLED", "Cancelado"


_STATUS_BY_NAME: Dict[str, OrderStatus] = {
    "PENDING": OrderStatus.PENDING,
    "PROCESSING": OrderStatus.PROCESSING,
    "SHIPPED": OrderStatus.SHIPPED,
    "DELIVERED": OrderStatus.DELIVERED,
    "CANCELLED": OrderStatus.CANCELLED,
}


def parse_status(value: object) -> OrderStatus:
    """Parse a case-insensitive status name into an ``OrderStatus``.

    Raises:
        InvalidOrderStatus: if *value* is not one of the five status names.
    """
    if isinstance(value, OrderStatus):
        return value
    if not isinstance(value, str):
        raise InvalidOrderStatus(f"Invalid order status: {value!r}.")
    status = _STATUS_BY_NAME.get(value.strip().upper())
    if status is None:
        raise InvalidOrderStatus(f"Invalid order status: {value!r}.")
    return status


# A conflicting concurrent update is retried once with a fresh load.
STATUS_CHANGE_MAX_ATTEMPTS = 2
