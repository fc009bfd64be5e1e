"""Order domain exceptions.

Raised by the aggregate and the Service Layer when business rules are
violated.  Each one belongs to a family of ``modules.core.exceptions``,
which decides how the API layer renders it.
"""

from __future__ import annotations

from modules.core.exceptions import ConflictError, NotFoundError, ValidationError


class OrderNotFound(NotFoundError):
    """The requested order does not exist."""


class UserNotFound(NotFoundError):
    """The authenticated principal does not resolve to a local user."""


class OrderValidationError(ValidationError):
    """The checkout request is malformed (empty cart, missing total, ...)."""


class InvalidOrderStatus(ValidationError):
    """The status string is not one of the enumerated order statuses."""

    code = "invalid_status"


class OrderConflict(ConflictError):
    """The order changed underneath us (stale version or duplicate sale)."""
