"""Sale domain exceptions."""

from __future__ import annotations

from modules.core.exceptions import NotFoundError, ValidationError


class SaleNotFound(NotFoundError):
    """The requested sale does not exist."""


class SaleIsImmutable(ValidationError):
    """A sale is written once, at delivery time, and never updated."""

    code = "immutable"
