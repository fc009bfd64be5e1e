"""Product domain exceptions."""

from __future__ import annotations

from modules.core.exceptions import NotFoundError


class ProductNotFound(NotFoundError):
    """The requested product does not exist (it may have been deleted)."""
