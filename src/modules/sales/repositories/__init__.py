"""Sale repositories package."""

from modules.sales.repositories.django_repository import SaleDjangoRepository
from modules.sales.repositories.interfaces import ISaleRepository

__all__ = ["ISaleRepository", "SaleDjangoRepository"]
