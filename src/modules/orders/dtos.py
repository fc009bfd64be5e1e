"""Order DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
These are the contracts between the API layer (DRF Serializers)
and the Service layer.  DTOs are immutable (``frozen=True``).

- ``CreateOrderItemDTO``: one line item snapshot (name, price, quantity).
- ``AddressDTO`` / ``CustomerSnapshotDTO``: customer data copied at checkout.
- ``CreateOrderDTO``: the whole checkout request.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CreateOrderItemDTO(BaseModel):
    """Immutable DTO for a single line item in a checkout request.

    ``product_id`` is optional: custom or since-deleted products are
    sold by name and price alone.
    """

    model_config = ConfigDict(frozen=True)

    product_id: Optional[UUID] = None
    name: str
    price: Decimal = Field(ge=0)
    quantity: int
    image: str = ""

    @field_validator("quantity")
    @classmethod
    def quantity_must_be_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("Quantity must be at least 1.")
        return v

    def as_item(self) -> Dict[str, Any]:
        return {
            "product_id": self.product_id,
            "name": self.name,
            "unit_price": self.price,
            "quantity": self.quantity,
            "image": self.image,
        }


class AddressDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    street: str = ""
    number: str = ""
    city: str = ""
    region: str = ""
    zip_code: str = ""


class CustomerSnapshotDTO(BaseModel):
    """Customer contact and shipping data as given at checkout."""

    model_config = ConfigDict(frozen=True)

    name: str
    email: str = ""
    phone: str = ""
    address: AddressDTO = Field(default_factory=AddressDTO)

    def as_snapshot(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "address": self.address.model_dump(),
        }


class CreateOrderDTO(BaseModel):
    """Immutable DTO for checkout requests.

    Validates:
    - ``items`` must contain at least one item.
    - ``total`` is mandatory; it is *not* recomputed from the items.
    - Monetary fields are non-negative.
    """

    model_config = ConfigDict(frozen=True)

    items: List[CreateOrderItemDTO]
    total: Decimal = Field(ge=0)
    subtotal: Decimal = Field(default=Decimal("0.00"), ge=0)
    shipping_cost: Decimal = Field(default=Decimal("0.00"), ge=0)
    discount: Decimal = Field(default=Decimal("0.00"), ge=0)
    customer: CustomerSnapshotDTO
    payment_method: str = ""

    @field_validator("items")
    @classmethod
    def items_must_not_be_empty(
        cls, v: List[CreateOrderItemDTO]
    ) -> List[CreateOrderItemDTO]:
        if not v:
            raise ValueError("Order must have at least one item.")
        return v

    @field_validator("subtotal", "shipping_cost", "discount", mode="before")
    @classmethod
    def none_means_zero(cls, v: Any) -> Any:
        return Decimal("0.00") if v is None else v
