"""Unit tests for the checkout DTOs."""

from __future__ import annotations

from decimal import Decimal
from uuid import uuid4

import pytest
from pydantic import ValidationError

from modules.orders.dtos import CreateOrderDTO, CreateOrderItemDTO, CustomerSnapshotDTO

pytestmark = pytest.mark.unit


def _payload(**overrides):
    payload = {
        "items": [{"product_id": str(uuid4()), "name": "Tomate", "price": "2990", "quantity": 1}],
        "total": "2990",
        "customer": {"name": "Camila"},
    }
    payload.update(overrides)
    return payload


class TestCreateOrderItemDTO:
    def test_as_item_maps_price_to_unit_price(self):
        dto = CreateOrderItemDTO(name="Tomate", price=Decimal("2990.00"), quantity=2)
        item = dto.as_item()
        assert item["unit_price"] == Decimal("2990.00")
        assert item["product_id"] is None
        assert item["image"] == ""

    def test_quantity_below_one_rejected(self):
        with pytest.raises(ValidationError):
            CreateOrderItemDTO(name="Tomate", price=Decimal("1"), quantity=0)

    def test_negative_price_rejected(self):
        with pytest.raises(ValidationError):
            CreateOrderItemDTO(name="Tomate", price=Decimal("-1"), quantity=1)

    def test_is_frozen(self):
        dto = CreateOrderItemDTO(name="Tomate", price=Decimal("1"), quantity=1)
        with pytest.raises(ValidationError):
            dto.quantity = 5


class TestCreateOrderDTO:
    def test_valid_payload(self):
        dto = CreateOrderDTO.model_validate(_payload())
        assert dto.total == Decimal("2990")
        assert dto.subtotal == Decimal("0.00")
        assert dto.payment_method == ""

    def test_none_money_means_zero(self):
        dto = CreateOrderDTO.model_validate(_payload(discount=None, shipping_cost=None))
        assert dto.discount == Decimal("0.00")
        assert dto.shipping_cost == Decimal("0.00")

    def test_empty_items_rejected(self):
        with pytest.raises(ValidationError):
            CreateOrderDTO.model_validate(_payload(items=[]))

    def test_missing_total_rejected(self):
        payload = _payload()
        del payload["total"]
        with pytest.raises(ValidationError):
            CreateOrderDTO.model_validate(payload)

    def test_negative_total_rejected(self):
        with pytest.raises(ValidationError):
            CreateOrderDTO.model_validate(_payload(total="-5"))


class TestCustomerSnapshotDTO:
    def test_as_snapshot_includes_full_address(self):
        snapshot = CustomerSnapshotDTO(name="Camila").as_snapshot()
        assert snapshot["address"] == {
            "street": "",
            "number": "",
            "city": "",
            "region": "",
            "zip_code": "",
        }
