"""Unit tests for order serializers."""

from __future__ import annotations

import pytest

from modules.orders.serializers import CreateOrderSerializer, OrderSerializer

pytestmark = pytest.mark.unit


class TestCreateOrderSerializer:
    def test_valid_payload(self, order_payload):
        serializer = CreateOrderSerializer(data=order_payload)
        assert serializer.is_valid(), serializer.errors
        assert serializer.validated_data["items"][0]["quantity"] == 2

    def test_total_is_required(self, order_payload):
        del order_payload["total"]
        serializer = CreateOrderSerializer(data=order_payload)
        assert not serializer.is_valid()
        assert "total" in serializer.errors

    def test_items_must_not_be_empty(self, order_payload):
        order_payload["items"] = []
        serializer = CreateOrderSerializer(data=order_payload)
        assert not serializer.is_valid()
        assert "items" in serializer.errors

    def test_quantity_below_one(self, order_payload):
        order_payload["items"][0]["quantity"] = 0
        serializer = CreateOrderSerializer(data=order_payload)
        assert not serializer.is_valid()

    def test_customer_name_is_required(self, order_payload):
        del order_payload["customer"]["name"]
        serializer = CreateOrderSerializer(data=order_payload)
        assert not serializer.is_valid()
        assert "customer" in serializer.errors


class TestOrderSerializer:
    def test_renders_projection(self, pending_order):
        data = OrderSerializer(pending_order).data

        assert data["status"] == "PENDING"
        assert data["status_label"] == "Pendiente"
        assert data["total"] == "10470.00"
        assert data["customer"]["name"] == "Camila Rojas"
        assert data["customer"]["address"]["city"] == "Santiago"
        assert len(data["items"]) == 2
        assert data["items"][0]["line_total"] == "5980.00"
        assert data["status_history"][0]["new_status"] == "PENDING"
        assert data["delivered_at"] is None
