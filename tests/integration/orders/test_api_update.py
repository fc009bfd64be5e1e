"""Integration tests for PATCH and DELETE /api/v1/orders/{id}/."""

from __future__ import annotations

from uuid import uuid4

import pytest

from modules.orders.models import Order
from modules.sales.models import Sale

pytestmark = pytest.mark.integration

URL = "/api/v1/orders/"


class TestChangeStatusAPI:
    def test_customers_cannot_change_status(self, customer_client, pending_order):
        response = customer_client.patch(
            f"{URL}{pending_order.id}/", {"status": "DELIVERED"}, format="json"
        )
        assert response.status_code == 403
        assert Order.objects.get(id=pending_order.id).status == "PENDING"

    def test_staff_changes_status(self, staff_client, pending_order):
        response = staff_client.patch(
            f"{URL}{pending_order.id}/", {"status": "processing"}, format="json"
        )

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "PROCESSING"
        assert [h["new_status"] for h in data["status_history"]] == [
            "PENDING",
            "PROCESSING",
        ]
        assert data["status_history"][-1]["changed_by"] == "admin@huerto.cl"

    def test_delivery_records_sale_and_decrements_stock(
        self, staff_client, pending_order, tomato
    ):
        response = staff_client.patch(
            f"{URL}{pending_order.id}/", {"status": "DELIVERED"}, format="json"
        )

        assert response.status_code == 200
        assert response.json()["delivered_at"] is not None
        tomato.refresh_from_db()
        assert tomato.stock == 8
        assert Sale.objects.filter(order_id=pending_order.id).count() == 1

    def test_redelivery_after_processing_succeeds_once(
        self, staff_client, pending_order, tomato
    ):
        for status in ("DELIVERED", "PROCESSING", "DELIVERED"):
            response = staff_client.patch(
                f"{URL}{pending_order.id}/", {"status": status}, format="json"
            )
            assert response.status_code == 200

        tomato.refresh_from_db()
        assert (tomato.stock, tomato.purchase_count) == (8, 2)
        assert Sale.objects.filter(order_id=pending_order.id).count() == 1
        assert response.json()["status"] == "DELIVERED"

    def test_unknown_status(self, staff_client, pending_order):
        response = staff_client.patch(
            f"{URL}{pending_order.id}/", {"status": "SHIPED"}, format="json"
        )

        assert response.status_code == 400
        body = response.json()
        assert body["type"] == "validation_error"
        assert body["errors"][0]["code"] == "invalid_status"

    def test_missing_status(self, staff_client, pending_order):
        response = staff_client.patch(f"{URL}{pending_order.id}/", {}, format="json")
        assert response.status_code == 400

    def test_unknown_order(self, staff_client):
        response = staff_client.patch(
            f"{URL}{uuid4()}/", {"status": "SHIPPED"}, format="json"
        )
        assert response.status_code == 404


class TestDeleteOrderAPI:
    def test_staff_deletes(self, staff_client, pending_order):
        response = staff_client.delete(f"{URL}{pending_order.id}/")
        assert response.status_code == 204
        assert not Order.objects.filter(id=pending_order.id).exists()

    def test_customers_cannot_delete(self, customer_client, pending_order):
        response = customer_client.delete(f"{URL}{pending_order.id}/")
        assert response.status_code == 403
        assert Order.objects.filter(id=pending_order.id).exists()

    def test_unknown_order(self, staff_client):
        assert staff_client.delete(f"{URL}{uuid4()}/").status_code == 404
