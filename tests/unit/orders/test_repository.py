"""Unit tests for OrderDjangoRepository.

Covers:
- Aggregate creation (Order + staged items + opening history).
- Optimistic version check on status updates.
- Reads with prefetched children, filters and invalid ids.
- Hard delete.
"""

from __future__ import annotations

from datetime import timedelta
from decimal import Decimal

import pytest
from django.db import connection
from django.test.utils import CaptureQueriesContext
from django.utils import timezone

from modules.orders.constants import OrderStatus
from modules.orders.exceptions import OrderConflict
from modules.orders.models import Order, OrderItem, OrderStatusHistory
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.repositories.interfaces import IOrderRepository

pytestmark = pytest.mark.unit


@pytest.fixture()
def repo():
    return OrderDjangoRepository()


@pytest.fixture()
def new_order(customer_user, tomato):
    return Order.open(
        user_id=customer_user.pk,
        items=[
            {
                "product_id": tomato.id,
                "name": tomato.name,
                "unit_price": Decimal("2990.00"),
                "quantity": 2,
            },
            {
                "product_id": None,
                "name": "Bolsa reutilizable",
                "unit_price": Decimal("500.00"),
                "quantity": 1,
            },
        ],
        total=Decimal("6480.00"),
        customer={"name": "Camila Rojas", "email": "camila@example.cl"},
        actor="camila@example.cl",
    )


class TestCreate:
    def test_implements_interface(self, repo):
        assert isinstance(repo, IOrderRepository)

    def test_writes_order_items_and_history(self, repo, new_order):
        repo.create(new_order)

        assert Order.objects.filter(id=new_order.id).exists()
        assert OrderItem.objects.filter(order_id=new_order.id).count() == 2
        history = OrderStatusHistory.objects.filter(order_id=new_order.id)
        assert [h.new_status for h in history] == [OrderStatus.PENDING]

    def test_staged_children_are_consumed(self, repo, new_order):
        repo.create(new_order)
        assert new_order.pop_staged("items") == []
        assert new_order.pop_staged("history") == []

    def test_save_of_new_order_delegates_to_create(self, repo, new_order):
        repo.save(new_order)
        assert OrderItem.objects.filter(order_id=new_order.id).count() == 2


class TestSave:
    def test_persists_status_and_bumps_version(self, repo, new_order):
        repo.create(new_order)
        order = repo.get_for_update(str(new_order.id))
        order.apply_status_change(OrderStatus.SHIPPED, "admin")

        repo.save(order)

        stored = Order.objects.get(id=new_order.id)
        assert stored.status == OrderStatus.SHIPPED
        assert stored.version == 2
        assert order.version == 2
        assert stored.status_history.count() == 2

    def test_stale_copy_raises_conflict(self, repo, new_order):
        repo.create(new_order)
        stale = repo.get_by_id(str(new_order.id))
        fresh = repo.get_by_id(str(new_order.id))

        fresh.apply_status_change(OrderStatus.PROCESSING, "admin")
        repo.save(fresh)

        stale.apply_status_change(OrderStatus.DELIVERED, "admin")
        with pytest.raises(OrderConflict):
            repo.save(stale)

        stored = Order.objects.get(id=new_order.id)
        assert stored.status == OrderStatus.PROCESSING
        assert stored.delivered_at is None
        assert stored.status_history.count() == 2


class TestRead:
    def test_get_by_id_prefetches_children(self, repo, new_order):
        repo.create(new_order)
        order = repo.get_by_id(str(new_order.id))

        with CaptureQueriesContext(connection) as ctx:
            list(order.items.all())
            list(order.status_history.all())
        assert len(ctx.captured_queries) == 0

    def test_invalid_id_returns_none(self, repo):
        assert repo.get_by_id("not-a-uuid") is None
        assert repo.get_for_update("not-a-uuid") is None
        assert repo.exists("not-a-uuid") is False

    def test_list_filters(self, repo, new_order, customer_user):
        repo.create(new_order)
        assert [o.id for o in repo.list_by_user(customer_user.pk)] == [new_order.id]
        assert [o.id for o in repo.list_by_status(OrderStatus.PENDING)] == [new_order.id]
        assert repo.list_by_status(OrderStatus.DELIVERED) == []

    def test_list_created_between_is_inclusive(self, repo, new_order):
        repo.create(new_order)
        created = Order.objects.get(id=new_order.id).created_at
        assert [o.id for o in repo.list_created_between(created, created)] == [
            new_order.id
        ]
        assert repo.list_created_between(
            created + timedelta(seconds=1), timezone.now() + timedelta(days=1)
        ) == []


class TestDelete:
    def test_hard_delete(self, repo, new_order):
        repo.create(new_order)
        assert repo.delete(str(new_order.id)) is True
        assert not Order.objects.filter(id=new_order.id).exists()
        assert not OrderItem.objects.filter(order_id=new_order.id).exists()

    def test_delete_missing_returns_false(self, repo):
        assert repo.delete("not-a-uuid") is False
