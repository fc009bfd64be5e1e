from decimal import Decimal

import pytest
from rest_framework.test import APIClient


@pytest.fixture(autouse=True)
def _use_db(db):
    """Automatically use the test database for all tests."""


@pytest.fixture()
def api_client():
    """DRF APIClient for testing API endpoints."""
    return APIClient()


@pytest.fixture()
def customer_user():
    from django.contrib.auth import get_user_model

    return get_user_model().objects.create_user(
        username="camila", email="camila@example.cl", password="testpass123"
    )


@pytest.fixture()
def other_user():
    from django.contrib.auth import get_user_model

    return get_user_model().objects.create_user(
        username="matias", email="matias@example.cl", password="testpass123"
    )


@pytest.fixture()
def staff_user():
    from django.contrib.auth import get_user_model

    return get_user_model().objects.create_user(
        username="admin",
        email="admin@huerto.cl",
        password="testpass123",
        is_staff=True,
    )


@pytest.fixture()
def principal(customer_user):
    from modules.core.principal import Principal

    return Principal(user_id=customer_user.pk, email=customer_user.email)


@pytest.fixture()
def staff_principal(staff_user):
    from modules.core.principal import Principal

    return Principal(user_id=staff_user.pk, email=staff_user.email)


@pytest.fixture()
def customer_client(customer_user):
    client = APIClient()
    client.force_authenticate(user=customer_user)
    return client


@pytest.fixture()
def staff_client(staff_user):
    client = APIClient()
    client.force_authenticate(user=staff_user)
    return client


@pytest.fixture()
def make_product():
    from modules.products.models import Product

    def _make(name="Tomate cherry", price="2990.00", stock=10, **extra):
        return Product.objects.create(
            name=name, price=Decimal(price), stock=stock, **extra
        )

    return _make


@pytest.fixture()
def tomato(make_product):
    return make_product(name="Tomate cherry", price="2990.00", stock=10)


@pytest.fixture()
def lettuce(make_product):
    return make_product(name="Lechuga hidropónica", price="1490.00", stock=3)


@pytest.fixture()
def customer_snapshot():
    return {
        "name": "Camila Rojas",
        "email": "camila@example.cl",
        "phone": "+56 9 1234 5678",
        "address": {
            "street": "Av. Providencia",
            "number": "1234",
            "city": "Santiago",
            "region": "Metropolitana",
            "zip_code": "7500000",
        },
    }


@pytest.fixture()
def order_payload(tomato, lettuce, customer_snapshot):
    """A two-line checkout request as the storefront sends it."""
    return {
        "items": [
            {
                "product_id": str(tomato.id),
                "name": tomato.name,
                "price": "2990.00",
                "quantity": 2,
            },
            {
                "product_id": str(lettuce.id),
                "name": lettuce.name,
                "price": "1490.00",
                "quantity": 1,
            },
        ],
        "subtotal": "7470.00",
        "shipping_cost": "3000.00",
        "discount": "0.00",
        "total": "10470.00",
        "customer": customer_snapshot,
        "payment_method": "webpay",
    }


@pytest.fixture()
def order_service():
    from modules.orders.repositories.django_repository import OrderDjangoRepository
    from modules.orders.services import OrderService
    from modules.products.repositories.django_repository import (
        ProductDjangoRepository,
    )
    from modules.products.services import ProductService
    from modules.sales.repositories.django_repository import SaleDjangoRepository
    from modules.sales.services import SaleService

    return OrderService(
        order_repository=OrderDjangoRepository(),
        product_service=ProductService(ProductDjangoRepository()),
        sale_service=SaleService(SaleDjangoRepository()),
    )


@pytest.fixture()
def pending_order(order_service, order_payload, principal):
    return order_service.create_order(order_payload, principal)
