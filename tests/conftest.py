from __future__ import annotations

from decimal import Decimal

import pytest

from django.contrib.auth import get_user_model
from django.contrib.auth.hashers import make_password

from rest_framework.test import APIClient

from modules.categories.models import Category
from modules.customers.models import Customer
from modules.products.models import Product

VALID_CPF = "59860184275"
OTHER_VALID_CPF = "39053344705"
THIRD_VALID_CPF = "11144477735"


@pytest.fixture(autouse=True)
def _use_db(db):
    """Automatically use the test database for all tests."""


@pytest.fixture()
def api_client():
    """DRF APIClient for testing API endpoints."""
    return APIClient()


@pytest.fixture()
def api_client_with_correlation(api_client):
    """APIClient pre-configured with a known correlation ID header."""
    cid = "test-correlation-id-fixture"
    api_client.defaults["HTTP_X_REQUEST_ID"] = cid
    return api_client, cid


@pytest.fixture()
def auth_client():
    """APIClient with a force-authenticated Django user."""
    client = APIClient()
    user = get_user_model().objects.create_user(
        username="storeuser", password="testpass123"
    )
    client.force_authenticate(user=user)
    return client


@pytest.fixture()
def category():
    return Category.objects.create(name="Periféricos", description="Mouses e teclados")


@pytest.fixture()
def make_product():
    def _make(name="Mouse", price="5.00", stock=10, category=None) -> Product:
        return Product.objects.create(
            name=name, price=Decimal(price), stock=stock, category=category
        )

    return _make


@pytest.fixture()
def customer():
    return Customer.objects.create(
        name="João Silva",
        email="joao@example.com",
        cpf=VALID_CPF,
        password=make_password("senha123"),
    )
