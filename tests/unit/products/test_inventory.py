"""Tests for the InventoryAdjuster against the real repository."""

from __future__ import annotations

from uuid import uuid4

import pytest

from modules.products.exceptions import InsufficientStock, ProductNotFound
from modules.products.inventory import InventoryAdjuster
from modules.products.repositories.django_repository import ProductDjangoRepository

pytestmark = pytest.mark.unit


@pytest.fixture()
def adjuster():
    return InventoryAdjuster(ProductDjangoRepository())


class TestInventoryAdjuster:
    def test_decrement(self, adjuster, make_product):
        product = make_product(stock=10)

        adjuster.adjust(product.id, -3)

        product.refresh_from_db()
        assert product.stock == 7

    def test_increment(self, adjuster, make_product):
        product = make_product(stock=0)

        adjuster.adjust(product.id, 4)

        product.refresh_from_db()
        assert product.stock == 4

    def test_can_reach_zero(self, adjuster, make_product):
        product = make_product(stock=2)
        adjuster.adjust(product.id, -2)
        product.refresh_from_db()
        assert product.stock == 0

    def test_negative_result_rejected(self, adjuster, make_product):
        product = make_product(name="Teclado", stock=2)

        with pytest.raises(InsufficientStock) as excinfo:
            adjuster.adjust(product.id, -3)

        assert excinfo.value.available == 2
        assert excinfo.value.requested == 3
        assert "Teclado" in str(excinfo.value)
        product.refresh_from_db()
        assert product.stock == 2

    def test_unknown_product(self, adjuster):
        with pytest.raises(ProductNotFound):
            adjuster.adjust(uuid4(), 1)
