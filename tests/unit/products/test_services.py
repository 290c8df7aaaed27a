"""Unit tests for ProductService (mocked repositories)."""

from __future__ import annotations

from decimal import Decimal
from unittest.mock import MagicMock
from uuid import uuid4

import pytest
from django.db import IntegrityError

from modules.categories.exceptions import CategoryNotFound
from modules.categories.models import Category
from modules.products.dtos import CreateProductDTO, UpdateProductDTO
from modules.products.exceptions import (
    ProductAlreadyExists,
    ProductInUse,
    ProductNotFound,
)
from modules.products.models import Product
from modules.products.services import ProductService

pytestmark = pytest.mark.unit


@pytest.fixture()
def mock_repo():
    repo = MagicMock()
    repo.save.side_effect = lambda p, update_fields=None: p
    repo.get_by_id.return_value = None
    repo.get_for_update.return_value = None
    return repo


@pytest.fixture()
def mock_category_repo():
    return MagicMock()


@pytest.fixture()
def mock_order_repo():
    return MagicMock()


@pytest.fixture()
def service(mock_repo, mock_category_repo, mock_order_repo):
    return ProductService(
        repository=mock_repo,
        category_repository=mock_category_repo,
        order_repository=mock_order_repo,
    )


class TestCreateProduct:
    def test_success(self, service, mock_repo):
        mock_repo.get_by_name.return_value = None

        product = service.create_product(
            CreateProductDTO(name="Mouse", price=Decimal("79.90"), stock=3)
        )

        assert product.name == "Mouse"
        assert product.stock == 3
        mock_repo.save.assert_called_once()

    def test_duplicate_name_raises(self, service, mock_repo):
        mock_repo.get_by_name.return_value = Product(name="Mouse", price=1)
        with pytest.raises(ProductAlreadyExists):
            service.create_product(CreateProductDTO(name="Mouse", price=Decimal("1")))

    def test_unknown_category_raises(self, service, mock_repo, mock_category_repo):
        mock_repo.get_by_name.return_value = None
        mock_category_repo.get_by_id.return_value = None

        with pytest.raises(CategoryNotFound):
            service.create_product(
                CreateProductDTO(name="Mouse", price=Decimal("1"), category_id=uuid4())
            )
        mock_repo.save.assert_not_called()

    def test_unique_violation_becomes_conflict(self, service, mock_repo):
        mock_repo.get_by_name.return_value = None
        mock_repo.save.side_effect = IntegrityError("UNIQUE constraint failed")

        with pytest.raises(ProductAlreadyExists):
            service.create_product(CreateProductDTO(name="Mouse", price=Decimal("1")))

    def test_negative_price_rejected_by_dto(self):
        with pytest.raises(ValueError):
            CreateProductDTO(name="Mouse", price=Decimal("-0.01"))


class TestUpdateProduct:
    def test_not_found(self, service):
        with pytest.raises(ProductNotFound):
            service.update_product("missing", UpdateProductDTO(price=Decimal("2")))

    def test_clearing_category(self, service, mock_repo):
        product = Product(name="Mouse", price=Decimal("1"), category=Category(name="X"))
        mock_repo.get_for_update.return_value = product

        service.update_product("id", UpdateProductDTO(category_id=None))

        assert product.category_id is None
        mock_repo.save.assert_called_once_with(product, update_fields=["category"])

    def test_omitted_category_is_kept(self, service, mock_repo):
        category = Category(name="X")
        product = Product(name="Mouse", price=Decimal("1"), category=category)
        mock_repo.get_for_update.return_value = product

        service.update_product("id", UpdateProductDTO(price=Decimal("9.90")))

        assert product.category_id == category.id
        assert product.price == Decimal("9.90")
        mock_repo.save.assert_called_once_with(product, update_fields=["price"])

    def test_nothing_supplied_writes_nothing(self, service, mock_repo):
        mock_repo.get_for_update.return_value = Product(name="Mouse", price=1)

        service.update_product("id", UpdateProductDTO())

        mock_repo.save.assert_not_called()


class TestDeleteProduct:
    def test_blocked_when_ordered(self, service, mock_repo, mock_order_repo):
        mock_repo.get_by_id.return_value = Product(name="Mouse", price=1)
        mock_order_repo.count_items.return_value = 1

        with pytest.raises(ProductInUse):
            service.delete_product("id")
        mock_repo.delete.assert_not_called()

    def test_success(self, service, mock_repo, mock_order_repo):
        mock_repo.get_by_id.return_value = Product(name="Mouse", price=1)
        mock_order_repo.count_items.return_value = 0

        service.delete_product("id")

        mock_repo.delete.assert_called_once_with("id")
