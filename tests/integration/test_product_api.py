"""Integration tests for Product API endpoints."""

from __future__ import annotations

from decimal import Decimal

import pytest

from modules.products.models import Product

pytestmark = pytest.mark.integration


class TestProductAPI:
    def test_create_with_category(self, auth_client, category):
        response = auth_client.post(
            "/api/v1/products/",
            {
                "name": "Mouse sem fio",
                "price": "79.90",
                "stock": 5,
                "category_id": str(category.id),
            },
            format="json",
        )
        assert response.status_code == 201
        assert response.data["category"]["name"] == category.name
        assert Decimal(response.data["price"]) == Decimal("79.90")

    def test_create_unknown_category(self, auth_client):
        response = auth_client.post(
            "/api/v1/products/",
            {
                "name": "Mouse",
                "price": "1.00",
                "category_id": "018f0000-0000-7000-8000-000000000000",
            },
            format="json",
        )
        assert response.status_code == 404

    def test_create_negative_price(self, auth_client):
        response = auth_client.post(
            "/api/v1/products/", {"name": "Mouse", "price": "-1.00"}, format="json"
        )
        assert response.status_code == 400

    def test_duplicate_name(self, auth_client, make_product):
        make_product(name="Mouse")
        response = auth_client.post(
            "/api/v1/products/", {"name": "Mouse", "price": "1.00"}, format="json"
        )
        assert response.status_code == 409

    def test_filter_by_category(self, auth_client, category, make_product):
        make_product(name="Mouse", category=category)
        make_product(name="Monitor")
        response = auth_client.get(f"/api/v1/products/?category_id={category.id}")
        assert [row["name"] for row in response.data["results"]] == ["Mouse"]

    def test_adjust_stock(self, auth_client, make_product):
        product = make_product(stock=3)
        response = auth_client.patch(
            f"/api/v1/products/{product.id}/stock/", {"delta": 4}, format="json"
        )
        assert response.status_code == 200
        assert response.data["stock"] == 7

    def test_adjust_stock_below_zero(self, auth_client, make_product):
        product = make_product(stock=3)
        response = auth_client.patch(
            f"/api/v1/products/{product.id}/stock/", {"delta": -4}, format="json"
        )
        assert response.status_code == 409
        assert response.json()["errors"][0]["code"] == "insufficient_stock"
        product.refresh_from_db()
        assert product.stock == 3

    def test_delete_ordered_product_rejected(
        self, auth_client, customer, make_product
    ):
        product = make_product()
        auth_client.post(
            "/api/v1/orders/",
            {
                "customer_id": str(customer.id),
                "items": [{"product_id": str(product.id), "quantity": 1}],
            },
            format="json",
        )
        response = auth_client.delete(f"/api/v1/products/{product.id}/")
        assert response.status_code == 400
        assert Product.objects.filter(id=product.id).exists()

    def test_delete(self, auth_client, make_product):
        product = make_product()
        response = auth_client.delete(f"/api/v1/products/{product.id}/")
        assert response.status_code == 204
