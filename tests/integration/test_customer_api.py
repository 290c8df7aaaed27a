"""Integration tests for Customer API endpoints.

Covers CRUD, the password hash never leaving the API, the delete guard
and the public login action.
"""

from __future__ import annotations

import uuid

import pytest

from modules.customers.models import Customer

pytestmark = pytest.mark.integration

OTHER_VALID_CPF = "39053344705"


def _payload(**overrides):
    data = {
        "name": "Maria Souza",
        "email": "maria@example.com",
        "cpf": "390.533.447-05",
        "phone": "11987654321",
        "birth_date": "1990-05-20",
        "password": "senha123",
    }
    data.update(overrides)
    return data


class TestCustomerCreate:
    def test_create(self, auth_client):
        response = auth_client.post("/api/v1/customers/", _payload(), format="json")
        assert response.status_code == 201
        assert response.data["cpf"] == OTHER_VALID_CPF
        assert "password" not in response.data
        stored = Customer.objects.get(cpf=OTHER_VALID_CPF)
        assert stored.password != "senha123"

    def test_duplicate_cpf(self, auth_client, customer):
        response = auth_client.post(
            "/api/v1/customers/", _payload(cpf=customer.cpf), format="json"
        )
        assert response.status_code == 409

    def test_duplicate_email(self, auth_client, customer):
        response = auth_client.post(
            "/api/v1/customers/", _payload(email=customer.email), format="json"
        )
        assert response.status_code == 409

    def test_weak_password(self, auth_client):
        response = auth_client.post(
            "/api/v1/customers/", _payload(password="abcdef"), format="json"
        )
        assert response.status_code == 400
        assert response.json()["errors"][0]["attr"] == "password"


class TestCustomerReadUpdateDelete:
    def test_list_hides_password(self, auth_client, customer):
        response = auth_client.get("/api/v1/customers/")
        assert response.status_code == 200
        assert response.data["count"] == 1
        assert "password" not in response.data["results"][0]

    def test_retrieve_lists_orders(self, auth_client, customer, make_product):
        product = make_product()
        auth_client.post(
            "/api/v1/orders/",
            {
                "customer_id": str(customer.id),
                "items": [{"product_id": str(product.id), "quantity": 2}],
            },
            format="json",
        )
        response = auth_client.get(f"/api/v1/customers/{customer.id}/")
        assert response.status_code == 200
        assert len(response.data["orders"]) == 1
        assert response.data["orders"][0]["status"] == "PENDING"

    def test_retrieve_unknown(self, auth_client):
        response = auth_client.get(f"/api/v1/customers/{uuid.uuid4()}/")
        assert response.status_code == 404

    def test_partial_update(self, auth_client, customer):
        response = auth_client.patch(
            f"/api/v1/customers/{customer.id}/", {"name": "João S."}, format="json"
        )
        assert response.status_code == 200
        assert response.data["name"] == "João S."

    def test_delete_with_orders_rejected(self, auth_client, customer, make_product):
        product = make_product()
        auth_client.post(
            "/api/v1/orders/",
            {
                "customer_id": str(customer.id),
                "items": [{"product_id": str(product.id), "quantity": 1}],
            },
            format="json",
        )
        response = auth_client.delete(f"/api/v1/customers/{customer.id}/")
        assert response.status_code == 400
        assert Customer.objects.filter(id=customer.id).exists()

    def test_delete(self, auth_client, customer):
        response = auth_client.delete(f"/api/v1/customers/{customer.id}/")
        assert response.status_code == 204
        assert not Customer.objects.filter(id=customer.id).exists()


class TestCustomerLogin:
    def test_login_is_public(self, api_client, customer):
        response = api_client.post(
            "/api/v1/customers/login/",
            {"email": "joao@example.com", "password": "senha123"},
            format="json",
        )
        assert response.status_code == 200
        assert response.data["id"] == str(customer.id)
        assert "password" not in response.data

    def test_wrong_password(self, api_client, customer):
        response = api_client.post(
            "/api/v1/customers/login/",
            {"email": "joao@example.com", "password": "errada1"},
            format="json",
        )
        assert response.status_code == 401
        assert response.json()["errors"][0]["code"] == "unauthenticated"

    def test_unknown_email(self, api_client):
        response = api_client.post(
            "/api/v1/customers/login/",
            {"email": "ninguem@example.com", "password": "senha123"},
            format="json",
        )
        assert response.status_code == 401
