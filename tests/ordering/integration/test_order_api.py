"""Integration tests for Order API endpoints via TestClient."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from ordering.api.routes import order_router
from ordering.order.order import Order
from protean import current_domain
from shared.api import register_error_handlers


@pytest.fixture()
def client():
    app = FastAPI()
    register_error_handlers(app)
    app.include_router(order_router)
    return TestClient(app)


@pytest.fixture(autouse=True)
def collaborators(gateways):
    gateways.identity.add_user("client-001", full_name="Ana Gómez", address="Carrera 7 #45-10")
    gateways.catalog.add_offer("offer-001", producer_id="producer-001", price=1000.0)
    gateways.catalog.add_offer("offer-002", producer_id="producer-002", price=500.0)
    return gateways


def _place(client, lines=None):
    """Helper: POST /orders and return the order_id."""
    response = client.post(
        "/orders",
        json={
            "client_id": "client-001",
            "lines": lines or [{"product_offer_id": "offer-001", "quantity": 2}],
        },
    )
    assert response.status_code == 201
    return response.json()["order_id"]


class TestPlaceOrderEndpoint:
    def test_place_order(self, client):
        order_id = _place(client)
        order = current_domain.repository_for(Order).get(order_id)
        assert order.total_amount == 2000.0

    def test_unknown_offer_is_400(self, client):
        response = client.post(
            "/orders",
            json={"client_id": "client-001", "lines": [{"product_offer_id": "offer-404", "quantity": 1}]},
        )
        assert response.status_code == 400

    def test_zero_quantity_is_422(self, client):
        response = client.post(
            "/orders",
            json={"client_id": "client-001", "lines": [{"product_offer_id": "offer-001", "quantity": 0}]},
        )
        assert response.status_code == 422

    def test_unknown_client_is_404(self, client):
        response = client.post(
            "/orders",
            json={"client_id": "client-404", "lines": [{"product_offer_id": "offer-001", "quantity": 1}]},
        )
        assert response.status_code == 404

    def test_catalog_outage_is_503(self, client, collaborators):
        collaborators.catalog.configure(is_reachable=False)
        response = client.post(
            "/orders",
            json={"client_id": "client-001", "lines": [{"product_offer_id": "offer-001", "quantity": 1}]},
        )
        assert response.status_code == 503


class TestOrderCommandEndpoints:
    def test_update_details(self, client):
        order_id = _place(client)
        response = client.put(
            f"/orders/{order_id}/details",
            json={"client_id": "client-001", "lines": [{"product_offer_id": "offer-002", "quantity": 1}]},
        )
        assert response.status_code == 200
        assert current_domain.repository_for(Order).get(order_id).total_amount == 500.0

    def test_cancel(self, client):
        order_id = _place(client)
        response = client.put(f"/orders/{order_id}/cancel", json={"client_id": "client-001"})
        assert response.status_code == 200
        assert client.get(f"/orders/{order_id}/status").json()["status"] == "CANCELLED"

    def test_cancel_by_another_client_is_403(self, client):
        order_id = _place(client)
        response = client.put(f"/orders/{order_id}/cancel", json={"client_id": "client-999"})
        assert response.status_code == 403

    def test_payment(self, client):
        order_id = _place(client)
        response = client.put(f"/orders/{order_id}/payment", json={"payment_ref": "pay-001"})
        assert response.status_code == 200
        data = client.get(f"/orders/{order_id}").json()
        assert data["status"] == "PAID"
        assert data["paid"] is True
        assert data["external_payment_ref"] == "pay-001"

    def test_duplicate_payment_is_ok(self, client):
        order_id = _place(client)
        client.put(f"/orders/{order_id}/payment", json={"payment_ref": "pay-001"})
        response = client.put(f"/orders/{order_id}/payment", json={"payment_ref": "pay-001"})
        assert response.status_code == 200

    def test_invalid_status_transition_is_409(self, client):
        order_id = _place(client)
        response = client.put(f"/orders/{order_id}/status", json={"status": "DELIVERED"})
        assert response.status_code == 409

    def test_status_update_to_paid_is_400(self, client):
        order_id = _place(client)
        response = client.put(f"/orders/{order_id}/status", json={"status": "PAID"})
        assert response.status_code == 400
        assert client.get(f"/orders/{order_id}/status").json()["status"] == "PENDING"

    def test_deliver(self, client):
        order_id = _place(client)
        client.put(f"/orders/{order_id}/payment", json={"payment_ref": "pay-001"})
        response = client.put(f"/orders/{order_id}/status", json={"status": "DELIVERED"})
        assert response.status_code == 200
        assert client.get(f"/orders/{order_id}/status").json() == {"order_id": order_id, "status": "DELIVERED"}


class TestOrderQueryEndpoints:
    def test_get_order(self, client):
        order_id = _place(client)
        response = client.get(f"/orders/{order_id}")
        assert response.status_code == 200
        data = response.json()
        assert data["client_id"] == "client-001"
        assert data["address"] == "Carrera 7 #45-10"
        assert data["total_items"] == 2
        assert len(data["details"]) == 1

    def test_get_unknown_order_is_404(self, client):
        assert client.get("/orders/ord-404").status_code == 404

    def test_list_orders_paginated(self, client):
        for _ in range(3):
            _place(client)
        response = client.get("/orders", params={"page": 1, "limit": 2})
        assert response.status_code == 200
        body = response.json()
        assert len(body["data"]) == 2
        assert body["meta"] == {"total": 3, "page": 1, "last_page": 2}

    def test_client_orders(self, client):
        _place(client)
        response = client.get("/orders/clients/client-001")
        assert response.status_code == 200
        assert len(response.json()) == 1

    def test_producer_orders(self, client):
        order_id = _place(
            client,
            lines=[
                {"product_offer_id": "offer-001", "quantity": 1},
                {"product_offer_id": "offer-002", "quantity": 1},
            ],
        )
        client.put(f"/orders/{order_id}/payment", json={"payment_ref": "pay-001"})
        response = client.get("/orders/producers/producer-001")
        assert response.status_code == 200
        orders = response.json()
        assert len(orders) == 1
        assert [d["product_offer_id"] for d in orders[0]["details"]] == ["offer-001"]

    def test_offer_usage(self, client):
        _place(client)
        assert client.get("/orders/offers/offer-001").json() == {"product_offer_id": "offer-001", "has_orders": True}
        assert client.get("/orders/offers/offer-002").json()["has_orders"] is False

    def test_order_details(self, client):
        order_id = _place(client)
        response = client.get(f"/orders/{order_id}/details")
        assert response.status_code == 200
        assert response.json()[0]["subtotal"] == 2000.0
