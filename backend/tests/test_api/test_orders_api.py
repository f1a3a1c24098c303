"""
API tests for checkout, order history, cancellation and boleta download

Services are patched where the router looks them up; authentication uses
real tokens signed with the test secret.

Author: Wanka's
Date: 2025-06-06
"""
import asyncio
from datetime import datetime, timezone
from decimal import Decimal
from unittest.mock import MagicMock, patch
from zoneinfo import ZoneInfo

import pytest

from wankas.core.errors import (
    InsufficientStockError,
    NotFoundError,
    OrderNotCancellableError,
    OrderNotFoundError,
)
from wankas.domain.order import Order


CHECKOUT_BODY = {
    "location_id": "loc-1",
    "time_slot_id": "ts10",
    "pickup_date": "2025-06-05",
    "items": [{"product_id": "p1", "quantity": 2}],
    "notes": "Sin bolsa, por favor",
}


LIMA = ZoneInfo("America/Lima")

# Wednesday evening: the schedule offers Thursday 2025-06-05
WEDNESDAY_EVENING = datetime(2025, 6, 4, 21, 0, tzinfo=LIMA)


@pytest.fixture(autouse=True)
def store_clock():
    with patch('wankas.services.pickup_service.store_now', return_value=WEDNESDAY_EVENING) as clock:
        yield clock


@pytest.fixture
def order_service():
    service = MagicMock()
    with patch('wankas.api.orders.get_order_service', return_value=service):
        yield service


class TestAuthRequired:
    @pytest.mark.parametrize("method,path", [
        ("get", "/api/v1/orders/"),
        ("get", "/api/v1/orders/order-1"),
        ("post", "/api/v1/orders/order-1/cancel"),
        ("get", "/api/v1/orders/order-1/boleta"),
    ])
    def test_requires_token(self, client, method, path):
        response = getattr(client, method)(path)
        assert response.status_code == 401

    def test_invalid_token(self, client):
        response = client.get("/api/v1/orders/", headers={"Authorization": "Bearer not-a-jwt"})
        assert response.status_code == 401


class TestPlaceOrder:
    def test_success(self, client, auth_headers, order_service):
        order_service.place_order.return_value = Order(
            id="8c1f2a34-5b6d-4e7f-8a9b-0c1d2e3f4a5b",
            user_id="user-1",
            location_id="loc-1",
            pickup_date=datetime(2025, 6, 5, 15, 0, tzinfo=timezone.utc),
            total_price=Decimal("49.80"),
        )

        response = client.post("/api/v1/orders/", json=CHECKOUT_BODY, headers=auth_headers)

        assert response.status_code == 201
        body = response.json()
        assert body["status"] == "success"
        assert body["message"] == "¡Pedido realizado! Te esperamos en la tienda."
        assert body["data"]["order_number"] == "WK-WEB-0C1D2E3F4A5B"
        assert body["data"]["total_price"] == 49.8

        kwargs = order_service.place_order.call_args.kwargs
        assert kwargs["user_id"] == "user-1"
        assert kwargs["notes"] == "Sin bolsa, por favor"
        # ts10 on the chosen day, in store time
        assert kwargs["pickup_date"].isoformat() == "2025-06-05T10:00:00-05:00"
        assert [(line.product_id, line.quantity) for line in kwargs["lines"]] == [("p1", 2)]

    def test_unknown_slot(self, client, auth_headers, order_service):
        response = client.post("/api/v1/orders/", json=dict(CHECKOUT_BODY, time_slot_id="ts25"), headers=auth_headers)

        assert response.status_code == 400
        assert response.json()["detail"] == "El horario seleccionado no es válido."
        order_service.place_order.assert_not_called()

    def test_pickup_in_the_past(self, client, auth_headers, order_service, store_clock):
        store_clock.return_value = datetime(2025, 6, 5, 12, 30, tzinfo=LIMA)

        response = client.post("/api/v1/orders/", json=CHECKOUT_BODY, headers=auth_headers)

        assert response.status_code == 400
        assert "ya pasó" in response.json()["detail"]
        order_service.place_order.assert_not_called()

    @pytest.mark.parametrize("pickup_date", ["2025-06-07", "2025-06-08", "2099-06-05", "2020-01-06"])
    def test_date_not_offered(self, client, auth_headers, order_service, pickup_date):
        response = client.post("/api/v1/orders/", json=dict(CHECKOUT_BODY, pickup_date=pickup_date), headers=auth_headers)

        assert response.status_code == 400
        assert response.json()["detail"].startswith("La fecha de recojo elegida no está disponible")
        order_service.place_order.assert_not_called()

    def test_weekend_date_after_saturday_closing(self, client, auth_headers, order_service, store_clock):
        store_clock.return_value = datetime(2025, 6, 7, 20, 30, tzinfo=LIMA)

        sunday = client.post("/api/v1/orders/", json=dict(CHECKOUT_BODY, pickup_date="2025-06-08"), headers=auth_headers)

        assert sunday.status_code == 400
        order_service.place_order.assert_not_called()

    def test_runs_off_the_event_loop(self, client, auth_headers, order_service):
        seen = {}

        def place_order(**kwargs):
            try:
                asyncio.get_running_loop()
                seen["on_loop"] = True
            except RuntimeError:
                seen["on_loop"] = False
            return Order(
                id="order-1", user_id="user-1", location_id="loc-1",
                pickup_date=kwargs["pickup_date"], total_price=Decimal("49.80"),
            )

        order_service.place_order.side_effect = place_order

        response = client.post("/api/v1/orders/", json=CHECKOUT_BODY, headers=auth_headers)

        assert response.status_code == 201
        assert seen == {"on_loop": False}

    def test_insufficient_stock(self, client, auth_headers, order_service):
        order_service.place_order.side_effect = InsufficientStockError("insufficient_stock", name="Arroz Extra", stock=1)

        response = client.post("/api/v1/orders/", json=CHECKOUT_BODY, headers=auth_headers)

        assert response.status_code == 409
        assert response.json()["detail"] == "No hay suficiente stock para 'Arroz Extra'. Solo quedan 1."

    def test_english_messages(self, client, auth_headers, order_service):
        order_service.place_order.side_effect = InsufficientStockError("insufficient_stock", name="Arroz Extra", stock=1)

        response = client.post("/api/v1/orders/?locale=en", json=CHECKOUT_BODY, headers=auth_headers)

        assert response.status_code == 409
        assert "Arroz Extra" in response.json()["detail"]
        assert "No hay" not in response.json()["detail"]

    def test_zero_quantity_is_rejected(self, client, auth_headers, order_service):
        body = dict(CHECKOUT_BODY, items=[{"product_id": "p1", "quantity": 0}])

        response = client.post("/api/v1/orders/", json=body, headers=auth_headers)

        assert response.status_code == 422


class TestOrderHistory:
    def test_list_orders(self, client, auth_headers, order_service, enriched_order):
        order_service.get_user_orders.return_value = [enriched_order]

        response = client.get("/api/v1/orders/", headers=auth_headers)

        assert response.status_code == 200
        body = response.json()
        assert body["count"] == 1
        assert body["data"][0]["status_label"] == "Pendiente"
        assert body["data"][0]["item_count"] == 6
        order_service.get_user_orders.assert_called_once_with("user-1")

    def test_order_of_someone_else(self, client, auth_headers, order_service):
        order_service.get_user_order.side_effect = OrderNotFoundError("order_not_found")

        response = client.get("/api/v1/orders/order-9", headers=auth_headers)

        assert response.status_code == 404


class TestCancelOrder:
    def test_cancel(self, client, auth_headers, order_service):
        order_service.cancel_order.return_value = True

        response = client.post("/api/v1/orders/order-1/cancel", headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["message"] == "Tu pedido fue cancelado y el stock fue restaurado."
        order_service.cancel_order.assert_called_once_with("order-1", "user-1")

    def test_cancel_not_pending(self, client, auth_headers, order_service):
        order_service.cancel_order.side_effect = OrderNotCancellableError("order_not_cancellable")

        response = client.post("/api/v1/orders/order-1/cancel", headers=auth_headers)

        assert response.status_code == 409


class TestBoleta:
    def test_download_uses_token_data_without_profile(self, client, auth_headers, order_service, enriched_order):
        order_service.get_user_order.return_value = enriched_order
        auth_service = MagicMock()
        auth_service.get_profile.side_effect = NotFoundError("profile_not_found")

        with patch('wankas.api.orders.get_auth_service', return_value=auth_service):
            response = client.get(f"/api/v1/orders/{enriched_order.id}/boleta", headers=auth_headers)

        assert response.status_code == 200
        assert response.headers["content-type"] == "application/pdf"
        assert response.headers["content-disposition"] == 'attachment; filename="boleta-orden-0C1D2E3F4A5B.pdf"'
        assert response.content.startswith(b"%PDF")

    def test_unknown_order(self, client, auth_headers, order_service):
        order_service.get_user_order.side_effect = OrderNotFoundError("order_not_found")

        response = client.get("/api/v1/orders/order-9/boleta", headers=auth_headers)

        assert response.status_code == 404
