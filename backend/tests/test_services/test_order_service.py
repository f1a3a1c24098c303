"""
Unit tests for OrderService

The repository is a MagicMock; these tests check the order of Supabase
calls and the compensation performed when a step fails.

Author: Wanka's
Date: 2025-06-06
"""
from datetime import datetime, timezone
from decimal import Decimal
from unittest.mock import MagicMock, call, patch

import pytest

from wankas.core.errors import (
    OrderError,
    InsufficientStockError,
    OrderNotFoundError,
    OrderNotCancellableError,
    ValidationError,
)
from wankas.domain.cart import CartLine
from wankas.domain.location import StoreLocation
from wankas.domain.order import Order
from wankas.repositories.order_repository import OrderRepository
from wankas.services.order_service import OrderService


PICKUP = datetime(2025, 6, 5, 15, 0, tzinfo=timezone.utc)


@pytest.fixture
def repo():
    repo = MagicMock()
    repo.fetch_stock.return_value = {
        "p1": {"id": "p1", "stock": 10, "name_es": "Arroz Extra", "price": 24.9},
        "p2": {"id": "p2", "stock": 5, "name_es": "Aceite Vegetal", "price": 10.5},
    }
    repo.insert_order.return_value = Order(
        id="order-1",
        user_id="user-1",
        location_id="loc-1",
        pickup_date=PICKUP,
        total_price=Decimal("70.80"),
    )
    repo.map_enriched_order.side_effect = OrderRepository.map_enriched_order
    return repo


@pytest.fixture(autouse=True)
def locations():
    """The pickup store lookup finds loc-1 unless a test says otherwise"""
    locations = MagicMock()
    locations.find_by_id.return_value = StoreLocation(id="loc-1", name="Wanka's Huancayo Centro")
    with patch('wankas.services.order_service.LocationRepository', return_value=locations):
        yield locations


@pytest.fixture
def lines():
    return [CartLine(product_id="p1", quantity=2), CartLine(product_id="p2", quantity=2)]


def place(service, lines):
    return service.place_order("user-1", "loc-1", PICKUP, lines)


class TestPlaceOrder:
    """Test the checkout sequence"""

    def test_success_decrements_stock_and_inserts_rows(self, repo, lines):
        # Act
        order = place(OrderService(repo), lines)

        # Assert: stock decremented against the values read
        assert order.id == "order-1"
        assert repo.update_stock.call_args_list == [call("p1", 8), call("p2", 3)]

        order_data = repo.insert_order.call_args[0][0]
        assert order_data["user_id"] == "user-1"
        assert order_data["location_id"] == "loc-1"
        assert order_data["status"] == "pending"
        assert order_data["total_price"] == 70.8
        assert order_data["pickup_date"] == PICKUP.isoformat()

        item_rows = repo.insert_items.call_args[0][0]
        assert item_rows == [
            {"order_id": "order-1", "product_id": "p1", "quantity": 2, "price_at_purchase": 24.9},
            {"order_id": "order-1", "product_id": "p2", "quantity": 2, "price_at_purchase": 10.5},
        ]
        repo.delete_order.assert_not_called()

    def test_repeated_lines_are_merged(self, repo):
        place(OrderService(repo), [CartLine(product_id="p1", quantity=1), CartLine(product_id="p1", quantity=3)])

        assert repo.update_stock.call_args_list == [call("p1", 6)]
        assert repo.insert_items.call_args[0][0][0]["quantity"] == 4

    def test_empty_cart(self, repo):
        with pytest.raises(ValidationError) as exc_info:
            place(OrderService(repo), [])

        assert exc_info.value.key == "empty_cart"
        repo.fetch_stock.assert_not_called()

    def test_unknown_location_touches_no_stock(self, repo, lines, locations):
        locations.find_by_id.return_value = None

        with pytest.raises(ValidationError) as exc_info:
            place(OrderService(repo), lines)

        assert exc_info.value.key == "location_not_found"
        locations.find_by_id.assert_called_once_with("loc-1")
        repo.fetch_stock.assert_not_called()
        repo.update_stock.assert_not_called()

    def test_location_lookup_failure(self, repo, lines, locations):
        locations.find_by_id.side_effect = Exception("invalid input syntax for type uuid")

        with pytest.raises(OrderError) as exc_info:
            place(OrderService(repo), lines)

        assert exc_info.value.key == "location_check_failed"
        repo.update_stock.assert_not_called()

    def test_stock_read_failure(self, repo, lines):
        repo.fetch_stock.side_effect = Exception("connection reset")

        with pytest.raises(OrderError) as exc_info:
            place(OrderService(repo), lines)

        assert exc_info.value.key == "stock_check_failed"
        repo.update_stock.assert_not_called()

    def test_insufficient_stock_names_product(self, repo):
        with pytest.raises(InsufficientStockError) as exc_info:
            place(OrderService(repo), [CartLine(product_id="p2", quantity=6)])

        assert exc_info.value.params == {"name": "Aceite Vegetal", "stock": 5}
        assert str(exc_info.value) == "No hay suficiente stock para 'Aceite Vegetal'. Solo quedan 5."
        repo.update_stock.assert_not_called()
        repo.insert_order.assert_not_called()

    def test_unknown_product_has_zero_stock(self, repo):
        with pytest.raises(InsufficientStockError) as exc_info:
            place(OrderService(repo), [CartLine(product_id="ghost", quantity=1)])

        assert exc_info.value.params["stock"] == 0

    def test_stock_update_failure_restores_only_updated_products(self, repo, lines):
        # First update works, second fails, then the restore of p1 works
        repo.update_stock.side_effect = [None, Exception("timeout"), None]

        with pytest.raises(OrderError) as exc_info:
            place(OrderService(repo), lines)

        assert exc_info.value.key == "stock_update_failed"
        assert repo.update_stock.call_args_list == [call("p1", 8), call("p2", 3), call("p1", 10)]
        repo.insert_order.assert_not_called()

    def test_order_insert_failure_restores_all_stock(self, repo, lines):
        repo.insert_order.side_effect = Exception("insert failed")

        with pytest.raises(OrderError) as exc_info:
            place(OrderService(repo), lines)

        assert exc_info.value.key == "order_create_failed"
        assert repo.update_stock.call_args_list[2:] == [call("p1", 10), call("p2", 5)]
        repo.insert_items.assert_not_called()
        repo.delete_order.assert_not_called()

    def test_items_insert_failure_restores_stock_and_deletes_order(self, repo, lines):
        repo.insert_items.side_effect = Exception("fk violation")

        with pytest.raises(OrderError) as exc_info:
            place(OrderService(repo), lines)

        assert exc_info.value.key == "order_items_failed"
        assert repo.update_stock.call_args_list[2:] == [call("p1", 10), call("p2", 5)]
        repo.delete_order.assert_called_once_with("order-1")

    def test_failing_compensation_does_not_stop_the_rest(self, repo, lines):
        # Restore of p1 fails; p2 is still restored and the order still deleted
        repo.update_stock.side_effect = [None, None, Exception("restore failed"), None]
        repo.insert_items.side_effect = Exception("fk violation")
        repo.delete_order.side_effect = Exception("delete failed")

        with pytest.raises(OrderError) as exc_info:
            place(OrderService(repo), lines)

        assert exc_info.value.key == "order_items_failed"
        assert repo.update_stock.call_args_list[3] == call("p2", 5)
        repo.delete_order.assert_called_once_with("order-1")


def order_row(order_id="order-1", status="pending", **extra):
    row = {
        "id": order_id,
        "user_id": "user-1",
        "location_id": "loc-1",
        "order_date": "2025-06-04T15:30:00+00:00",
        "pickup_date": "2025-06-05T15:00:00+00:00",
        "status": status,
        "total_price": 20.4,
        "notes": None,
        "created_at": "2025-06-04T15:30:00+00:00",
        "updated_at": None,
    }
    row.update(extra)
    return row


class TestUserOrders:
    def test_orders_are_enriched(self, repo):
        repo.find_by_user.return_value = [
            order_row("order-2", locations={"name_es": "Wanka's El Tambo", "address": "Av. Huancavelica 500"}),
            order_row("order-1", locations=None),
        ]
        repo.find_items.side_effect = [
            [{
                "order_id": "order-2", "product_id": "p1", "quantity": 2, "price_at_purchase": 24.9,
                "products": {"name_es": "Arroz Extra", "thumbnail_url": None, "image_urls": ["https://cdn/arroz.png"]},
            }],
            Exception("items unavailable"),
        ]

        orders = OrderService(repo).get_user_orders("user-1")

        assert [o.id for o in orders] == ["order-2", "order-1"]
        assert orders[0].location_name == "Wanka's El Tambo"
        assert orders[0].items[0].product_name == "Arroz Extra"
        assert orders[0].items[0].product_image_url == "https://cdn/arroz.png"
        # Location defaults and empty items when the item query fails
        assert orders[1].location_name == "Ubicación desconocida"
        assert orders[1].location_address == "Dirección no disponible"
        assert orders[1].items == []

    def test_orders_query_failure(self, repo):
        repo.find_by_user.side_effect = Exception("down")

        with pytest.raises(OrderError) as exc_info:
            OrderService(repo).get_user_orders("user-1")

        assert exc_info.value.key == "orders_fetch_failed"

    def test_get_user_order_not_found(self, repo):
        repo.find_user_order.return_value = None

        with pytest.raises(OrderNotFoundError):
            OrderService(repo).get_user_order("order-x", "user-1")


class TestCancelOrder:
    """Test cancellation and stock restoration"""

    def test_cancel_restores_stock_and_updates_status(self, repo):
        repo.find_user_order_with_items.return_value = order_row(order_items=[
            {"product_id": "p1", "quantity": 2},
            {"product_id": "p2", "quantity": 1},
        ])
        repo.get_product_stock.side_effect = [7, 4]

        assert OrderService(repo).cancel_order("order-1", "user-1") is True

        assert repo.update_stock.call_args_list == [call("p1", 9), call("p2", 5)]
        order_id, status, updated_at = repo.update_status.call_args[0]
        assert (order_id, status) == ("order-1", "cancelled")
        assert updated_at.tzinfo is not None

    def test_cancel_skips_products_that_cannot_be_read(self, repo):
        repo.find_user_order_with_items.return_value = order_row(order_items=[
            {"product_id": "gone", "quantity": 2},
            {"product_id": "p1", "quantity": 1},
            {"product_id": "p2", "quantity": 3},
        ])
        repo.get_product_stock.side_effect = [None, Exception("read failed"), 4]

        OrderService(repo).cancel_order("order-1", "user-1")

        assert repo.update_stock.call_args_list == [call("p2", 7)]
        repo.update_status.assert_called_once()

    def test_cancel_only_pending(self, repo):
        repo.find_user_order_with_items.return_value = order_row(status="cancelled", order_items=[])

        with pytest.raises(OrderNotCancellableError):
            OrderService(repo).cancel_order("order-1", "user-1")

        repo.update_status.assert_not_called()

    def test_cancel_unknown_order(self, repo):
        repo.find_user_order_with_items.return_value = None

        with pytest.raises(OrderNotFoundError):
            OrderService(repo).cancel_order("order-1", "user-1")

    def test_cancel_lookup_failure(self, repo):
        repo.find_user_order_with_items.side_effect = Exception("down")

        with pytest.raises(OrderError) as exc_info:
            OrderService(repo).cancel_order("order-1", "user-1")

        assert exc_info.value.key == "order_cancel_lookup_failed"

    def test_status_update_failure_after_restore(self, repo):
        repo.find_user_order_with_items.return_value = order_row(order_items=[{"product_id": "p1", "quantity": 2}])
        repo.get_product_stock.return_value = 3
        repo.update_status.side_effect = Exception("update failed")

        with pytest.raises(OrderError) as exc_info:
            OrderService(repo).cancel_order("order-1", "user-1")

        assert exc_info.value.key == "order_cancel_status_failed"
        repo.update_stock.assert_called_once_with("p1", 5)
