"""
Order Service
Places pickup orders, lists a user's orders and cancels pending ones

Placing an order touches three tables through the Supabase API, which
offers no transaction across calls. The steps run in sequence and each
failure undoes what the previous steps wrote:

    0. check the pickup store       -> nothing to undo
    1. read stock/name/price        -> nothing to undo
    2. check stock                  -> nothing to undo
    3. decrement stock per product  -> restore the products already decremented
    4. insert order                 -> restore all stock
    5. insert order items           -> restore all stock, delete the order

Undo steps are best effort: a failing undo is logged and the rest still run.

Author: Wanka's
Date: 2025-06-03
"""
import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import Dict, List, Optional

from wankas.core.errors import (
    OrderError,
    InsufficientStockError,
    OrderNotFoundError,
    OrderNotCancellableError,
    ValidationError,
)
from wankas.domain.cart import CartLine, merge_lines
from wankas.domain.order import (
    Order,
    EnrichedOrder,
    ORDER_STATUS_PENDING,
    ORDER_STATUS_CANCELLED,
)
from wankas.repositories.location_repository import LocationRepository
from wankas.repositories.order_repository import OrderRepository

logger = logging.getLogger(__name__)


class OrderService:
    """
    Service for the pickup order lifecycle

    Handles:
    - Checkout with stock decrement and compensation
    - Order history enriched with items and store
    - Cancellation with stock restoration
    """

    def __init__(
        self,
        repository: Optional[OrderRepository] = None,
        location_repository: Optional[LocationRepository] = None
    ):
        self.repository = repository or OrderRepository()
        self.location_repository = location_repository or LocationRepository()

    # ========================================================================
    # Checkout
    # ========================================================================

    def place_order(
        self,
        user_id: str,
        location_id: str,
        pickup_date: datetime,
        lines: List[CartLine],
        notes: Optional[str] = None
    ) -> Order:
        """
        Create a pending order and decrement stock

        Args:
            user_id: Profile placing the order
            location_id: Pickup store
            pickup_date: Start of the chosen pickup slot (timezone-aware)
            lines: Cart lines (repeated products are merged)
            notes: Optional notes for the store

        Returns:
            The stored Order

        Raises:
            ValidationError: empty cart or unknown pickup store
            InsufficientStockError: a product is missing or has less stock than requested
            OrderError: a Supabase step failed (after compensation)
        """
        lines = merge_lines(lines)
        if not lines:
            raise ValidationError("empty_cart")

        # Step 0: the pickup store must exist
        try:
            location = self.location_repository.find_by_id(location_id)
        except Exception as e:
            logger.error(f"Error looking up location {location_id}: {e}")
            raise OrderError("location_check_failed") from e
        if location is None:
            raise ValidationError("location_not_found")

        product_ids = [line.product_id for line in lines]

        # Step 1: read current stock
        try:
            stock_map = self.repository.fetch_stock(product_ids)
        except Exception as e:
            logger.error(f"Error fetching stock for {product_ids}: {e}")
            raise OrderError("stock_check_failed") from e

        # Step 2: every product must exist with enough stock
        for line in lines:
            info = stock_map.get(line.product_id)
            available = (info.get('stock') or 0) if info else 0
            if info is None or available < line.quantity:
                name = (info.get('name_es') if info else None) or line.product_id
                raise InsufficientStockError("insufficient_stock", name=name, stock=available)

        total = sum(
            (self._unit_price(stock_map[line.product_id]) * line.quantity for line in lines),
            Decimal("0")
        )

        # Step 3: decrement stock, one product at a time
        decremented: List[str] = []
        for line in lines:
            new_stock = (stock_map[line.product_id].get('stock') or 0) - line.quantity
            try:
                self.repository.update_stock(line.product_id, new_stock)
            except Exception as e:
                logger.error(f"Failed to update stock for product {line.product_id}, order not placed: {e}")
                self._restore_stock(decremented, stock_map)
                raise OrderError("stock_update_failed") from e
            decremented.append(line.product_id)

        # Step 4: insert the order
        order_data = {
            "user_id": user_id,
            "location_id": location_id,
            "pickup_date": pickup_date.isoformat(),
            "total_price": float(total),
            "status": ORDER_STATUS_PENDING,
        }
        if notes:
            order_data["notes"] = notes

        try:
            order = self.repository.insert_order(order_data)
        except Exception as e:
            logger.error(f"Order creation failed after stock update: {e}")
            self._restore_stock(decremented, stock_map)
            raise OrderError("order_create_failed") from e

        # Step 5: insert the items with the price charged
        item_rows = [
            {
                "order_id": order.id,
                "product_id": line.product_id,
                "quantity": line.quantity,
                "price_at_purchase": float(self._unit_price(stock_map[line.product_id])),
            }
            for line in lines
        ]
        try:
            self.repository.insert_items(item_rows)
        except Exception as e:
            logger.error(f"Order items creation failed for order {order.id}: {e}")
            self._restore_stock(decremented, stock_map)
            self._delete_order(order.id)
            raise OrderError("order_items_failed") from e

        logger.info(f"Order {order.id} placed by {user_id}: {len(lines)} products, total {total}")
        return order

    @staticmethod
    def _unit_price(info: dict) -> Decimal:
        return Decimal(str(info.get('price') or 0))

    def _restore_stock(self, product_ids: List[str], stock_map: Dict[str, dict]) -> None:
        """Write back the stock values read in step 1"""
        if product_ids:
            logger.warning(f"Reverting stock for products {product_ids}")
        for product_id in product_ids:
            original = stock_map[product_id].get('stock') or 0
            try:
                self.repository.update_stock(product_id, original)
            except Exception as e:
                logger.error(f"Could not restore stock for product {product_id} to {original}: {e}")

    def _delete_order(self, order_id: str) -> None:
        logger.warning(f"Deleting order {order_id}")
        try:
            self.repository.delete_order(order_id)
        except Exception as e:
            logger.error(f"Could not delete order {order_id}: {e}")

    # ========================================================================
    # History
    # ========================================================================

    def _items_for(self, order_id: str) -> List[dict]:
        try:
            return self.repository.find_items(order_id)
        except Exception as e:
            logger.error(f"Error fetching items for order {order_id}: {e}")
            return []

    def get_user_orders(self, user_id: str) -> List[EnrichedOrder]:
        """
        Orders of a user, newest first, with items and store details

        An order whose items cannot be read is returned with no items.
        """
        try:
            rows = self.repository.find_by_user(user_id)
        except Exception as e:
            logger.error(f"Error fetching orders for {user_id}: {e}")
            raise OrderError("orders_fetch_failed") from e

        return [
            self.repository.map_enriched_order(row, self._items_for(str(row['id'])))
            for row in rows
        ]

    def get_user_order(self, order_id: str, user_id: str) -> EnrichedOrder:
        """One order of a user; OrderNotFoundError when absent or owned by someone else"""
        try:
            row = self.repository.find_user_order(order_id, user_id)
        except Exception as e:
            logger.error(f"Error fetching order {order_id}: {e}")
            raise OrderError("orders_fetch_failed") from e

        if row is None:
            raise OrderNotFoundError("order_not_found")
        return self.repository.map_enriched_order(row, self._items_for(order_id))

    # ========================================================================
    # Cancellation
    # ========================================================================

    def cancel_order(self, order_id: str, user_id: str) -> bool:
        """
        Cancel a pending order and give its units back to stock

        Stock is restored against the product's current value. A product
        that cannot be read or updated is logged and skipped.

        Raises:
            OrderError: the order could not be read, or the status update failed
            OrderNotFoundError: no such order for this user
            OrderNotCancellableError: the order is not pending
        """
        try:
            row = self.repository.find_user_order_with_items(order_id, user_id)
        except Exception as e:
            logger.error(f"Error fetching order {order_id} to cancel: {e}")
            raise OrderError("order_cancel_lookup_failed") from e

        if row is None:
            raise OrderNotFoundError("order_not_found")
        if row.get('status') != ORDER_STATUS_PENDING:
            raise OrderNotCancellableError("order_not_cancellable")

        for item in row.get('order_items') or []:
            product_id = str(item['product_id'])
            try:
                current = self.repository.get_product_stock(product_id)
            except Exception as e:
                logger.error(f"Could not read product {product_id} to restore stock: {e}")
                continue
            if current is None:
                logger.error(f"Product {product_id} not found, stock not restored")
                continue

            try:
                self.repository.update_stock(product_id, current + item['quantity'])
            except Exception as e:
                logger.error(f"Failed to restore stock for product {product_id}: {e}")

        try:
            self.repository.update_status(order_id, ORDER_STATUS_CANCELLED, datetime.now(timezone.utc))
        except Exception as e:
            logger.error(f"Stock restored but status update failed for order {order_id}: {e}")
            raise OrderError("order_cancel_status_failed") from e

        logger.info(f"Order {order_id} cancelled by {user_id}")
        return True


# ============================================================================
# SINGLETON INSTANCE
# ============================================================================

_service_instance: Optional[OrderService] = None


def get_order_service() -> OrderService:
    """Get the singleton order service instance."""
    global _service_instance
    if _service_instance is None:
        _service_instance = OrderService()
    return _service_instance
