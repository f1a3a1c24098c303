"""
Order Repository - Data Access Layer for Orders

Wraps every Supabase call the order flows make on `orders`,
`order_items` and the `products.stock` column. Each method performs a
single table call: the Supabase client has no multi-statement
transactions, so sequencing and compensation live in OrderService.

Errors from the client (postgrest APIError, network errors) propagate
to the caller.

Author: Wanka's
Date: 2025-06-03
"""
import logging
from datetime import datetime
from typing import Dict, List, Optional

from wankas.core.database import get_supabase
from wankas.domain.order import (
    Order,
    EnrichedOrder,
    EnrichedOrderItem,
    ORDER_ITEM_PLACEHOLDER_IMAGE,
    UNKNOWN_PRODUCT_NAME,
    UNKNOWN_LOCATION_NAME,
    UNKNOWN_LOCATION_ADDRESS,
)

logger = logging.getLogger(__name__)

ORDER_COLUMNS = "id, user_id, location_id, order_date, pickup_date, status, total_price, notes, created_at, updated_at"


class OrderRepository:
    """
    Repository for Order data access

    All Supabase queries for orders are centralized here.
    """

    # ========================================================================
    # Mapping helpers
    # ========================================================================

    @staticmethod
    def _map_row_to_order(row: dict) -> Order:
        return Order(**{key: row.get(key) for key in Order.model_fields if key in row})

    @staticmethod
    def _map_item_row(row: dict) -> EnrichedOrderItem:
        product = row.get('products') or {}
        image_url = ORDER_ITEM_PLACEHOLDER_IMAGE
        if product.get('thumbnail_url'):
            image_url = product['thumbnail_url']
        elif product.get('image_urls'):
            image_url = product['image_urls'][0] or ORDER_ITEM_PLACEHOLDER_IMAGE

        return EnrichedOrderItem(
            order_id=str(row['order_id']),
            product_id=str(row['product_id']),
            quantity=row['quantity'],
            price_at_purchase=row['price_at_purchase'],
            product_name=product.get('name_es') or UNKNOWN_PRODUCT_NAME,
            product_image_url=image_url,
        )

    @classmethod
    def map_enriched_order(cls, row: dict, item_rows: List[dict]) -> EnrichedOrder:
        """Build an EnrichedOrder from an order row (with `locations`) and its item rows"""
        location = row.get('locations') or {}
        order = cls._map_row_to_order(row)
        return EnrichedOrder(
            **order.model_dump(),
            items=[cls._map_item_row(item) for item in item_rows],
            location_name=location.get('name_es') or UNKNOWN_LOCATION_NAME,
            location_address=location.get('address') or UNKNOWN_LOCATION_ADDRESS,
        )

    # ========================================================================
    # Stock
    # ========================================================================

    def fetch_stock(self, product_ids: List[str]) -> Dict[str, dict]:
        """
        Read stock, name and price for the given products

        Returns:
            Dict product_id -> {'id', 'stock', 'name_es', 'price'}
        """
        response = (
            get_supabase()
            .table("products")
            .select("id, stock, name_es, price")
            .in_("id", product_ids)
            .execute()
        )
        return {str(row['id']): row for row in (response.data or [])}

    def get_product_stock(self, product_id: str) -> Optional[int]:
        """Current stock of one product, None if the product does not exist"""
        response = (
            get_supabase()
            .table("products")
            .select("stock")
            .eq("id", product_id)
            .limit(1)
            .execute()
        )
        rows = response.data or []
        if not rows:
            return None
        return rows[0].get('stock') or 0

    def update_stock(self, product_id: str, stock: int) -> None:
        get_supabase().table("products").update({"stock": stock}).eq("id", product_id).execute()

    # ========================================================================
    # Orders
    # ========================================================================

    def insert_order(self, order_data: dict) -> Order:
        """
        Insert an order row and return it as stored

        Raises:
            RuntimeError if the insert returned no row
        """
        response = get_supabase().table("orders").insert(order_data).execute()
        rows = response.data or []
        if not rows:
            raise RuntimeError("Order insert returned no row")
        return self._map_row_to_order(rows[0])

    def insert_items(self, item_rows: List[dict]) -> None:
        get_supabase().table("order_items").insert(item_rows).execute()

    def delete_order(self, order_id: str) -> None:
        get_supabase().table("orders").delete().eq("id", order_id).execute()

    def update_status(self, order_id: str, status: str, updated_at: datetime) -> None:
        (
            get_supabase()
            .table("orders")
            .update({"status": status, "updated_at": updated_at.isoformat()})
            .eq("id", order_id)
            .execute()
        )

    def find_by_user(self, user_id: str) -> List[dict]:
        """Order rows of a user, newest first, each with `locations(name_es, address)`"""
        response = (
            get_supabase()
            .table("orders")
            .select(f"{ORDER_COLUMNS}, locations(name_es, address)")
            .eq("user_id", user_id)
            .order("created_at", desc=True)
            .execute()
        )
        return response.data or []

    def find_user_order(self, order_id: str, user_id: str) -> Optional[dict]:
        """One order row of a user with its location, None if absent or owned by someone else"""
        response = (
            get_supabase()
            .table("orders")
            .select(f"{ORDER_COLUMNS}, locations(name_es, address)")
            .eq("id", order_id)
            .eq("user_id", user_id)
            .limit(1)
            .execute()
        )
        rows = response.data or []
        return rows[0] if rows else None

    def find_items(self, order_id: str) -> List[dict]:
        """Item rows of an order, each with `products(name_es, thumbnail_url, image_urls)`"""
        response = (
            get_supabase()
            .table("order_items")
            .select("*, products(name_es, thumbnail_url, image_urls)")
            .eq("order_id", order_id)
            .execute()
        )
        return response.data or []

    def find_user_order_with_items(self, order_id: str, user_id: str) -> Optional[dict]:
        """Order row with raw `order_items(*)`, used by cancellation"""
        response = (
            get_supabase()
            .table("orders")
            .select("*, order_items(*)")
            .eq("id", order_id)
            .eq("user_id", user_id)
            .limit(1)
            .execute()
        )
        rows = response.data or []
        return rows[0] if rows else None
