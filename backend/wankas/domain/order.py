"""
Order Domain Models

Represents pickup orders and their line items as stored in the
`orders` and `order_items` tables.

Author: Wanka's
Date: 2025-06-03
"""
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field, ConfigDict


ORDER_STATUS_PENDING = "pending"
ORDER_STATUS_CANCELLED = "cancelled"

ORDER_ITEM_PLACEHOLDER_IMAGE = "https://placehold.co/80x80.png"
UNKNOWN_PRODUCT_NAME = "Nombre no disponible"
UNKNOWN_LOCATION_NAME = "Ubicación desconocida"
UNKNOWN_LOCATION_ADDRESS = "Dirección no disponible"


class OrderItem(BaseModel):
    """
    Order Item domain model - a line item of an order

    Fields:
        order_id: Parent order ID
        product_id: Product ID
        quantity: Number of units ordered
        price_at_purchase: Unit price charged when the order was placed
    """

    order_id: str = Field(..., description="Parent order ID")
    product_id: str = Field(..., description="Product ID")
    quantity: int = Field(..., description="Quantity ordered", ge=1)
    price_at_purchase: Decimal = Field(..., description="Unit price at purchase", ge=0)

    model_config = ConfigDict(from_attributes=True)

    @property
    def line_total(self) -> Decimal:
        return self.price_at_purchase * self.quantity


class EnrichedOrderItem(OrderItem):
    """Order item with product details for display"""

    product_name: str = Field(UNKNOWN_PRODUCT_NAME, description="Product name (from JOIN)")
    product_image_url: str = Field(ORDER_ITEM_PLACEHOLDER_IMAGE, description="Product image (from JOIN)")

    def to_dict(self) -> dict:
        data = self.model_dump()
        data['price_at_purchase'] = float(self.price_at_purchase)
        data['line_total'] = float(self.line_total)
        return data


class Order(BaseModel):
    """
    Order domain model - a pickup order

    Fields:
        id: Order ID (UUID)
        user_id: Profile that placed the order
        location_id: Store where the order is picked up
        order_date: When the order was placed
        pickup_date: Pickup date and time
        status: pending, cancelled, ...
        total_price: Order total
        notes: Free-form notes
    """

    id: str = Field(..., description="Order ID")
    user_id: str = Field(..., description="Profile ID")
    location_id: str = Field(..., description="Pickup location ID")
    order_date: Optional[datetime] = Field(None, description="Order timestamp")
    pickup_date: datetime = Field(..., description="Pickup timestamp")
    status: str = Field(ORDER_STATUS_PENDING, description="Order status")
    total_price: Decimal = Field(..., description="Order total", ge=0)
    notes: Optional[str] = Field(None, description="Order notes")
    created_at: Optional[datetime] = Field(None, description="Creation timestamp")
    updated_at: Optional[datetime] = Field(None, description="Last update timestamp")

    model_config = ConfigDict(from_attributes=True)

    @property
    def short_id(self) -> str:
        """Last segment of the UUID, upper-cased (used on the boleta)"""
        return self.id.split('-')[-1].upper() if self.id else "N/A"

    @property
    def order_number(self) -> str:
        return f"WK-WEB-{self.short_id}"

    @property
    def is_pending(self) -> bool:
        return (self.status or "").lower() == ORDER_STATUS_PENDING

    def to_dict(self) -> dict:
        data = self.model_dump()
        data['total_price'] = float(self.total_price)
        data['order_number'] = self.order_number
        data['is_pending'] = self.is_pending
        return data


class EnrichedOrder(Order):
    """Order with its items and pickup location details"""

    items: List[EnrichedOrderItem] = Field(default_factory=list)
    location_name: str = Field(UNKNOWN_LOCATION_NAME)
    location_address: str = Field(UNKNOWN_LOCATION_ADDRESS)

    @property
    def item_count(self) -> int:
        return sum(item.quantity for item in self.items)

    def to_dict(self) -> dict:
        data = super().to_dict()
        data['items'] = [item.to_dict() for item in self.items]
        data['item_count'] = self.item_count
        return data
