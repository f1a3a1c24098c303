"""
Cart Domain Model

The cart lives on the client; the API receives it at quote and checkout
time. These models normalize what the client sends (one line per
product, positive quantities) and compute totals.

Author: Wanka's
Date: 2025-06-03
"""
from decimal import Decimal
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from wankas.domain.product import Product


class CartLine(BaseModel):
    """A product id and quantity as submitted by the client"""
    product_id: str = Field(..., min_length=1)
    quantity: int = Field(..., ge=1)


class CartItem(BaseModel):
    """A priced cart line"""
    product_id: str
    name: str
    price: Decimal = Field(..., ge=0)
    quantity: int = Field(..., ge=1)
    stock: Optional[int] = None

    @property
    def line_total(self) -> Decimal:
        return self.price * self.quantity

    @classmethod
    def from_product(cls, product: Product, quantity: int = 1) -> "CartItem":
        return cls(
            product_id=product.id,
            name=product.name,
            price=product.price,
            quantity=quantity,
            stock=product.stock,
        )


class Cart(BaseModel):
    """Ordered collection of cart items, at most one per product"""

    items: List[CartItem] = Field(default_factory=list)

    def add(self, product: Product, quantity: int = 1) -> None:
        """Add a product; an existing line for the same product gets the quantity summed"""
        for item in self.items:
            if item.product_id == product.id:
                item.quantity += quantity
                return
        self.items.append(CartItem.from_product(product, quantity))

    def remove(self, product_id: str) -> None:
        self.items = [item for item in self.items if item.product_id != product_id]

    def update_quantity(self, product_id: str, quantity: int) -> None:
        """Set a line's quantity; zero or less removes the line"""
        if quantity <= 0:
            self.remove(product_id)
            return
        for item in self.items:
            if item.product_id == product_id:
                item.quantity = quantity

    def clear(self) -> None:
        self.items = []

    @property
    def total(self) -> Decimal:
        return sum((item.line_total for item in self.items), Decimal("0"))

    @property
    def item_count(self) -> int:
        return sum(item.quantity for item in self.items)

    @property
    def is_empty(self) -> bool:
        return not self.items


def merge_lines(lines: List[CartLine]) -> List[CartLine]:
    """Collapse repeated product ids into one line, keeping first-seen order"""
    merged: Dict[str, int] = {}
    for line in lines:
        merged[line.product_id] = merged.get(line.product_id, 0) + line.quantity
    return [CartLine(product_id=pid, quantity=qty) for pid, qty in merged.items()]


def clamp_quantity(requested: Optional[int], stock: Optional[int] = None) -> int:
    """
    Bring a requested quantity into the orderable range.

    Missing or non-positive quantities become 1; quantities above a known
    positive stock are capped at the stock.
    """
    if requested is None or requested < 1:
        return 1
    if stock and requested > stock:
        return stock
    return int(requested)
