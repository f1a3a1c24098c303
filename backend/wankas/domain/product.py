"""
Product Domain Model

Represents a catalog product as shown in the storefront.
Rows come from the `products` table joined with `categories`.

Author: Wanka's
Date: 2025-06-02
"""
from decimal import Decimal

from pydantic import BaseModel, Field, ConfigDict


PLACEHOLDER_IMAGE_URL = "https://placehold.co/600x400.png"
DEFAULT_PRODUCT_NAME = "Producto sin nombre"
DEFAULT_CATEGORY = "Sin categoría"


class Product(BaseModel):
    """
    Product domain model - represents a product in the catalog

    Fields:
        id: Product ID (primary key in `products`)
        name: Product name (Spanish, `name_es`)
        description: Product description (`description_es`)
        price: Unit price in soles
        image_url: Thumbnail, first gallery image or placeholder
        category: Category name (`categories.name_es`)
        stock: Units available for pickup orders
    """

    id: str = Field(..., description="Product ID")
    name: str = Field(DEFAULT_PRODUCT_NAME, description="Product name")
    description: str = Field("", description="Product description")
    price: Decimal = Field(Decimal("0"), description="Unit price", ge=0)
    image_url: str = Field(PLACEHOLDER_IMAGE_URL, description="Image URL")
    category: str = Field(DEFAULT_CATEGORY, description="Category name")
    stock: int = Field(0, description="Units in stock")

    model_config = ConfigDict(from_attributes=True)

    @property
    def is_out_of_stock(self) -> bool:
        """Check if product is out of stock"""
        return self.stock <= 0

    def to_dict(self) -> dict:
        """
        Convert to dictionary with computed fields

        Decimal price is converted to float for JSON compatibility.
        """
        data = self.model_dump()
        data['price'] = float(self.price)
        data['is_out_of_stock'] = self.is_out_of_stock
        return data
