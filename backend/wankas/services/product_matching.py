"""
Match AI-produced food names to catalog products

Three passes over the catalog, first hit wins:
1. exact name (case-insensitive)
2. one name contains the other
3. any word of one name appears inside the other name
"""
from typing import Iterable, Optional

from wankas.domain.product import Product


def find_product_match(ai_name: str, products: Iterable[Product]) -> Optional[Product]:
    """
    Find the catalog product for an AI food name

    Example:
        'cebolla' matches 'Cebolla Roja' (pass 2),
        'tomate italiano' matches 'Tomate' (pass 2),
        'queso fresco andino' matches 'Queso Fresco' (pass 3)
    """
    lower_ai_name = (ai_name or "").strip().lower()
    if not lower_ai_name:
        return None

    products = list(products)
    names = [(product, product.name.lower()) for product in products]

    for product, name in names:
        if name == lower_ai_name:
            return product

    for product, name in names:
        if lower_ai_name in name or name in lower_ai_name:
            return product

    ai_parts = lower_ai_name.split()
    for product, name in names:
        if any(part in name for part in ai_parts):
            return product
        if any(part in lower_ai_name for part in name.split()):
            return product

    return None
