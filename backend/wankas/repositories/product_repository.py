"""
Product Repository - Data Access Layer for Products

Handles all Supabase queries for products and returns Product domain models.

Author: Wanka's
Date: 2025-06-02
"""
import logging
import re
from typing import List, Optional
from urllib.parse import urlsplit, urlunsplit

from wankas.core.config import settings
from wankas.core.database import get_supabase
from wankas.data.fallback_products import FALLBACK_PRODUCTS
from wankas.domain.product import (
    Product,
    PLACEHOLDER_IMAGE_URL,
    DEFAULT_PRODUCT_NAME,
    DEFAULT_CATEGORY,
)

logger = logging.getLogger(__name__)

PRODUCT_COLUMNS = "id, name_es, description_es, price, stock, image_urls, thumbnail_url, categories(name_es)"


def clean_storage_url(url: Optional[str]) -> Optional[str]:
    """
    Collapse repeated slashes in the path of a storage URL.

    'https://x.supabase.co/storage//v1//img.png' -> 'https://x.supabase.co/storage/v1/img.png'
    Unparseable values are returned unchanged.
    """
    if not url:
        return url
    try:
        parts = urlsplit(url)
    except ValueError as e:
        logger.warning(f"Could not parse image URL {url!r}: {e}")
        return url
    if not parts.scheme or not parts.netloc:
        return url
    return urlunsplit(parts._replace(path=re.sub(r"/{2,}", "/", parts.path)))


class ProductRepository:
    """
    Repository for Product data access

    All Supabase queries for `products` are centralized here.
    Returns Product domain models, not raw dictionaries.
    """

    @staticmethod
    def _pick_image(row: dict) -> str:
        raw_url = row.get('thumbnail_url')
        if not raw_url:
            image_urls = row.get('image_urls')
            if isinstance(image_urls, list) and image_urls and image_urls[0]:
                raw_url = image_urls[0]
        return clean_storage_url(raw_url) or PLACEHOLDER_IMAGE_URL

    @staticmethod
    def _map_row_to_product(row: dict) -> Product:
        """
        Helper method to map a Supabase row to the Product domain model.

        Missing columns get the storefront defaults.
        """
        category = row.get('categories') or {}
        return Product(
            id=str(row['id']),
            name=row.get('name_es') or DEFAULT_PRODUCT_NAME,
            description=row.get('description_es') or "",
            price=row.get('price') or 0,
            image_url=ProductRepository._pick_image(row),
            category=category.get('name_es') or DEFAULT_CATEGORY,
            stock=row.get('stock') or 0,
        )

    def find_all(self) -> List[Product]:
        """
        Get every product ordered by name

        Returns:
            List of Product; the bundled catalog when Supabase fails and
            CATALOG_FALLBACK_ENABLED is set

        Raises:
            Exception from the Supabase client when fallback is disabled
        """
        try:
            response = (
                get_supabase()
                .table("products")
                .select(PRODUCT_COLUMNS)
                .order("name_es")
                .execute()
            )
        except Exception as e:
            if not settings.CATALOG_FALLBACK_ENABLED:
                raise
            logger.warning(f"Products query failed, using local catalog: {e}")
            return list(FALLBACK_PRODUCTS)

        rows = response.data or []
        logger.info(f"Fetched {len(rows)} products from Supabase")
        return [self._map_row_to_product(row) for row in rows]

    def find_by_id(self, product_id: str) -> Optional[Product]:
        """
        Find product by ID

        Args:
            product_id: Product ID

        Returns:
            Product or None if not found
        """
        response = (
            get_supabase()
            .table("products")
            .select(PRODUCT_COLUMNS)
            .eq("id", product_id)
            .limit(1)
            .execute()
        )
        rows = response.data or []
        if not rows:
            return None
        return self._map_row_to_product(rows[0])

    def find_by_ids(self, product_ids: List[str]) -> List[Product]:
        """Products for the given ids (unknown ids are simply absent)"""
        if not product_ids:
            return []
        response = (
            get_supabase()
            .table("products")
            .select(PRODUCT_COLUMNS)
            .in_("id", product_ids)
            .execute()
        )
        return [self._map_row_to_product(row) for row in (response.data or [])]

    def get_categories(self) -> List[str]:
        """Distinct category names, sorted"""
        return sorted({product.category for product in self.find_all()})
