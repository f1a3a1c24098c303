"""
Products API Endpoints
Product catalog for the storefront

Author: Wanka's
Date: 2025-06-02
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from wankas.core.errors import NotFoundError, to_http_exception
from wankas.core.i18n import get_locale, translate
from wankas.repositories.product_repository import ProductRepository

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/")
def get_products(
    category: Optional[str] = Query(None, description="Filter by category name"),
    search: Optional[str] = Query(None, description="Search by name or description"),
    locale: str = Depends(get_locale)
):
    """
    Get the catalog ordered by name

    Falls back to the bundled catalog when Supabase is unreachable.
    """
    try:
        repo = ProductRepository()
        products = repo.find_all()

        if category:
            products = [p for p in products if p.category.lower() == category.lower()]
        if search:
            term = search.lower()
            products = [
                p for p in products
                if term in p.name.lower() or term in p.description.lower()
            ]

        return {
            "status": "success",
            "count": len(products),
            "data": [product.to_dict() for product in products]
        }

    except Exception as e:
        logger.error(f"Error fetching products: {e}")
        raise HTTPException(status_code=500, detail=f"{translate('products_fetch_failed', locale)} {str(e)}")


@router.get("/categories")
def get_categories(locale: str = Depends(get_locale)):
    """Distinct category names"""
    try:
        categories = ProductRepository().get_categories()
        return {
            "status": "success",
            "count": len(categories),
            "data": categories
        }

    except Exception as e:
        logger.error(f"Error fetching categories: {e}")
        raise HTTPException(status_code=500, detail=f"{translate('products_fetch_failed', locale)} {str(e)}")


@router.get("/{product_id}")
def get_product(product_id: str, locale: str = Depends(get_locale)):
    """Get one product by ID"""
    try:
        product = ProductRepository().find_by_id(product_id)
        if product is None:
            raise NotFoundError("product_not_found")

        return {
            "status": "success",
            "data": product.to_dict()
        }

    except NotFoundError as e:
        raise to_http_exception(e, locale)
    except Exception as e:
        logger.error(f"Error fetching product {product_id}: {e}")
        raise HTTPException(status_code=500, detail=f"{translate('products_fetch_failed', locale)} {str(e)}")
