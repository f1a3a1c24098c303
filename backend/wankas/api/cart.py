"""
Cart API Endpoints
The cart is kept by the client; this endpoint prices it against the
current catalog before checkout.

Author: Wanka's
Date: 2025-06-03
"""
import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from wankas.core.i18n import get_locale, translate
from wankas.domain.cart import Cart, CartLine, clamp_quantity, merge_lines
from wankas.repositories.product_repository import ProductRepository

logger = logging.getLogger(__name__)

router = APIRouter()


class CartQuoteRequest(BaseModel):
    items: List[CartLine] = Field(default_factory=list)


@router.post("/quote")
def quote_cart(body: CartQuoteRequest, locale: str = Depends(get_locale)):
    """
    Price a cart with current prices and stock

    Lines asking for more than the stock are flagged and carry the
    quantity that can actually be ordered. Unknown and out-of-stock
    products are reported and left out of the total.
    """
    try:
        lines = merge_lines(body.items)
        products = {p.id: p for p in ProductRepository().find_by_ids([line.product_id for line in lines])}

        cart = Cart()
        issues = []
        for line in lines:
            product = products.get(line.product_id)
            if product is None:
                issues.append({"product_id": line.product_id, "issue": "not_found"})
                continue
            if product.is_out_of_stock:
                issues.append({"product_id": line.product_id, "issue": "out_of_stock", "stock": 0})
                continue

            allowed = clamp_quantity(line.quantity, product.stock)
            if allowed < line.quantity:
                issues.append({
                    "product_id": line.product_id,
                    "issue": "exceeds_stock",
                    "requested": line.quantity,
                    "stock": product.stock,
                    "message": translate("insufficient_stock", locale, name=product.name, stock=product.stock)
                })
            cart.add(product, allowed)

        return {
            "status": "success",
            "data": {
                "items": [
                    {**item.model_dump(), "price": float(item.price), "line_total": float(item.line_total)}
                    for item in cart.items
                ],
                "total": float(cart.total),
                "item_count": cart.item_count,
                "issues": issues
            }
        }

    except Exception as e:
        logger.error(f"Error quoting cart: {e}")
        raise HTTPException(status_code=500, detail=f"{translate('products_fetch_failed', locale)} {str(e)}")
