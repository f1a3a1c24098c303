"""
Orders API Endpoints
Checkout, order history, cancellation and boleta download

Author: Wanka's
Date: 2025-06-03
"""
import logging
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Response, status
from pydantic import BaseModel, Field

from wankas.core.auth import TokenUser, get_current_user
from wankas.core.errors import WankasError, to_http_exception
from wankas.core.i18n import get_locale, translate
from wankas.domain.cart import CartLine
from wankas.domain.user import User
from wankas.services.auth_service import get_auth_service
from wankas.services.boleta_service import render_boleta, boleta_filename
from wankas.services.order_service import get_order_service
from wankas.services.pickup_service import resolve_pickup

logger = logging.getLogger(__name__)

router = APIRouter()


class CheckoutRequest(BaseModel):
    location_id: str = Field(..., min_length=1)
    time_slot_id: str = Field(..., min_length=1, description="e.g. ts10")
    pickup_date: date = Field(..., description="Base date of the slot (YYYY-MM-DD)")
    items: List[CartLine] = Field(default_factory=list)
    notes: Optional[str] = Field(None, max_length=500)


@router.post("/", status_code=status.HTTP_201_CREATED)
def place_order(
    body: CheckoutRequest,
    current_user: TokenUser = Depends(get_current_user),
    locale: str = Depends(get_locale)
):
    """
    Place a pickup order

    The pickup date and slot must be one the current schedule offers.
    Prices come from the catalog, not from the client. Stock is
    decremented; on any failure the changes are undone.
    """
    try:
        pickup_at = resolve_pickup(body.time_slot_id, body.pickup_date)

        order = get_order_service().place_order(
            user_id=current_user.id,
            location_id=body.location_id,
            pickup_date=pickup_at,
            lines=body.items,
            notes=body.notes
        )
        return {
            "status": "success",
            "message": translate("order_placed", locale),
            "data": order.to_dict()
        }

    except WankasError as e:
        raise to_http_exception(e, locale)
    except Exception as e:
        logger.error(f"Error placing order for {current_user.id}: {e}")
        raise HTTPException(status_code=500, detail=f"Error placing order: {str(e)}")


@router.get("/")
def get_orders(
    current_user: TokenUser = Depends(get_current_user),
    locale: str = Depends(get_locale)
):
    """Orders of the signed-in user, newest first"""
    try:
        orders = get_order_service().get_user_orders(current_user.id)
        return {
            "status": "success",
            "count": len(orders),
            "data": [
                {**order.to_dict(), "status_label": translate(f"status_{order.status}", locale)}
                for order in orders
            ]
        }

    except WankasError as e:
        raise to_http_exception(e, locale)
    except Exception as e:
        logger.error(f"Error fetching orders for {current_user.id}: {e}")
        raise HTTPException(status_code=500, detail=f"Error fetching orders: {str(e)}")


@router.get("/{order_id}")
def get_order(
    order_id: str,
    current_user: TokenUser = Depends(get_current_user),
    locale: str = Depends(get_locale)
):
    try:
        order = get_order_service().get_user_order(order_id, current_user.id)
        return {
            "status": "success",
            "data": {**order.to_dict(), "status_label": translate(f"status_{order.status}", locale)}
        }

    except WankasError as e:
        raise to_http_exception(e, locale)
    except Exception as e:
        logger.error(f"Error fetching order {order_id}: {e}")
        raise HTTPException(status_code=500, detail=f"Error fetching order: {str(e)}")


@router.post("/{order_id}/cancel")
def cancel_order(
    order_id: str,
    current_user: TokenUser = Depends(get_current_user),
    locale: str = Depends(get_locale)
):
    """Cancel a pending order and restore its stock"""
    try:
        get_order_service().cancel_order(order_id, current_user.id)
        return {
            "status": "success",
            "message": translate("order_cancelled", locale)
        }

    except WankasError as e:
        raise to_http_exception(e, locale)
    except Exception as e:
        logger.error(f"Error cancelling order {order_id}: {e}")
        raise HTTPException(status_code=500, detail=f"Error cancelling order: {str(e)}")


@router.get("/{order_id}/boleta")
def download_boleta(
    order_id: str,
    current_user: TokenUser = Depends(get_current_user),
    locale: str = Depends(get_locale)
):
    """Receipt PDF of an order (attachment)"""
    try:
        order = get_order_service().get_user_order(order_id, current_user.id)

        try:
            customer = get_auth_service().get_profile(current_user.id)
        except WankasError as e:
            logger.warning(f"Profile unavailable for boleta of {order_id}, using token data: {e}")
            customer = User(id=current_user.id, email=current_user.email, name=current_user.name)

        pdf_bytes = render_boleta(order, customer, locale)
        return Response(
            content=pdf_bytes,
            media_type="application/pdf",
            headers={"Content-Disposition": f'attachment; filename="{boleta_filename(order)}"'}
        )

    except WankasError as e:
        raise to_http_exception(e, locale)
    except Exception as e:
        logger.error(f"Error generating boleta for order {order_id}: {e}")
        raise HTTPException(status_code=500, detail=f"{translate('boleta_generation_failed', locale)} {str(e)}")
