"""
Locations API Endpoints
Pickup stores and the pickup time slots on offer

Author: Wanka's
Date: 2025-06-04
"""
import logging

from fastapi import APIRouter, Depends, HTTPException

from wankas.core.i18n import get_locale, translate
from wankas.repositories.location_repository import LocationRepository
from wankas.services.pickup_service import build_pickup_schedule

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/")
def get_locations(locale: str = Depends(get_locale)):
    """All pickup stores ordered by name"""
    try:
        locations = LocationRepository().find_all()
        return {
            "status": "success",
            "count": len(locations),
            "data": [location.model_dump() for location in locations]
        }

    except Exception as e:
        logger.error(f"Error fetching locations: {e}")
        raise HTTPException(status_code=500, detail=f"{translate('locations_fetch_failed', locale)} {str(e)}")


@router.get("/time-slots")
async def get_time_slots(locale: str = Depends(get_locale)):
    """
    Pickup slots for the next day with free slots

    Returns:
        base_date (YYYY-MM-DD), slots with is_disabled, and a notice when
        the slots are not for today
    """
    schedule = build_pickup_schedule()
    return {
        "status": "success",
        "data": {
            "base_date": schedule.base_date.isoformat(),
            "slots": [slot.model_dump() for slot in schedule.slots],
            "message": translate(schedule.message_key, locale) if schedule.message_key else None
        }
    }
