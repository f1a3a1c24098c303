"""
Pickup scheduling

Fixed one-hour pickup windows from 08:00 to 20:00, the rule that decides
which day's windows are offered, and the conversion of a chosen window
into the pickup datetime stored on the order.

All datetimes are in the store timezone (STORE_TIMEZONE).

Author: Wanka's
Date: 2025-06-04
"""
import logging
from datetime import date, datetime, time, timedelta
from typing import List, Optional
from zoneinfo import ZoneInfo

from wankas.core.config import settings
from wankas.core.errors import ValidationError
from wankas.domain.location import TimeSlot, PickupSlot, PickupSchedule

logger = logging.getLogger(__name__)

SATURDAY = 5
SUNDAY = 6


def _slot_label(hour: int) -> str:
    start = time(hour, 0).strftime("%I:%M %p")
    end = time((hour + 1) % 24, 0).strftime("%I:%M %p")
    return f"{start} - {end}"


# ts08 '08:00 AM - 09:00 AM' ... ts19 '07:00 PM - 08:00 PM'
TIME_SLOTS: List[TimeSlot] = [
    TimeSlot(id=f"ts{hour:02d}", time=_slot_label(hour), available=True)
    for hour in range(8, 20)
]


def store_timezone() -> ZoneInfo:
    return ZoneInfo(settings.STORE_TIMEZONE)


def store_now() -> datetime:
    return datetime.now(store_timezone())


def find_slot(slot_id: str) -> Optional[TimeSlot]:
    for slot in TIME_SLOTS:
        if slot.id == slot_id:
            return slot
    return None


def parse_start_time(label: str) -> time:
    """'01:00 PM - 02:00 PM' -> time(13, 0)"""
    start = label.split(" - ")[0].strip()
    return datetime.strptime(start, "%I:%M %p").time()


def slot_start(slot: TimeSlot, on_date: date) -> datetime:
    """Start of a slot on a date, in the store timezone"""
    return datetime.combine(on_date, parse_start_time(slot.time), tzinfo=store_timezone())


def build_pickup_schedule(now: Optional[datetime] = None) -> PickupSchedule:
    """
    Decide which day's slots to offer.

    If any available slot still starts later today, today's slots are
    offered with the past ones disabled. Otherwise the next day is
    offered: Monday when today is Saturday or Sunday, tomorrow on any
    other day.

    Args:
        now: Current time (defaults to the store clock); naive values are
            taken as store time
    """
    if now is None:
        now = store_now()
    elif now.tzinfo is None:
        now = now.replace(tzinfo=store_timezone())
    else:
        now = now.astimezone(store_timezone())

    today = now.date()
    future_today = [slot for slot in TIME_SLOTS if slot.available and slot_start(slot, today) > now]

    if future_today:
        slots = [
            PickupSlot(
                **slot.model_dump(),
                is_disabled=not (slot.available and slot_start(slot, today) > now)
            )
            for slot in TIME_SLOTS
        ]
        return PickupSchedule(base_date=today, slots=slots)

    weekday = now.weekday()
    if weekday == SATURDAY:
        days_to_add, message_key = 2, "slots_for_monday"
    elif weekday == SUNDAY:
        days_to_add, message_key = 1, "slots_for_monday"
    else:
        days_to_add, message_key = 1, "slots_for_tomorrow"

    slots = [PickupSlot(**slot.model_dump(), is_disabled=not slot.available) for slot in TIME_SLOTS]
    return PickupSchedule(
        base_date=today + timedelta(days=days_to_add),
        slots=slots,
        message_key=message_key,
    )


def resolve_pickup(slot_id: str, pickup_date: date, now: Optional[datetime] = None) -> datetime:
    """
    Pickup datetime for a checkout, accepted only for a slot the current
    schedule offers

    Raises:
        ValidationError: the slot is unknown, the date is not the offered
            day, or the slot has already started
    """
    slot = find_slot(slot_id)
    if slot is None:
        logger.warning(f"Unknown time slot requested: {slot_id}")
        raise ValidationError("invalid_time_slot")

    schedule = build_pickup_schedule(now)
    if pickup_date != schedule.base_date:
        logger.warning(f"Pickup date {pickup_date} requested, schedule offers {schedule.base_date}")
        raise ValidationError("pickup_date_unavailable")

    offered = next(s for s in schedule.slots if s.id == slot_id)
    if offered.is_disabled:
        raise ValidationError("pickup_in_past")

    return slot_start(slot, pickup_date)
