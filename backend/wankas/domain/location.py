"""
Store location and pickup slot models
"""
from datetime import date
from typing import List, Optional

from pydantic import BaseModel, Field


class StoreLocation(BaseModel):
    """A physical store where orders are picked up"""
    id: str
    name: str = "Tienda sin nombre"
    address: str = "Dirección no disponible"
    operating_hours: str = "Horario no disponible"
    latitude: Optional[float] = None
    longitude: Optional[float] = None


class TimeSlot(BaseModel):
    """One-hour pickup window, e.g. '08:00 AM - 09:00 AM'"""
    id: str
    time: str
    available: bool = True


class PickupSlot(TimeSlot):
    is_disabled: bool = False


class PickupSchedule(BaseModel):
    """Slots offered for a base date, with an optional notice key"""
    base_date: date
    slots: List[PickupSlot] = Field(default_factory=list)
    message_key: Optional[str] = None
