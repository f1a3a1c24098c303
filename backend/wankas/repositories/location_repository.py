"""
Location Repository - store locations from the `locations` table

Author: Wanka's
Date: 2025-06-02
"""
import json
import logging
from typing import List, Optional

from wankas.core.database import get_supabase
from wankas.domain.location import StoreLocation

logger = logging.getLogger(__name__)

LOCATION_COLUMNS = "id, name_es, address, opening_hours_es, latitude, longitude"


class LocationRepository:
    """Read access to pickup stores"""

    @staticmethod
    def _map_row_to_location(row: dict) -> StoreLocation:
        hours = row.get('opening_hours_es')
        if hours and not isinstance(hours, str):
            # jsonb column, e.g. {"lunes-viernes": "8am-8pm"}
            hours = json.dumps(hours, ensure_ascii=False)

        data = {
            'id': str(row['id']),
            'latitude': row.get('latitude'),
            'longitude': row.get('longitude'),
        }
        if row.get('name_es'):
            data['name'] = row['name_es']
        if row.get('address'):
            data['address'] = row['address']
        if hours:
            data['operating_hours'] = hours
        return StoreLocation(**data)

    def find_all(self) -> List[StoreLocation]:
        """All stores ordered by name"""
        response = (
            get_supabase()
            .table("locations")
            .select(LOCATION_COLUMNS)
            .order("name_es")
            .execute()
        )
        rows = response.data or []
        logger.info(f"Fetched {len(rows)} locations from Supabase")
        return [self._map_row_to_location(row) for row in rows]

    def find_by_id(self, location_id: str) -> Optional[StoreLocation]:
        response = (
            get_supabase()
            .table("locations")
            .select(LOCATION_COLUMNS)
            .eq("id", location_id)
            .limit(1)
            .execute()
        )
        rows = response.data or []
        return self._map_row_to_location(rows[0]) if rows else None
