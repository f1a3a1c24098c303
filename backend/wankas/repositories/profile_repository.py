"""
Profile Repository - `profiles` table access

Profiles hold the storefront accounts, including the bcrypt password hash.
"""
import logging
from typing import Optional

from wankas.core.database import get_supabase
from wankas.domain.user import User

logger = logging.getLogger(__name__)

PROFILE_COLUMNS = "id, name, email, phone_number"


class ProfileRepository:
    """Read/write access to profiles"""

    @staticmethod
    def _map_row_to_user(row: dict) -> User:
        return User(
            id=str(row['id']),
            email=row.get('email'),
            name=row.get('name'),
            phone_number=row.get('phone_number'),
        )

    def find_by_email_with_hash(self, email: str) -> Optional[dict]:
        """Raw profile row including password_hash, None if no profile uses the email"""
        response = (
            get_supabase()
            .table("profiles")
            .select(f"{PROFILE_COLUMNS}, password_hash")
            .eq("email", email)
            .limit(1)
            .execute()
        )
        rows = response.data or []
        return rows[0] if rows else None

    def email_exists(self, email: str) -> bool:
        response = (
            get_supabase()
            .table("profiles")
            .select("id")
            .eq("email", email)
            .limit(1)
            .execute()
        )
        return bool(response.data)

    def find_by_id(self, user_id: str) -> Optional[User]:
        response = (
            get_supabase()
            .table("profiles")
            .select(PROFILE_COLUMNS)
            .eq("id", user_id)
            .limit(1)
            .execute()
        )
        rows = response.data or []
        return self._map_row_to_user(rows[0]) if rows else None

    def create(self, user_id: str, name: str, email: str, password_hash: str) -> User:
        """
        Insert a profile

        Raises:
            RuntimeError if the insert returned no row
        """
        response = (
            get_supabase()
            .table("profiles")
            .insert({
                "id": user_id,
                "name": name,
                "email": email,
                "password_hash": password_hash,
            })
            .execute()
        )
        rows = response.data or []
        if not rows:
            raise RuntimeError("Profile insert returned no row")
        logger.info(f"Created profile {user_id}")
        return self._map_row_to_user(rows[0])

    def update(self, user_id: str, changes: dict) -> Optional[User]:
        """Update name / phone_number; returns the updated user or None if it does not exist"""
        response = (
            get_supabase()
            .table("profiles")
            .update(changes)
            .eq("id", user_id)
            .execute()
        )
        rows = response.data or []
        return self._map_row_to_user(rows[0]) if rows else None
