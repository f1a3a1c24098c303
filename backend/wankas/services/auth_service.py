"""
Auth Service
Registration, login and profile updates over the `profiles` table

Author: Wanka's
Date: 2025-06-04
"""
import logging
import uuid
from typing import Optional, Tuple

from passlib.context import CryptContext

from wankas.core.auth import create_access_token
from wankas.core.errors import (
    AuthError,
    ConflictError,
    NotFoundError,
    ServiceUnavailableError,
    ValidationError,
    WankasError,
)
from wankas.domain.user import (
    User,
    ProfileUpdate,
    MIN_NAME_LENGTH,
    MIN_PASSWORD_LENGTH,
    email_error_key,
)
from wankas.repositories.profile_repository import ProfileRepository

logger = logging.getLogger(__name__)

# Password hashing context (hashes are compatible with bcryptjs)
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


class AuthService:
    """Account management for storefront customers"""

    def __init__(self, repository: Optional[ProfileRepository] = None):
        self.repository = repository or ProfileRepository()

    @staticmethod
    def _validate_email(email: str) -> str:
        email = (email or "").strip()
        error_key = email_error_key(email)
        if error_key:
            raise ValidationError(error_key)
        return email

    def register(self, name: str, email: str, password: str) -> Tuple[User, str]:
        """
        Create a profile and return it with a session token

        Raises:
            ValidationError: name, email or password rules not met
            ConflictError: email already registered
            ServiceUnavailableError: Supabase call failed
        """
        name = (name or "").strip()
        if len(name) < MIN_NAME_LENGTH:
            raise ValidationError("name_too_short")
        email = self._validate_email(email)
        if len(password or "") < MIN_PASSWORD_LENGTH:
            raise ValidationError("password_too_short")

        try:
            if self.repository.email_exists(email):
                raise ConflictError("email_taken")

            user = self.repository.create(
                user_id=str(uuid.uuid4()),
                name=name,
                email=email,
                password_hash=pwd_context.hash(password),
            )
        except WankasError:
            raise
        except Exception as e:
            logger.error(f"Error registering {email}: {e}")
            raise ServiceUnavailableError("register_failed") from e

        token = create_access_token(user.id, user.email or email, user.name)
        return user, token

    def login(self, email: str, password: str) -> Tuple[User, str]:
        """
        Check credentials and return the user with a session token

        Unknown email and wrong password give the same error.
        """
        email = self._validate_email(email)
        if not password:
            raise ValidationError("password_required")

        try:
            row = self.repository.find_by_email_with_hash(email)
        except Exception as e:
            logger.error(f"Error looking up profile {email}: {e}")
            raise ServiceUnavailableError("db_unavailable") from e

        if row is None:
            raise AuthError("invalid_credentials")
        if not row.get('password_hash'):
            raise AuthError("legacy_account")
        if not pwd_context.verify(password, row['password_hash']):
            logger.info(f"Failed login for {email}")
            raise AuthError("invalid_credentials")

        user = User(
            id=str(row['id']),
            email=row.get('email'),
            name=row.get('name'),
            phone_number=row.get('phone_number'),
        )
        token = create_access_token(user.id, user.email or email, user.name)
        return user, token

    def get_profile(self, user_id: str) -> User:
        try:
            user = self.repository.find_by_id(user_id)
        except Exception as e:
            logger.error(f"Error fetching profile {user_id}: {e}")
            raise ServiceUnavailableError("db_unavailable") from e
        if user is None:
            raise NotFoundError("profile_not_found")
        return user

    def update_profile(self, user_id: str, update: ProfileUpdate) -> User:
        """Update name and/or phone number; unset fields are left alone"""
        changes = update.model_dump(exclude_unset=True, exclude_none=True)
        if 'name' in changes:
            changes['name'] = changes['name'].strip()
            if len(changes['name']) < MIN_NAME_LENGTH:
                raise ValidationError("name_too_short")
        if not changes:
            return self.get_profile(user_id)

        try:
            user = self.repository.update(user_id, changes)
        except Exception as e:
            logger.error(f"Error updating profile {user_id}: {e}")
            raise ServiceUnavailableError("profile_update_failed") from e
        if user is None:
            raise NotFoundError("profile_not_found")
        return user


_service_instance: Optional[AuthService] = None


def get_auth_service() -> AuthService:
    global _service_instance
    if _service_instance is None:
        _service_instance = AuthService()
    return _service_instance
