"""
User / profile domain models

Request models validate the same rules the storefront forms use:
allowed e-mail providers, minimum name and password lengths.

Author: Wanka's
Date: 2025-06-04
"""
from typing import Optional

from pydantic import BaseModel, EmailStr, Field


ALLOWED_EMAIL_DOMAINS = (
    "gmail.com",
    "outlook.com",
    "hotmail.com",
    "yahoo.com",
    "icloud.com",
    "aol.com",
)

MIN_NAME_LENGTH = 2
MIN_PASSWORD_LENGTH = 6


class User(BaseModel):
    """Public profile data (never includes the password hash)"""
    id: str
    email: Optional[str] = None
    name: Optional[str] = None
    phone_number: Optional[str] = None


class RegisterRequest(BaseModel):
    name: str
    email: str
    password: str


class LoginRequest(BaseModel):
    email: str
    password: str


class ProfileUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=MIN_NAME_LENGTH, max_length=120)
    phone_number: Optional[str] = Field(None, max_length=30)


class _EmailCheck(BaseModel):
    email: EmailStr


def email_error_key(email: str) -> Optional[str]:
    """
    Validate an email address for sign-up / sign-in.

    Returns:
        None when valid, otherwise the translation key of the first problem
    """
    try:
        _EmailCheck(email=email)
    except ValueError:
        return "invalid_email"

    domain = email.rsplit("@", 1)[-1].lower()
    if domain not in ALLOWED_EMAIL_DOMAINS:
        return "email_provider_not_allowed"
    return None
