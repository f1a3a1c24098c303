"""
Authentication API endpoints
- Register / login with email and password (returns a bearer token)
- Current profile read and update
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, status

from wankas.core.auth import TokenUser, get_current_user
from wankas.core.errors import WankasError, to_http_exception
from wankas.core.i18n import get_locale
from wankas.domain.user import RegisterRequest, LoginRequest, ProfileUpdate
from wankas.services.auth_service import get_auth_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/auth", tags=["Authentication"])


@router.post("/register", status_code=status.HTTP_201_CREATED)
def register(body: RegisterRequest, locale: str = Depends(get_locale)):
    """Create an account and sign in"""
    try:
        user, token = get_auth_service().register(body.name, body.email, body.password)
        return {
            "status": "success",
            "data": {
                "user": user.model_dump(),
                "access_token": token,
                "token_type": "bearer"
            }
        }

    except WankasError as e:
        raise to_http_exception(e, locale)
    except Exception as e:
        logger.error(f"Error registering user: {e}")
        raise HTTPException(status_code=500, detail=f"Error registering user: {str(e)}")


@router.post("/login")
def login(body: LoginRequest, locale: str = Depends(get_locale)):
    """Sign in with email and password"""
    try:
        user, token = get_auth_service().login(body.email, body.password)
        return {
            "status": "success",
            "data": {
                "user": user.model_dump(),
                "access_token": token,
                "token_type": "bearer"
            }
        }

    except WankasError as e:
        raise to_http_exception(e, locale)
    except Exception as e:
        logger.error(f"Error logging in: {e}")
        raise HTTPException(status_code=500, detail=f"Error logging in: {str(e)}")


@router.get("/me")
def get_me(
    current_user: TokenUser = Depends(get_current_user),
    locale: str = Depends(get_locale)
):
    """Profile of the signed-in user"""
    try:
        user = get_auth_service().get_profile(current_user.id)
        return {"status": "success", "data": user.model_dump()}

    except WankasError as e:
        raise to_http_exception(e, locale)
    except Exception as e:
        logger.error(f"Error fetching profile {current_user.id}: {e}")
        raise HTTPException(status_code=500, detail=f"Error fetching profile: {str(e)}")


@router.patch("/me")
def update_me(
    body: ProfileUpdate,
    current_user: TokenUser = Depends(get_current_user),
    locale: str = Depends(get_locale)
):
    """Update name and/or phone number"""
    try:
        user = get_auth_service().update_profile(current_user.id, body)
        return {"status": "success", "data": user.model_dump()}

    except WankasError as e:
        raise to_http_exception(e, locale)
    except Exception as e:
        logger.error(f"Error updating profile {current_user.id}: {e}")
        raise HTTPException(status_code=500, detail=f"Error updating profile: {str(e)}")
