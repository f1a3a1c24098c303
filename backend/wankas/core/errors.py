"""
Domain exceptions

Services raise these with a translation key; routers turn them into
HTTPException with a localized detail via to_http_exception().
"""
from fastapi import HTTPException

from wankas.core.i18n import translate


class WankasError(Exception):
    """Base error carrying a translation key and its placeholder values"""

    status_code = 500

    def __init__(self, key: str, **params):
        self.key = key
        self.params = params
        super().__init__(translate(key, "es", **params))


class NotFoundError(WankasError):
    status_code = 404


class ValidationError(WankasError):
    status_code = 400


class AuthError(WankasError):
    status_code = 401


class ConflictError(WankasError):
    status_code = 409


class ServiceUnavailableError(WankasError):
    status_code = 503


class OrderError(WankasError):
    """The order sequence failed; stock and order rows were compensated"""
    status_code = 500


class InsufficientStockError(ConflictError):
    pass


class OrderNotFoundError(NotFoundError):
    pass


class OrderNotCancellableError(ConflictError):
    pass


class UploadValidationError(ValidationError):
    pass


class PantryAIError(WankasError):
    status_code = 502


class RecipeImageError(WankasError):
    status_code = 502


def to_http_exception(error: WankasError, locale: str) -> HTTPException:
    """Build the HTTPException a router raises for a domain error"""
    return HTTPException(
        status_code=error.status_code,
        detail=translate(error.key, locale, **error.params)
    )
