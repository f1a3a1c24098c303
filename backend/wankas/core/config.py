"""
Configuración centralizada de la aplicación
"""
import json
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Configuración de la aplicación"""

    # API Settings
    API_TITLE: str = "Wanka's API"
    API_VERSION: str = "1.0.0"
    API_DESCRIPTION: str = "API de Wanka's Compras Inteligentes: catálogo, despensa con IA y pedidos para recoger"
    API_DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Database
    # DATABASE_URL is only used by the /health check; data access goes through Supabase
    DATABASE_URL: Optional[str] = None
    SUPABASE_URL: str = ""
    SUPABASE_SERVICE_ROLE_KEY: str = ""

    # CORS - Can be string (comma-separated) or JSON array
    # Example: "http://localhost:3000,https://yourdomain.com" or '["http://localhost:3000"]'
    ALLOWED_ORIGINS: Optional[str] = "http://localhost:3000,http://localhost:9002"

    # Auth
    AUTH_SECRET: str = ""
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7

    # AI providers
    ANTHROPIC_API_KEY: str = ""
    CLAUDE_MODEL: str = "claude-haiku-4-5-20251001"
    GEMINI_API_KEY: str = ""
    RECIPE_IMAGE_MODEL: str = "gemini-2.0-flash-preview-image-generation"

    # Store
    STORE_TIMEZONE: str = "America/Lima"
    DEFAULT_LOCALE: str = "es"
    STORE_NAME: str = "Wanka's"
    STORE_RUC: str = "20601234567"
    STORE_PHONE: str = "+51 964 123 456"
    STORE_EMAIL: str = "contacto@wankas.pe"

    # Pantry uploads
    MAX_UPLOAD_FILES: int = 5
    MAX_UPLOAD_FILE_MB: int = 5

    # Rate limits (requests per minute)
    RATE_LIMIT_AUTHENTICATED: int = 600
    RATE_LIMIT_ANONYMOUS: int = 120

    # Serve the bundled catalog when Supabase cannot be queried
    CATALOG_FALLBACK_ENABLED: bool = True

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

    def get_allowed_origins(self) -> List[str]:
        """Parse ALLOWED_ORIGINS string into list"""
        if not self.ALLOWED_ORIGINS:
            return ["http://localhost:3000"]

        # Try JSON parse first (for array format)
        try:
            origins = json.loads(self.ALLOWED_ORIGINS)
            if isinstance(origins, list):
                return origins
        except (json.JSONDecodeError, ValueError):
            pass

        # Fall back to comma-separated string
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(",")]


settings = Settings()
