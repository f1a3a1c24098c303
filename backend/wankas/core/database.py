"""
Conexión a la base de datos (Supabase)

Este módulo centraliza las formas de acceso a la base de datos:
- Supabase client (PostgREST) para todas las tablas de la tienda
- psycopg2 directo, solo para el chequeo de salud (/health)

El cliente de Supabase se crea de forma perezosa: importar este módulo
no requiere credenciales.

Author: Wanka's
Updated: 2025-06-02
"""
import logging
import time
from typing import Optional

import psycopg2
from supabase import create_client, Client

from .config import settings

logger = logging.getLogger(__name__)

# Seconds before a psycopg2 connection attempt gives up
CONNECTION_TIMEOUT = 10


# ============================================================================
# Supabase Client
# ============================================================================

_supabase: Optional[Client] = None


def get_supabase() -> Client:
    """
    FastAPI dependency / helper para obtener cliente de Supabase

    Usage:
        @app.get("/data")
        def get_data(sb: Client = Depends(get_supabase)):
            ...

    Raises:
        RuntimeError if SUPABASE_URL or SUPABASE_SERVICE_ROLE_KEY are not configured
    """
    global _supabase
    if _supabase is None:
        if not settings.SUPABASE_URL or not settings.SUPABASE_SERVICE_ROLE_KEY:
            raise RuntimeError("SUPABASE_URL / SUPABASE_SERVICE_ROLE_KEY not configured")
        logger.info("Creating Supabase client")
        _supabase = create_client(settings.SUPABASE_URL, settings.SUPABASE_SERVICE_ROLE_KEY)
    return _supabase


# ============================================================================
# Database Connection with Retry Logic (SSL Failure Recovery)
# ============================================================================

def get_db_connection_with_retry(max_retries=3, retry_delay=1.0):
    """
    Get a psycopg2 connection with automatic retry on SSL/connection failures

    Used by the health check to measure database reachability. Retries
    failed connections up to max_retries times with exponential backoff.

    Args:
        max_retries: Maximum number of connection attempts (default: 3)
        retry_delay: Initial delay between retries in seconds (default: 1.0)

    Returns:
        psycopg2 connection object

    Raises:
        RuntimeError if DATABASE_URL is not configured
        psycopg2.OperationalError: If all retry attempts fail
    """
    database_url = settings.DATABASE_URL
    if not database_url:
        raise RuntimeError("DATABASE_URL not configured")

    last_error = None

    for attempt in range(1, max_retries + 1):
        try:
            logger.debug(f"Database connection attempt {attempt}/{max_retries}")
            conn = psycopg2.connect(database_url, connect_timeout=CONNECTION_TIMEOUT)

            cursor = conn.cursor()
            cursor.execute("SELECT 1")
            cursor.close()

            logger.debug(f"Database connection successful on attempt {attempt}")
            return conn

        except psycopg2.OperationalError as e:
            last_error = e
            error_msg = str(e)

            if "SSL connection has been closed unexpectedly" in error_msg:
                logger.warning(f"SSL connection error on attempt {attempt}/{max_retries}: {error_msg}")
            else:
                logger.warning(f"Connection error on attempt {attempt}/{max_retries}: {error_msg}")

            if attempt < max_retries:
                delay = retry_delay * (2 ** (attempt - 1))
                logger.info(f"Retrying in {delay:.2f} seconds...")
                time.sleep(delay)
            else:
                logger.error(f"All {max_retries} connection attempts failed")
                raise last_error

    raise last_error if last_error else RuntimeError("Connection failed after all retries")
