"""
Database connection management.

Provides the cached Supabase client used as the default mapping storage.
"""

from supabase import create_client, Client
from functools import lru_cache
import structlog

from config.settings import settings
from exceptions import PersistenceError

logger = structlog.get_logger(__name__)


@lru_cache()
def get_supabase_client() -> Client:
    """
    Get cached Supabase client instance.

    Uses lru_cache to ensure only one client is created.
    Call get_supabase_client.cache_clear() to reconnect.

    Returns:
        Client: Supabase client

    Raises:
        PersistenceError: If the client cannot be created
    """
    try:
        logger.info(
            "connecting_to_supabase",
            url=settings.supabase_url[:30] + "..."  # Log partial URL only
        )

        client = create_client(
            settings.supabase_url,
            settings.supabase_key
        )

        logger.info(
            "supabase_connected",
            status="success"
        )

        return client

    except Exception as e:
        logger.error(
            "supabase_connection_failed",
            error=str(e),
            error_type=type(e).__name__
        )
        raise PersistenceError("connect", str(e)) from e


# ===================
# HELPER FUNCTIONS
# ===================

def check_connection() -> dict:
    """
    Check database connection health.

    Returns:
        dict: Connection status with active mapping count
    """
    try:
        client = get_supabase_client()

        active = (
            client.table(settings.mappings_table)
            .select("id", count="exact")
            .eq("is_deleted", False)
            .execute()
        )

        return {
            "status": "healthy",
            "active_mappings": active.count
        }

    except Exception as e:
        return {
            "status": "unhealthy",
            "error": str(e)
        }

