"""Supabase clients for the Python backend."""

import logging
from functools import lru_cache

from supabase import AsyncClient, Client, ClientOptions, acreate_client, create_client

from ..config import settings

logger = logging.getLogger(__name__)


@lru_cache()
def get_supabase_client() -> Client | None:
    """Get cached Supabase client instance.

    Returns:
        Supabase Client instance if configured, None otherwise.
        Note: This does not test the connection - actual queries may fail with network errors.
    """
    if not settings.supabase_url or not settings.supabase_key:
        logger.warning("Supabase credentials not configured (missing URL or key)")
        return None

    try:
        return create_client(settings.supabase_url, settings.supabase_key)
    except Exception as e:
        logger.error(f"Failed to create Supabase client: {e}")
        return None


def create_isolated_client() -> Client | None:
    """Create a throwaway client that never persists or refreshes a session.

    Used for signing in and inviting users: an end user's session must not
    replace the service session held by the cached client.
    """
    if not settings.supabase_url or not settings.supabase_key:
        return None
    return create_client(
        settings.supabase_url,
        settings.supabase_key,
        options=ClientOptions(persist_session=False, auto_refresh_token=False),
    )


async def create_realtime_client() -> AsyncClient | None:
    """Async client for the change feed; the sync client has no realtime support."""
    if not settings.supabase_url or not settings.supabase_key:
        return None
    return await acreate_client(settings.supabase_url, settings.supabase_key)


# Example usage patterns:
#
# from .db.supabase import get_supabase_client
#
# # Visits of one salesperson, newest first
# result = get_supabase_client().table('visitas') \
#     .select('*') \
#     .eq('vendedor_id', user_id) \
#     .order('data_visita', desc=True) \
#     .execute()
#
# # Deactivate a profile
# result = get_supabase_client().table('profiles') \
#     .update({'active': False}) \
#     .eq('id', user_id) \
#     .execute()
