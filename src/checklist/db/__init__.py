"""Database clients and utilities."""

from .sqlite import get_db_connection, initialize_database
from .supabase import create_isolated_client, create_realtime_client, get_supabase_client

__all__ = [
    "get_supabase_client",
    "create_isolated_client",
    "create_realtime_client",
    "get_db_connection",
    "initialize_database",
]
