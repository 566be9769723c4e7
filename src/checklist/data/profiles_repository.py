"""User profiles stored in the managed backend's ``profiles`` table."""

from __future__ import annotations

import logging
from typing import Any, Optional

from supabase import Client

from ..config import settings
from ..db.supabase import get_supabase_client
from ..errors import BackendUnavailableError, NotFoundError
from ..models.domain import UserProfile
from .rows import profile_from_row

logger = logging.getLogger(__name__)

# Domain attribute -> profiles column.
_COLUMN_NAMES = {
    "name": "full_name",
    "role": "role",
    "active": "active",
    "phone": "phone",
    "avatar_url": "avatar_url",
}


def profile_changes_to_row(changes: dict[str, Any]) -> dict[str, Any]:
    row: dict[str, Any] = {}
    for attribute, value in changes.items():
        column = _COLUMN_NAMES.get(attribute)
        if column is None:
            raise ValueError(f"Profile attribute '{attribute}' cannot be updated")
        if attribute == "role" and isinstance(value, str):
            value = value.lower()
        row[column] = value
    return row


class SupabaseProfileRepository:
    def __init__(self, client: Client | None = None, table: str | None = None) -> None:
        self._client = client
        self.table = table or settings.profiles_table

    @property
    def client(self) -> Client:
        client = self._client or get_supabase_client()
        if client is None:
            raise BackendUnavailableError(
                "Supabase not configured. Set CHECKLIST_SUPABASE_URL and CHECKLIST_SUPABASE_KEY environment variables."
            )
        return client

    def list_profiles(self) -> list[UserProfile]:
        try:
            response = self.client.table(self.table).select("*").order("full_name").execute()
        except Exception as exc:
            logger.error(f"Error fetching users: {exc}")
            raise BackendUnavailableError(f"Failed to fetch users: {exc}") from exc
        return [profile_from_row(row) for row in (response.data or [])]

    def get_profile(self, user_id: str) -> Optional[UserProfile]:
        try:
            response = self.client.table(self.table).select("*").eq("id", user_id).limit(1).execute()
        except Exception as exc:
            logger.error(f"Error fetching profile {user_id}: {exc}")
            raise BackendUnavailableError(f"Failed to fetch profile: {exc}") from exc
        rows = response.data or []
        return profile_from_row(rows[0]) if rows else None

    def update_profile(self, user_id: str, changes: dict[str, Any]) -> UserProfile:
        payload = profile_changes_to_row(changes)
        try:
            response = self.client.table(self.table).update(payload).eq("id", user_id).execute()
        except Exception as exc:
            logger.error(f"Error updating profile {user_id}: {exc}")
            raise BackendUnavailableError(f"Failed to update profile: {exc}") from exc
        rows = response.data or []
        if not rows:
            raise NotFoundError(f"User '{user_id}' not found")
        return profile_from_row(rows[0])

    def delete_profile(self, user_id: str) -> None:
        # Only the profile row goes; removing the auth user needs the admin API.
        try:
            self.client.table(self.table).delete().eq("id", user_id).execute()
        except Exception as exc:
            logger.error(f"Error deleting profile {user_id}: {exc}")
            raise BackendUnavailableError(f"Failed to delete profile: {exc}") from exc
