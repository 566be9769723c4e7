"""Visit records stored in the managed backend's ``visitas`` table."""

from __future__ import annotations

import logging
from typing import Optional

from supabase import Client

from ..config import settings
from ..db.supabase import get_supabase_client
from ..errors import BackendUnavailableError
from ..models.domain import NewVisit, Visit
from .rows import visit_from_row, visit_to_row

logger = logging.getLogger(__name__)


class SupabaseVisitRepository:
    has_change_feed = True

    def __init__(self, client: Client | None = None, table: str | None = None) -> None:
        self._client = client
        self.table = table or settings.visits_table

    @property
    def client(self) -> Client:
        client = self._client or get_supabase_client()
        if client is None:
            raise BackendUnavailableError(
                "Supabase not configured. Set CHECKLIST_SUPABASE_URL and CHECKLIST_SUPABASE_KEY environment variables."
            )
        return client

    def list_visits(
        self,
        *,
        user_id: Optional[str] = None,
        since: Optional[str] = None,
        until: Optional[str] = None,
        descending: bool = True,
    ) -> list[Visit]:
        query = self.client.table(self.table).select("*")
        if user_id:
            query = query.eq("vendedor_id", user_id)
        if since:
            query = query.gte("data_visita", since)
        if until:
            query = query.lte("data_visita", until)
        try:
            response = query.order("data_visita", desc=descending).execute()
        except Exception as exc:
            logger.error(f"Error fetching visits: {exc}")
            raise BackendUnavailableError(f"Failed to fetch visits: {exc}") from exc
        return [visit_from_row(row) for row in (response.data or [])]

    def get_visit(self, visit_id: str) -> Optional[Visit]:
        try:
            response = self.client.table(self.table).select("*").eq("id", visit_id).limit(1).execute()
        except Exception as exc:
            logger.error(f"Error fetching visit {visit_id}: {exc}")
            raise BackendUnavailableError(f"Failed to fetch visit: {exc}") from exc
        rows = response.data or []
        return visit_from_row(rows[0]) if rows else None

    def create_visit(self, visit: NewVisit) -> Visit:
        payload = visit_to_row(visit)
        try:
            response = self.client.table(self.table).insert([payload]).execute()
        except Exception as exc:
            logger.error(f"Error saving visit: {exc}")
            raise BackendUnavailableError(f"Failed to save visit: {exc}") from exc
        rows = response.data or [payload]
        return visit_from_row(rows[0])

    def count_visits(self, *, user_id: str, since: str, until: str) -> int:
        try:
            response = (
                self.client.table(self.table)
                .select("id", count="exact")
                .eq("vendedor_id", user_id)
                .gte("data_visita", since)
                .lte("data_visita", until)
                .execute()
            )
        except Exception as exc:
            logger.error(f"Error counting visits for {user_id}: {exc}")
            raise BackendUnavailableError(f"Failed to count visits: {exc}") from exc
        return response.count or 0
