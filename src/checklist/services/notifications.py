"""In-memory new-visit notifications for managers and administrators."""

from __future__ import annotations

import logging
import secrets
import string
import threading
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Mapping, Optional

from ..config import settings
from ..db.supabase import create_realtime_client
from ..errors import NotFoundError
from ..models.domain import Notification

logger = logging.getLogger(__name__)

_ID_ALPHABET = string.ascii_lowercase + string.digits
FEED_CHANNEL = "new-visits-notifs"


def _notification_id() -> str:
    return "".join(secrets.choice(_ID_ALPHABET) for _ in range(9))


class NotificationCenter:
    """Per-user inboxes, newest first. Nothing survives a restart."""

    def __init__(self) -> None:
        self._inboxes: dict[str, list[Notification]] = {}
        self._lock = threading.Lock()

    def subscribe(self, user_id: str) -> None:
        with self._lock:
            self._inboxes.setdefault(user_id, [])

    def publish_visit(self, salesperson: str, client_name: str) -> Notification:
        notification = Notification(
            id=_notification_id(),
            message=f"Nova visita: {salesperson} em {client_name}",
            timestamp=datetime.now(timezone.utc).isoformat(),
        )
        with self._lock:
            for inbox in self._inboxes.values():
                inbox.insert(0, notification)
            recipients = len(self._inboxes)
        logger.debug(f"Delivered notification {notification.id} to {recipients} inbox(es)")
        return notification

    def publish_row(self, row: Mapping[str, Any]) -> Notification:
        """Notify from a raw ``visitas`` row as delivered by the change feed."""
        return self.publish_visit(row.get("vendedor_nome") or "", row.get("cliente_nome") or "")

    def inbox(self, user_id: str) -> list[Notification]:
        with self._lock:
            return list(self._inboxes.get(user_id, []))

    def unread_count(self, user_id: str) -> int:
        return sum(1 for item in self.inbox(user_id) if not item.read)

    def mark_read(self, user_id: str, notification_id: str) -> Notification:
        with self._lock:
            for index, item in enumerate(self._inboxes.get(user_id, [])):
                if item.id == notification_id:
                    # Inboxes share instances, so copy before flipping the flag.
                    updated = replace(item, read=True)
                    self._inboxes[user_id][index] = updated
                    return updated
        raise NotFoundError(f"Notification '{notification_id}' not found")

    def dismiss(self, user_id: str, notification_id: str) -> None:
        with self._lock:
            inbox = self._inboxes.get(user_id, [])
            remaining = [item for item in inbox if item.id != notification_id]
            if len(remaining) == len(inbox):
                raise NotFoundError(f"Notification '{notification_id}' not found")
            self._inboxes[user_id] = remaining

    def clear(self, user_id: str) -> None:
        with self._lock:
            if user_id in self._inboxes:
                self._inboxes[user_id] = []


def _extract_record(payload: Mapping[str, Any]) -> Optional[Mapping[str, Any]]:
    for candidate in (payload.get("new"), payload.get("record"), (payload.get("data") or {}).get("record")):
        if isinstance(candidate, Mapping):
            return candidate
    return None


class VisitInsertFeed:
    """Subscription to INSERT events on the visits table.

    Opened when the application starts and closed when it shuts down.
    """

    def __init__(
        self,
        center: NotificationCenter,
        table: str | None = None,
        client_factory: Callable[[], Awaitable[Any]] = create_realtime_client,
    ) -> None:
        self.center = center
        self.table = table or settings.visits_table
        self._client_factory = client_factory
        self._client: Any = None
        self._channel: Any = None

    @property
    def active(self) -> bool:
        return self._channel is not None

    def handle_insert(self, payload: Mapping[str, Any]) -> Optional[Notification]:
        record = _extract_record(payload)
        if record is None:
            logger.warning(f"Ignoring change-feed payload without a record: {sorted(payload)}")
            return None
        return self.center.publish_row(record)

    async def start(self) -> None:
        client = await self._client_factory()
        if client is None:
            logger.warning("Supabase not configured - new visit notifications disabled")
            return
        self._client = client
        channel = client.channel(FEED_CHANNEL)
        channel.on_postgres_changes("INSERT", schema="public", table=self.table, callback=self.handle_insert)
        await channel.subscribe()
        self._channel = channel
        logger.info(f"Subscribed to inserts on '{self.table}'")

    async def stop(self) -> None:
        if self._client is None or self._channel is None:
            return
        await self._client.remove_channel(self._channel)
        self._channel = None
        logger.info(f"Unsubscribed from inserts on '{self.table}'")
