"""Notification API schemas."""

from __future__ import annotations

from typing import List

from pydantic import BaseModel

from ..models.domain import Notification


class NotificationModel(BaseModel):
    id: str
    message: str
    timestamp: str
    read: bool
    type: str

    @classmethod
    def from_domain(cls, notification: Notification) -> "NotificationModel":
        return cls(
            id=notification.id,
            message=notification.message,
            timestamp=notification.timestamp,
            read=notification.read,
            type=notification.type,
        )


class NotificationListResponse(BaseModel):
    items: List[NotificationModel]
    unread: int
