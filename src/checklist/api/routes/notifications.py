"""New-visit notification inbox for managers and administrators."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Response, status

from ...errors import ChecklistError
from ...models.domain import UserProfile
from ...schemas.notifications import NotificationListResponse, NotificationModel
from ...services.notifications import NotificationCenter
from ..deps import get_notification_center, require_profile
from ..errors import to_http_exception

router = APIRouter(prefix="/notifications", tags=["notifications"])


def _require_privileged(profile: UserProfile = Depends(require_profile)) -> UserProfile:
    if not profile.is_privileged:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Notifications are for administrators and managers")
    return profile


@router.get("", response_model=NotificationListResponse, status_code=status.HTTP_200_OK)
def list_notifications(
    profile: UserProfile = Depends(_require_privileged),
    center: NotificationCenter = Depends(get_notification_center),
) -> NotificationListResponse:
    # First poll opens the inbox; later events are delivered into it.
    center.subscribe(profile.id)
    items = center.inbox(profile.id)
    return NotificationListResponse(
        items=[NotificationModel.from_domain(item) for item in items],
        unread=center.unread_count(profile.id),
    )


@router.post("/{notification_id}/read", response_model=NotificationModel, status_code=status.HTTP_200_OK)
def mark_notification_read(
    notification_id: str,
    profile: UserProfile = Depends(_require_privileged),
    center: NotificationCenter = Depends(get_notification_center),
) -> NotificationModel:
    try:
        updated = center.mark_read(profile.id, notification_id)
    except ChecklistError as exc:
        raise to_http_exception(exc) from exc
    return NotificationModel.from_domain(updated)


@router.delete("/{notification_id}", status_code=status.HTTP_204_NO_CONTENT)
def dismiss_notification(
    notification_id: str,
    profile: UserProfile = Depends(_require_privileged),
    center: NotificationCenter = Depends(get_notification_center),
) -> Response:
    try:
        center.dismiss(profile.id, notification_id)
    except ChecklistError as exc:
        raise to_http_exception(exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
def clear_notifications(
    profile: UserProfile = Depends(_require_privileged),
    center: NotificationCenter = Depends(get_notification_center),
) -> Response:
    center.clear(profile.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
