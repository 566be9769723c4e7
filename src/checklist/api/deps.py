"""Request-scoped dependencies shared by the route modules."""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import Depends, Header, HTTPException, Request, status

from ..config import settings
from ..data.repository import ProfileRepository, VisitRepository, get_profile_repository, get_visit_repository
from ..errors import ChecklistError
from ..models.domain import UserProfile
from ..persistence.preferences import PreferenceStore, validate_owner
from ..services.auth import AuthService
from ..services.geocoding import ReverseGeocoder
from ..services.notifications import NotificationCenter
from ..services.profiles import ProfileService
from ..services.users import UserAdminService
from ..services.visits import VisitService
from .errors import to_http_exception

logger = logging.getLogger(__name__)


def get_visit_repo() -> VisitRepository:
    return get_visit_repository()


def get_profile_repo() -> ProfileRepository:
    return get_profile_repository()


def get_auth_service() -> AuthService:
    return AuthService()


def get_geocoder() -> ReverseGeocoder:
    return ReverseGeocoder()


def get_preference_store() -> PreferenceStore:
    return PreferenceStore()


def get_notification_center(request: Request) -> NotificationCenter:
    return request.app.state.notifications


def get_visit_service(
    visits: VisitRepository = Depends(get_visit_repo),
    profiles: ProfileRepository = Depends(get_profile_repo),
    notifications: NotificationCenter = Depends(get_notification_center),
) -> VisitService:
    return VisitService(visits, profiles, notifications)


def get_user_admin_service(
    profiles: ProfileRepository = Depends(get_profile_repo),
    auth: AuthService = Depends(get_auth_service),
) -> UserAdminService:
    return UserAdminService(profiles, auth)


def get_profile_service(profiles: ProfileRepository = Depends(get_profile_repo)) -> ProfileService:
    return ProfileService(profiles)


def bearer_token(authorization: Optional[str] = Header(default=None)) -> Optional[str]:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Expected a Bearer token")
    return token.strip()


def get_current_profile(
    token: Optional[str] = Depends(bearer_token),
    x_user_id: Optional[str] = Header(default=None),
    profiles: ProfileRepository = Depends(get_profile_repo),
    auth: AuthService = Depends(get_auth_service),
) -> Optional[UserProfile]:
    """Resolve who is calling.

    The local store has no authentication: ``X-User-Id`` picks the acting
    user and, without it, the caller is the unscoped local operator (``None``).
    """
    try:
        if settings.storage_backend == "sqlite":
            if not x_user_id:
                return None
            user_id = x_user_id
        else:
            if not token:
                raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
            user_id = auth.user_id_for_token(token)
        profile = profiles.get_profile(user_id)
    except ChecklistError as exc:
        raise to_http_exception(exc) from exc

    if profile is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Profile not found for this session")
    if not profile.active:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="User is inactive")
    return profile


def require_profile(profile: Optional[UserProfile] = Depends(get_current_profile)) -> UserProfile:
    if profile is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="This operation needs a signed-in user (send X-User-Id on the local store)",
        )
    return profile


def require_device_id(x_device_id: Optional[str] = Header(default=None)) -> str:
    if not x_device_id or not x_device_id.strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="X-Device-Id header is required")
    try:
        return validate_owner(x_device_id.strip())
    except ChecklistError as exc:
        raise to_http_exception(exc) from exc
