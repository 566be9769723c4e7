"""User administration for managers and administrators."""

from __future__ import annotations

import logging
from typing import Any, Iterable, Optional

from ..data.repository import ProfileRepository
from ..errors import NotFoundError, PermissionDeniedError
from ..models.domain import UserProfile
from .auth import AuthService

logger = logging.getLogger(__name__)

ALL_ROLES_TAB = "Todos"


def require_privileged(profile: Optional[UserProfile]) -> None:
    # No profile means the unauthenticated local operator.
    if profile is not None and not profile.is_privileged:
        raise PermissionDeniedError("Only administrators and managers can manage users")


def filter_users(users: Iterable[UserProfile], search: str = "", role_tab: str = ALL_ROLES_TAB) -> list[UserProfile]:
    term = search.strip().lower()
    wanted_role = None if role_tab == ALL_ROLES_TAB else role_tab.upper()
    return [
        user
        for user in users
        if (not term or term in user.name.lower() or term in user.email.lower())
        and (wanted_role is None or user.role == wanted_role)
    ]


class UserAdminService:
    def __init__(self, profiles: ProfileRepository, auth: AuthService | None = None) -> None:
        self.profiles = profiles
        self.auth = auth or AuthService()

    def list_users(
        self,
        actor: Optional[UserProfile],
        search: str = "",
        role_tab: str = ALL_ROLES_TAB,
    ) -> list[UserProfile]:
        require_privileged(actor)
        return filter_users(self.profiles.list_profiles(), search=search, role_tab=role_tab)

    def update_user(self, actor: Optional[UserProfile], user_id: str, changes: dict[str, Any]) -> UserProfile:
        require_privileged(actor)
        updated = self.profiles.update_profile(user_id, changes)
        logger.info(f"User {user_id} updated: {sorted(changes)}")
        return updated

    def toggle_active(self, actor: Optional[UserProfile], user_id: str) -> UserProfile:
        require_privileged(actor)
        current = self.profiles.get_profile(user_id)
        if current is None:
            raise NotFoundError(f"User '{user_id}' not found")
        return self.update_user(actor, user_id, {"active": not current.active})

    def delete_user(self, actor: Optional[UserProfile], user_id: str) -> None:
        require_privileged(actor)
        if self.profiles.get_profile(user_id) is None:
            raise NotFoundError(f"User '{user_id}' not found")
        self.profiles.delete_profile(user_id)
        logger.info(f"User {user_id} deleted")

    def invite_user(self, actor: Optional[UserProfile], name: str, email: str) -> Optional[str]:
        require_privileged(actor)
        return self.auth.invite_user(name, email)
