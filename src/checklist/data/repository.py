"""Repository interfaces and the factory that picks the configured backend."""

from __future__ import annotations

from functools import lru_cache
from typing import Any, Optional, Protocol

from ..config import settings
from ..models.domain import NewVisit, UserProfile, Visit


class VisitRepository(Protocol):
    # True when storage pushes its own insert events (no need to publish locally).
    has_change_feed: bool

    def list_visits(
        self,
        *,
        user_id: Optional[str] = None,
        since: Optional[str] = None,
        until: Optional[str] = None,
        descending: bool = True,
    ) -> list[Visit]: ...

    def get_visit(self, visit_id: str) -> Optional[Visit]: ...

    def create_visit(self, visit: NewVisit) -> Visit: ...

    def count_visits(self, *, user_id: str, since: str, until: str) -> int: ...


class ProfileRepository(Protocol):
    def list_profiles(self) -> list[UserProfile]: ...

    def get_profile(self, user_id: str) -> Optional[UserProfile]: ...

    def update_profile(self, user_id: str, changes: dict[str, Any]) -> UserProfile: ...

    def delete_profile(self, user_id: str) -> None: ...


@lru_cache(maxsize=1)
def get_visit_repository() -> VisitRepository:
    if settings.storage_backend == "sqlite":
        from .local_repository import LocalVisitRepository

        return LocalVisitRepository()
    from .visits_repository import SupabaseVisitRepository

    return SupabaseVisitRepository()


@lru_cache(maxsize=1)
def get_profile_repository() -> ProfileRepository:
    if settings.storage_backend == "sqlite":
        from .local_repository import LocalProfileRepository

        return LocalProfileRepository()
    from .profiles_repository import SupabaseProfileRepository

    return SupabaseProfileRepository()
