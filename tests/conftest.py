from __future__ import annotations

import itertools
from typing import Any, Optional

import pytest

from checklist.errors import NotFoundError
from checklist.models.domain import NewVisit, UserProfile, Visit


def make_visit(
    vid: str,
    user_name: str = "Ana",
    client_name: str = "Posto Central",
    day: str = "2025-03-10",
    region: Optional[str] = "Belo Horizonte-MG",
    user_id: str = "u1",
    result: str = "ALCANCADO",
    details: Optional[dict[str, Any]] = None,
) -> Visit:
    return Visit(
        id=vid,
        user_id=user_id,
        user_name=user_name,
        client_name=client_name,
        client_type="POSTO",
        date=day,
        type="PROSPECCAO",
        result=result,
        region=region,
        details=details or {},
    )


class InMemoryVisitRepository:
    def __init__(self, visits: list[Visit] | None = None, has_change_feed: bool = False) -> None:
        self.visits = list(visits or [])
        self.has_change_feed = has_change_feed
        self.queries: list[dict[str, Any]] = []
        self._ids = itertools.count(100)

    def list_visits(self, *, user_id=None, since=None, until=None, descending=True) -> list[Visit]:
        self.queries.append({"user_id": user_id, "since": since, "until": until, "descending": descending})
        rows = [
            visit
            for visit in self.visits
            if (user_id is None or visit.user_id == user_id)
            and (since is None or visit.date >= since)
            and (until is None or visit.date <= until)
        ]
        return sorted(rows, key=lambda visit: visit.date, reverse=descending)

    def get_visit(self, visit_id: str) -> Optional[Visit]:
        return next((visit for visit in self.visits if visit.id == visit_id), None)

    def create_visit(self, visit: NewVisit) -> Visit:
        created = Visit(
            id=str(next(self._ids)),
            user_id=visit.user_id,
            user_name=visit.user_name,
            client_name=visit.client_name,
            client_type=visit.client_type,
            date=visit.date,
            type=visit.type,
            result=visit.result,
            summary=visit.summary,
            region=visit.region,
            cnpj=visit.cnpj,
            details=dict(visit.details),
            latitude=visit.latitude,
            longitude=visit.longitude,
        )
        self.visits.append(created)
        return created

    def count_visits(self, *, user_id: str, since: str, until: str) -> int:
        return len(self.list_visits(user_id=user_id, since=since, until=until))


class InMemoryProfileRepository:
    def __init__(self, profiles: list[UserProfile] | None = None) -> None:
        self.profiles = {profile.id: profile for profile in profiles or []}

    def list_profiles(self) -> list[UserProfile]:
        return sorted(self.profiles.values(), key=lambda profile: profile.name)

    def get_profile(self, user_id: str) -> Optional[UserProfile]:
        return self.profiles.get(user_id)

    def update_profile(self, user_id: str, changes: dict[str, Any]) -> UserProfile:
        profile = self.profiles.get(user_id)
        if profile is None:
            raise NotFoundError(f"User '{user_id}' not found")
        for attribute, value in changes.items():
            setattr(profile, attribute, value)
        return profile

    def delete_profile(self, user_id: str) -> None:
        self.profiles.pop(user_id, None)


@pytest.fixture
def admin() -> UserProfile:
    return UserProfile(id="a1", name="João Silva", email="joao@example.com", role="ADMIN")


@pytest.fixture
def manager() -> UserProfile:
    return UserProfile(id="g1", name="Ana Silva", email="ana@example.com", role="GESTOR")


@pytest.fixture
def salesperson() -> UserProfile:
    return UserProfile(id="u1", name="Ricardo Mendes", email="ricardo@example.com", role="VENDEDOR")
