"""Visit listing, filtering and creation."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, Iterable, Optional

from ..config import settings
from ..data.repository import ProfileRepository, VisitRepository
from ..errors import NotFoundError, PermissionDeniedError, ValidationError
from ..models.domain import NewVisit, UserProfile, Visit
from ..schemas.visits import VisitCreateRequest
from .dashboard import compute_dashboard_summary, compute_home_summary, window_start
from .notifications import NotificationCenter

logger = logging.getLogger(__name__)

ALL_SALESPEOPLE = "Todos"
ALL_CITIES = "Todas"

# Detail-bag keys each client category's form block collects.
DETAIL_FIELDS: dict[str, frozenset[str]] = {
    "POSTO": frozenset(
        {"flag", "status", "reason", "products", "opportunity", "est_volume", "deadline", "next_step"}
    ),
    "TRR_CONSUMIDOR": frozenset(
        {
            "has_tank",
            "tank_capacity",
            "stored_products",
            "origin",
            "supply_mode",
            "avg_consumption",
            "biz_opportunity",
            "est_volume",
            "deadline",
            "next_step",
        }
    ),
    "FROTA": frozenset({"vehicle_qty", "supply_type", "main_product", "avg_consumption", "next_step"}),
    "OUTRO": frozenset({"description", "future_fit"}),
}


@dataclass(slots=True)
class VisitFilters:
    search: str = ""
    salesperson: str = ALL_SALESPEOPLE
    city: str = ALL_CITIES
    start: Optional[date] = None
    end: Optional[date] = None


def prune_details(client_type: str, details: dict[str, Any]) -> dict[str, Any]:
    """Keep only the detail fields that belong to ``client_type``'s form block."""

    allowed = DETAIL_FIELDS.get(client_type, frozenset())
    dropped = sorted(key for key in details if key not in allowed)
    if dropped:
        logger.debug(f"Dropping detail fields {dropped} not used by client type {client_type}")
    return {key: value for key, value in details.items() if key in allowed}


def scope_user_id(profile: Optional[UserProfile]) -> Optional[str]:
    """Sales representatives only ever see their own visits."""

    if profile is not None and profile.role == "VENDEDOR":
        return profile.id
    return None


def _parse_day(value: str) -> Optional[date]:
    try:
        return date.fromisoformat(value[:10])
    except (TypeError, ValueError):
        return None


def filter_visits(visits: Iterable[Visit], filters: VisitFilters) -> list[Visit]:
    term = filters.search.strip().lower()
    results: list[Visit] = []
    for visit in visits:
        if term and not any(
            term in (value or "").lower() for value in (visit.client_name, visit.user_name, visit.region)
        ):
            continue
        if filters.salesperson != ALL_SALESPEOPLE and visit.user_name != filters.salesperson:
            continue
        if filters.city != ALL_CITIES and visit.region != filters.city:
            continue
        if filters.start or filters.end:
            day = _parse_day(visit.date)
            if day is None:
                continue
            if filters.start and day < filters.start:
                continue
            if filters.end and day > filters.end:
                continue
        results.append(visit)
    return results


def visit_filter_options(visits: Iterable[Visit]) -> dict[str, list[str]]:
    salespeople = list(dict.fromkeys(visit.user_name for visit in visits if visit.user_name))
    cities = list(dict.fromkeys(visit.region for visit in visits if visit.region))
    return {
        "salespeople": [ALL_SALESPEOPLE, *salespeople],
        "cities": [ALL_CITIES, *cities],
    }


def month_bounds(month: str) -> tuple[str, str]:
    """``YYYY-MM`` -> string bounds compared against ISO visit dates."""

    try:
        year, month_number = (int(part) for part in month.split("-", 1))
        date(year, month_number, 1)
    except ValueError as exc:
        raise ValidationError(f"Month must look like YYYY-MM, got '{month}'") from exc
    prefix = f"{year:04d}-{month_number:02d}"
    return f"{prefix}-01", f"{prefix}-31"


class VisitService:
    def __init__(
        self,
        visits: VisitRepository,
        profiles: ProfileRepository,
        notifications: NotificationCenter | None = None,
    ) -> None:
        self.visits = visits
        self.profiles = profiles
        self.notifications = notifications

    def list_visits(
        self,
        profile: Optional[UserProfile],
        filters: VisitFilters | None = None,
        *,
        descending: bool = True,
    ) -> list[Visit]:
        visits = self.visits.list_visits(user_id=scope_user_id(profile), descending=descending)
        return filter_visits(visits, filters or VisitFilters())

    def filter_options(self, profile: Optional[UserProfile]) -> dict[str, list[str]]:
        return visit_filter_options(self.visits.list_visits(user_id=scope_user_id(profile)))

    def get_visit(self, profile: Optional[UserProfile], visit_id: str) -> Visit:
        visit = self.visits.get_visit(visit_id)
        if visit is None:
            raise NotFoundError(f"Visit '{visit_id}' not found")
        scoped = scope_user_id(profile)
        if scoped is not None and visit.user_id != scoped:
            raise PermissionDeniedError("Sales representatives can only open their own visits")
        return visit

    def create_visit(
        self,
        profile: Optional[UserProfile],
        request: VisitCreateRequest,
        today: Optional[date] = None,
    ) -> Visit:
        if profile is not None:
            user_id = profile.id
            user_name = profile.name or profile.email
        else:
            user_id = request.user_id or ""
            reporter = self.profiles.get_profile(user_id) if user_id else None
            user_name = reporter.name if reporter else ""

        new_visit = NewVisit(
            user_id=user_id,
            user_name=user_name,
            client_name=request.client_name.strip(),
            client_type=request.client_type,
            date=request.date or (today or date.today()).isoformat(),
            type=request.type,
            result=request.result,
            summary=request.summary,
            region=request.region,
            cnpj=request.cnpj,
            details=prune_details(request.client_type, request.details),
            latitude=request.latitude,
            longitude=request.longitude,
        )
        visit = self.visits.create_visit(new_visit)
        logger.info(f"Visit {visit.id} logged by {visit.user_name or visit.user_id} at {visit.client_name}")

        if self.notifications is not None and not self.visits.has_change_feed:
            self.notifications.publish_visit(visit.user_name, visit.client_name)
        return visit

    def dashboard_summary(self, profile: Optional[UserProfile], today: Optional[date] = None) -> dict:
        since = window_start(settings.dashboard_window_days, today)
        visits = self.visits.list_visits(user_id=scope_user_id(profile), since=since)
        return compute_dashboard_summary(visits, today=today)

    def home_summary(self, profile: Optional[UserProfile], today: Optional[date] = None) -> dict:
        visits = self.visits.list_visits(user_id=scope_user_id(profile))
        return compute_home_summary(visits, today=today)

    def monthly_interactions(self, profile: UserProfile, month: str) -> int:
        start, end = month_bounds(month)
        return self.visits.count_visits(user_id=profile.id, since=start, until=end)
