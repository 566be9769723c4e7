"""Dashboard analytics computed from fetched visit records."""

from __future__ import annotations

from collections import Counter
from datetime import date, timedelta
from typing import Iterable, Optional, Sequence

from ...config import settings
from ...models.domain import Visit

UNKNOWN_SALESPERSON = "Desconhecido"
UNKNOWN_REGION = "Não informada"

# Detail keys that flag a sales opportunity, with the value that means "yes".
# The posto/trr keys come from an older flat form layout.
OPPORTUNITY_FLAGS: tuple[tuple[str, str], ...] = (
    ("opportunity", "sim"),
    ("biz_opportunity", "sim"),
    ("posto_oportunidade", "sim"),
    ("trr_oportunidade", "sim"),
)


def window_start(days: int, today: Optional[date] = None) -> str:
    """ISO date ``days`` before ``today``, the lower bound of the dashboard fetch."""

    reference = today or date.today()
    return (reference - timedelta(days=days)).isoformat()


def has_opportunity(visit: Visit) -> bool:
    for key, affirmative in OPPORTUNITY_FLAGS:
        value = visit.details.get(key)
        if value is None:
            value = visit.raw.get(key)
        if isinstance(value, str) and value.strip().lower() == affirmative:
            return True
    return False


def _parse_visit_day(value: str) -> Optional[date]:
    if not value:
        return None
    try:
        return date.fromisoformat(value[:10])
    except ValueError:
        return None


def _rank(counts: Counter[str], total: int, top_n: int, scale: float, value_key: str) -> list[dict]:
    # most_common keeps first-seen order among equal counts
    return [
        {
            "name": name,
            value_key: count,
            "percent": min(100.0, (count / (total or 1)) * scale),
        }
        for name, count in counts.most_common(top_n)
    ]


def build_daily_histogram(visits: Iterable[Visit], today: Optional[date] = None, days: int | None = None) -> list[dict]:
    """Visit counts for the last ``days`` days ending today, scaled to 0-100."""

    reference = today or date.today()
    span = days if days is not None else settings.dashboard_histogram_days
    buckets = [reference - timedelta(days=offset) for offset in range(span - 1, -1, -1)]
    counts: dict[date, int] = {day: 0 for day in buckets}

    for visit in visits:
        day = _parse_visit_day(visit.date)
        if day in counts:
            counts[day] += 1

    max_count = max(max(counts.values(), default=0), 1)
    return [
        {
            "date": day.isoformat(),
            "label": day.strftime("%d/%m"),
            "value": (counts[day] / max_count) * 100,
            "count": counts[day],
            "isToday": day == reference,
        }
        for day in buckets
    ]


def compute_dashboard_summary(
    visits: Sequence[Visit],
    today: Optional[date] = None,
    top_n: int | None = None,
) -> dict:
    """Reshape a window of visits into the numbers and series the BI view shows.

    Never fails on empty input: totals are zero, rankings are empty and the
    histogram still has one bucket per day. Visits whose date cannot be parsed
    count towards the totals but stay out of the histogram.
    """

    limit = top_n if top_n is not None else settings.dashboard_top_n
    total_visits = len(visits)
    unique_clients = len({visit.client_name for visit in visits})
    opportunities = sum(1 for visit in visits if has_opportunity(visit))

    salesperson_counts: Counter[str] = Counter()
    region_counts: Counter[str] = Counter()
    for visit in visits:
        salesperson_counts[visit.user_name or UNKNOWN_SALESPERSON] += 1
        region_counts[visit.region or UNKNOWN_REGION] += 1

    return {
        "totalVisits": total_visits,
        "uniqueClients": unique_clients,
        "opportunities": opportunities,
        "topAssessores": _rank(salesperson_counts, total_visits, limit, 200, "visits"),
        "topRegions": _rank(region_counts, total_visits, limit, 100, "value"),
        "visitsByPeriod": build_daily_histogram(visits, today=today),
    }


def compute_home_summary(visits: Sequence[Visit], today: Optional[date] = None, recent: int = 3) -> dict:
    """Counters and latest visits for the landing view."""

    reference = today or date.today()
    today_str = reference.isoformat()
    month_start = reference.replace(day=1).isoformat()

    latest = sorted(visits, key=lambda visit: visit.date or "", reverse=True)[:recent]
    return {
        "today": sum(1 for visit in visits if visit.date == today_str),
        "month": sum(1 for visit in visits if visit.date and visit.date >= month_start),
        "pending": sum(1 for visit in visits if visit.result == "PARCIAL"),
        "recent": latest,
    }
