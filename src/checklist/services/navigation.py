"""Which views each role may open."""

from __future__ import annotations

ALL_VIEWS: tuple[str, ...] = ("home", "bi", "visits", "users", "profile")
SALES_VIEWS: frozenset[str] = frozenset({"home", "visits", "profile"})


def views_for_role(role: str | None) -> list[str]:
    if role == "VENDEDOR":
        return [view for view in ALL_VIEWS if view in SALES_VIEWS]
    return list(ALL_VIEWS)
