"""Dashboard service helpers."""

from .aggregator import (
    build_daily_histogram,
    compute_dashboard_summary,
    compute_home_summary,
    has_opportunity,
    window_start,
)

__all__ = [
    "compute_dashboard_summary",
    "compute_home_summary",
    "build_daily_histogram",
    "has_opportunity",
    "window_start",
]
