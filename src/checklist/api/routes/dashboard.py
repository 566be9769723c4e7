"""Dashboard endpoints: BI stats and the home summary."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, status

from ...errors import ChecklistError
from ...models.domain import UserProfile
from ...schemas.dashboard import DashboardStatsResponse
from ...schemas.visits import HomeSummaryResponse, VisitModel
from ...services.visits import VisitService
from ..deps import get_current_profile, get_visit_service
from ..errors import to_http_exception

router = APIRouter(tags=["dashboard"])


@router.get("/stats", response_model=DashboardStatsResponse, status_code=status.HTTP_200_OK)
def get_dashboard_stats(
    profile: Optional[UserProfile] = Depends(get_current_profile),
    service: VisitService = Depends(get_visit_service),
) -> DashboardStatsResponse:
    try:
        summary = service.dashboard_summary(profile)
    except ChecklistError as exc:
        raise to_http_exception(exc) from exc
    return DashboardStatsResponse(**summary)


@router.get("/home", response_model=HomeSummaryResponse, status_code=status.HTTP_200_OK)
def get_home_summary(
    profile: Optional[UserProfile] = Depends(get_current_profile),
    service: VisitService = Depends(get_visit_service),
) -> HomeSummaryResponse:
    try:
        summary = service.home_summary(profile)
    except ChecklistError as exc:
        raise to_http_exception(exc) from exc
    return HomeSummaryResponse(
        today=summary["today"],
        month=summary["month"],
        pending=summary["pending"],
        recent=[VisitModel.from_domain(visit) for visit in summary["recent"]],
    )
