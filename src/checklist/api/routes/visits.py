"""Visit endpoints."""

from __future__ import annotations

from datetime import date
from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, Query, status

from ...errors import ChecklistError
from ...models.domain import UserProfile
from ...schemas.visits import VisitCreatedResponse, VisitCreateRequest, VisitModel, VisitOptionsResponse
from ...services.visits import ALL_CITIES, ALL_SALESPEOPLE, VisitFilters, VisitService
from ..deps import get_current_profile, get_visit_service
from ..errors import to_http_exception

router = APIRouter(prefix="/visits", tags=["visits"])


@router.get("", response_model=List[VisitModel], status_code=status.HTTP_200_OK)
def list_visits(
    search: str = Query(default="", description="Matches client, salesperson or city (case-insensitive)"),
    salesperson: str = Query(default=ALL_SALESPEOPLE, description="Salesperson name, or 'Todos'"),
    city: str = Query(default=ALL_CITIES, description="City/region label, or 'Todas'"),
    start: Optional[date] = Query(default=None, description="Inclusive lower date bound"),
    end: Optional[date] = Query(default=None, description="Inclusive upper date bound"),
    order: Literal["desc", "asc"] = Query(default="desc", description="Sort by visit date"),
    profile: Optional[UserProfile] = Depends(get_current_profile),
    service: VisitService = Depends(get_visit_service),
) -> List[VisitModel]:
    filters = VisitFilters(search=search, salesperson=salesperson, city=city, start=start, end=end)
    try:
        visits = service.list_visits(profile, filters, descending=order == "desc")
    except ChecklistError as exc:
        raise to_http_exception(exc) from exc
    return [VisitModel.from_domain(visit) for visit in visits]


@router.get("/options", response_model=VisitOptionsResponse, status_code=status.HTTP_200_OK)
def list_visit_filter_options(
    profile: Optional[UserProfile] = Depends(get_current_profile),
    service: VisitService = Depends(get_visit_service),
) -> VisitOptionsResponse:
    try:
        options = service.filter_options(profile)
    except ChecklistError as exc:
        raise to_http_exception(exc) from exc
    return VisitOptionsResponse(**options)


@router.get("/{visit_id}", response_model=VisitModel, status_code=status.HTTP_200_OK)
def get_visit(
    visit_id: str,
    profile: Optional[UserProfile] = Depends(get_current_profile),
    service: VisitService = Depends(get_visit_service),
) -> VisitModel:
    try:
        visit = service.get_visit(profile, visit_id)
    except ChecklistError as exc:
        raise to_http_exception(exc) from exc
    return VisitModel.from_domain(visit)


@router.post("", response_model=VisitCreatedResponse, status_code=status.HTTP_201_CREATED)
def create_visit(
    payload: VisitCreateRequest,
    profile: Optional[UserProfile] = Depends(get_current_profile),
    service: VisitService = Depends(get_visit_service),
) -> VisitCreatedResponse:
    try:
        visit = service.create_visit(profile, payload)
    except ChecklistError as exc:
        raise to_http_exception(exc) from exc
    return VisitCreatedResponse(id=visit.id, visit=VisitModel.from_domain(visit))
