"""Endpoints for the signed-in user's own profile."""

from __future__ import annotations

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile, status

from ...errors import ChecklistError
from ...models.domain import UserProfile
from ...schemas.users import AvatarUploadResponse, InteractionsResponse, ProfileResponse, ProfileUpdateRequest, UserModel
from ...services.profiles import ProfileService, format_phone
from ...services.visits import VisitService
from ..deps import get_profile_service, get_visit_service, require_profile
from ..errors import to_http_exception

router = APIRouter(prefix="/profile", tags=["profile"])


def _profile_response(profile: UserProfile) -> ProfileResponse:
    return ProfileResponse(
        **UserModel.from_domain(profile).model_dump(),
        phone_display=format_phone(profile.phone or ""),
    )


@router.get("", response_model=ProfileResponse, status_code=status.HTTP_200_OK)
def get_profile(profile: UserProfile = Depends(require_profile)) -> ProfileResponse:
    return _profile_response(profile)


@router.patch("", response_model=ProfileResponse, status_code=status.HTTP_200_OK)
def update_profile(
    payload: ProfileUpdateRequest,
    profile: UserProfile = Depends(require_profile),
    service: ProfileService = Depends(get_profile_service),
) -> ProfileResponse:
    try:
        updated = service.update_profile(
            profile,
            name=payload.name,
            phone=payload.phone,
            avatar_url=payload.avatar_url,
        )
    except ChecklistError as exc:
        raise to_http_exception(exc) from exc
    return _profile_response(updated)


@router.post("/avatar", response_model=AvatarUploadResponse, status_code=status.HTTP_201_CREATED)
async def upload_avatar(
    file: UploadFile = File(...),
    profile: UserProfile = Depends(require_profile),
    service: ProfileService = Depends(get_profile_service),
) -> AvatarUploadResponse:
    if not file.filename:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Filename is required.")
    content = await file.read()
    try:
        public_url = service.upload_avatar(profile, file.filename, content, file.content_type)
    except ChecklistError as exc:
        raise to_http_exception(exc) from exc
    return AvatarUploadResponse(avatar_url=public_url)


@router.get("/interactions", response_model=InteractionsResponse, status_code=status.HTTP_200_OK)
def get_monthly_interactions(
    month: Optional[str] = Query(default=None, description="YYYY-MM, defaults to the current month"),
    profile: UserProfile = Depends(require_profile),
    service: VisitService = Depends(get_visit_service),
) -> InteractionsResponse:
    selected = month or date.today().isoformat()[:7]
    try:
        count = service.monthly_interactions(profile, selected)
    except ChecklistError as exc:
        raise to_http_exception(exc) from exc
    return InteractionsResponse(month=selected, count=count)
