"""Session endpoints: sign-in, sign-out, password flows and the current user."""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status

from ...errors import ChecklistError
from ...models.domain import UserProfile
from ...persistence.preferences import PreferenceStore
from ...schemas.auth import (
    LoginRequest,
    LoginResponse,
    MessageResponse,
    PasswordResetRequest,
    PasswordUpdateRequest,
)
from ...schemas.users import CurrentUserResponse, UserModel
from ...services.auth import AuthService
from ...services.navigation import views_for_role
from ..deps import bearer_token, get_auth_service, get_current_profile, get_preference_store, require_profile
from ..errors import to_http_exception

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])


@router.post("/auth/login", response_model=LoginResponse, status_code=status.HTTP_200_OK)
def login(
    payload: LoginRequest,
    auth: AuthService = Depends(get_auth_service),
    preferences: PreferenceStore = Depends(get_preference_store),
) -> LoginResponse:
    try:
        if payload.device_id:
            preferences.remember_login(payload.device_id, payload.email, payload.remember_me)
        session = auth.sign_in(payload.email, payload.password)
    except ChecklistError as exc:
        raise to_http_exception(exc) from exc
    return LoginResponse(
        access_token=session.access_token,
        refresh_token=session.refresh_token,
        expires_in=session.expires_in,
        user_id=session.user_id,
    )


@router.post("/auth/logout", response_model=MessageResponse, status_code=status.HTTP_200_OK)
def logout(
    token: Optional[str] = Depends(bearer_token),
    auth: AuthService = Depends(get_auth_service),
) -> MessageResponse:
    if not token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    try:
        auth.sign_out(token)
    except ChecklistError as exc:
        raise to_http_exception(exc) from exc
    return MessageResponse(message="Signed out")


@router.post("/auth/password-reset", response_model=MessageResponse, status_code=status.HTTP_200_OK)
def request_password_reset(
    payload: PasswordResetRequest,
    auth: AuthService = Depends(get_auth_service),
) -> MessageResponse:
    try:
        auth.request_password_reset(payload.email)
    except ChecklistError as exc:
        raise to_http_exception(exc) from exc
    return MessageResponse(message="E-mail de recuperação enviado! Verifique sua caixa de entrada.")


@router.post("/auth/password", response_model=MessageResponse, status_code=status.HTTP_200_OK)
def update_password(
    payload: PasswordUpdateRequest,
    profile: UserProfile = Depends(require_profile),
    auth: AuthService = Depends(get_auth_service),
) -> MessageResponse:
    try:
        auth.update_password(profile.id, payload.password)
    except ChecklistError as exc:
        raise to_http_exception(exc) from exc
    return MessageResponse(message="Senha alterada com sucesso!")


@router.get("/me", response_model=CurrentUserResponse, status_code=status.HTTP_200_OK)
def current_user(profile: Optional[UserProfile] = Depends(get_current_profile)) -> CurrentUserResponse:
    return CurrentUserResponse(
        user=UserModel.from_domain(profile) if profile else None,
        views=views_for_role(profile.role if profile else None),
    )
