"""User administration endpoints."""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status

from ...errors import ChecklistError
from ...models.domain import UserProfile
from ...schemas.users import UserInviteRequest, UserInviteResponse, UserModel, UserUpdateRequest
from ...services.users import ALL_ROLES_TAB, UserAdminService
from ..deps import get_current_profile, get_user_admin_service
from ..errors import to_http_exception

router = APIRouter(prefix="/users", tags=["users"])


@router.get("", response_model=List[UserModel], status_code=status.HTTP_200_OK)
def list_users(
    search: str = Query(default="", description="Matches name or e-mail (case-insensitive)"),
    role: str = Query(default=ALL_ROLES_TAB, description="Role tab: Todos, Admin, Gestor or Vendedor"),
    actor: Optional[UserProfile] = Depends(get_current_profile),
    service: UserAdminService = Depends(get_user_admin_service),
) -> List[UserModel]:
    try:
        users = service.list_users(actor, search=search, role_tab=role)
    except ChecklistError as exc:
        raise to_http_exception(exc) from exc
    return [UserModel.from_domain(user) for user in users]


@router.post("", response_model=UserInviteResponse, status_code=status.HTTP_201_CREATED)
def invite_user(
    payload: UserInviteRequest,
    actor: Optional[UserProfile] = Depends(get_current_profile),
    service: UserAdminService = Depends(get_user_admin_service),
) -> UserInviteResponse:
    try:
        user_id = service.invite_user(actor, payload.name, payload.email)
    except ChecklistError as exc:
        raise to_http_exception(exc) from exc
    return UserInviteResponse(
        id=user_id,
        message=f"Usuário {payload.name} adicionado! Um e-mail de confirmação foi enviado para {payload.email}.",
    )


@router.patch("/{user_id}", response_model=UserModel, status_code=status.HTTP_200_OK)
def update_user(
    user_id: str,
    payload: UserUpdateRequest,
    actor: Optional[UserProfile] = Depends(get_current_profile),
    service: UserAdminService = Depends(get_user_admin_service),
) -> UserModel:
    changes = payload.model_dump(exclude_none=True)
    try:
        updated = service.update_user(actor, user_id, changes)
    except ChecklistError as exc:
        raise to_http_exception(exc) from exc
    return UserModel.from_domain(updated)


@router.post("/{user_id}/toggle-active", response_model=UserModel, status_code=status.HTTP_200_OK)
def toggle_user_active(
    user_id: str,
    actor: Optional[UserProfile] = Depends(get_current_profile),
    service: UserAdminService = Depends(get_user_admin_service),
) -> UserModel:
    try:
        updated = service.toggle_active(actor, user_id)
    except ChecklistError as exc:
        raise to_http_exception(exc) from exc
    return UserModel.from_domain(updated)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(
    user_id: str,
    actor: Optional[UserProfile] = Depends(get_current_profile),
    service: UserAdminService = Depends(get_user_admin_service),
) -> Response:
    try:
        service.delete_user(actor, user_id)
    except ChecklistError as exc:
        raise to_http_exception(exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)
