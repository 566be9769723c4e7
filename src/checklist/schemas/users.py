"""User administration and profile API schemas."""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

from ..models.domain import UserProfile


class UserModel(BaseModel):
    id: str
    name: str
    email: str
    role: str
    active: bool
    phone: Optional[str] = None
    avatar_url: Optional[str] = None

    @classmethod
    def from_domain(cls, profile: UserProfile) -> "UserModel":
        return cls(
            id=profile.id,
            name=profile.name,
            email=profile.email,
            role=profile.role,
            active=profile.active,
            phone=profile.phone,
            avatar_url=profile.avatar_url,
        )


class CurrentUserResponse(BaseModel):
    user: Optional[UserModel]
    views: List[str]


class UserInviteRequest(BaseModel):
    name: str = Field(..., min_length=1)
    email: str = Field(..., min_length=3)


class UserInviteResponse(BaseModel):
    id: Optional[str]
    message: str


class UserUpdateRequest(BaseModel):
    name: Optional[str] = None
    role: Optional[Literal["ADMIN", "GESTOR", "VENDEDOR"]] = None
    active: Optional[bool] = None

    @field_validator("role", mode="before")
    @classmethod
    def _upper_role(cls, value):
        return value.strip().upper() if isinstance(value, str) else value


class ProfileUpdateRequest(BaseModel):
    name: Optional[str] = None
    phone: Optional[str] = None
    avatar_url: Optional[str] = None


class ProfileResponse(UserModel):
    phone_display: str = ""


class AvatarUploadResponse(BaseModel):
    avatar_url: str


class InteractionsResponse(BaseModel):
    month: str
    count: int
