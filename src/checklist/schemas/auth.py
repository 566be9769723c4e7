"""Authentication API schemas."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=3)
    password: str = Field(..., min_length=1)
    remember_me: bool = False
    device_id: Optional[str] = Field(default=None, description="Browser key the remember-me choice is stored under")


class LoginResponse(BaseModel):
    access_token: str
    refresh_token: Optional[str] = None
    expires_in: Optional[int] = None
    token_type: str = "bearer"
    user_id: str


class PasswordResetRequest(BaseModel):
    email: str = Field(..., min_length=3)


class PasswordUpdateRequest(BaseModel):
    password: str


class MessageResponse(BaseModel):
    message: str
