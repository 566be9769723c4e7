"""Preference API schemas."""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel


class PreferencesModel(BaseModel):
    rememberMe: bool = False
    rememberedEmail: Optional[str] = None
    theme: Literal["light", "dark"] = "light"


class PreferencesUpdateRequest(BaseModel):
    rememberMe: Optional[bool] = None
    rememberedEmail: Optional[str] = None
    theme: Optional[Literal["light", "dark"]] = None
