"""Reverse geocoding API schemas."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel


class ReverseGeocodeResponse(BaseModel):
    region: str
    city: Optional[str] = None
    state: Optional[str] = None
    latitude: float
    longitude: float
    resolved: bool
