"""Reverse geocoding used to pre-fill the region of a new visit."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status

from ...schemas.geocoding import ReverseGeocodeResponse
from ...services.geocoding import ReverseGeocoder
from ..deps import get_geocoder

router = APIRouter(prefix="/geocode", tags=["geocoding"])


@router.get("/reverse", response_model=ReverseGeocodeResponse, status_code=status.HTTP_200_OK)
def reverse_geocode(
    lat: float = Query(..., ge=-90, le=90),
    lon: float = Query(..., ge=-180, le=180),
    geocoder: ReverseGeocoder = Depends(get_geocoder),
) -> ReverseGeocodeResponse:
    result = geocoder.reverse_or_placeholder(lat, lon)
    return ReverseGeocodeResponse(
        region=result.region,
        city=result.city,
        state=result.state,
        latitude=result.latitude,
        longitude=result.longitude,
        resolved=result.resolved,
    )
