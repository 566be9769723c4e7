"""Device preferences: remembered e-mail, remember-me flag and theme."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from ...persistence.preferences import PreferenceStore
from ...schemas.preferences import PreferencesModel, PreferencesUpdateRequest
from ..deps import get_preference_store, require_device_id

router = APIRouter(prefix="/preferences", tags=["preferences"])


@router.get("", response_model=PreferencesModel, status_code=status.HTTP_200_OK)
def get_preferences(
    device_id: str = Depends(require_device_id),
    store: PreferenceStore = Depends(get_preference_store),
) -> PreferencesModel:
    return PreferencesModel(**store.load(device_id))


@router.put("", response_model=PreferencesModel, status_code=status.HTTP_200_OK)
def update_preferences(
    payload: PreferencesUpdateRequest,
    device_id: str = Depends(require_device_id),
    store: PreferenceStore = Depends(get_preference_store),
) -> PreferencesModel:
    values = payload.model_dump(exclude_unset=True)
    return PreferencesModel(**store.update(device_id, **values))
