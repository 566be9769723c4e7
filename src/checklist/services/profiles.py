"""Self-service profile edits: name, phone and avatar."""

from __future__ import annotations

import logging
import re
import secrets
from pathlib import PurePath
from typing import Any, Callable, Optional

from ..config import settings
from ..data.repository import ProfileRepository
from ..db.supabase import get_supabase_client
from ..errors import BackendUnavailableError, ValidationError
from ..models.domain import UserProfile

logger = logging.getLogger(__name__)

_NON_DIGITS = re.compile(r"\D")
MAX_PHONE_DIGITS = 11


def phone_digits(value: str) -> str:
    return _NON_DIGITS.sub("", value or "")


def format_phone(value: str) -> str:
    """Progressive Brazilian mobile mask: ``(DD) DDDDD-DDDD``."""

    digits = phone_digits(value)[:MAX_PHONE_DIGITS]
    if len(digits) <= 2:
        return digits
    if len(digits) <= 6:
        return f"({digits[:2]}) {digits[2:]}"
    return f"({digits[:2]}) {digits[2:7]}-{digits[7:]}"


def avatar_object_name(user_id: str, filename: str) -> str:
    extension = PurePath(filename).suffix.lstrip(".").lower()
    if not extension:
        raise ValidationError("Avatar file needs an extension")
    return f"{user_id}-{secrets.token_hex(8)}.{extension}"


class ProfileService:
    def __init__(
        self,
        profiles: ProfileRepository,
        storage_client_factory: Callable[[], Any] = get_supabase_client,
    ) -> None:
        self.profiles = profiles
        self._storage_client_factory = storage_client_factory

    def update_profile(
        self,
        profile: UserProfile,
        *,
        name: Optional[str] = None,
        phone: Optional[str] = None,
        avatar_url: Optional[str] = None,
    ) -> UserProfile:
        changes: dict[str, Any] = {}
        if name is not None:
            if not name.strip():
                raise ValidationError("Name cannot be empty")
            changes["name"] = name.strip()
        if phone is not None:
            changes["phone"] = phone_digits(phone)
        if avatar_url is not None:
            changes["avatar_url"] = avatar_url
        if not changes:
            return profile
        return self.profiles.update_profile(profile.id, changes)

    def upload_avatar(self, profile: UserProfile, filename: str, content: bytes, content_type: str | None = None) -> str:
        """Store the image in the avatars bucket and return its public URL."""

        client = self._storage_client_factory()
        if client is None:
            raise BackendUnavailableError("Avatar uploads require a configured Supabase backend.")
        object_name = avatar_object_name(profile.id, filename)
        bucket = client.storage.from_(settings.avatars_bucket)
        try:
            bucket.upload(object_name, content, {"content-type": content_type or "application/octet-stream"})
        except Exception as exc:
            logger.error(f"Error uploading avatar for {profile.id}: {exc}")
            raise BackendUnavailableError(f"Erro ao fazer upload: {exc}") from exc
        return bucket.get_public_url(object_name)
