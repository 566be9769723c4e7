"""Per-user key/value preferences (remembered e-mail, remember-me, theme)."""

from __future__ import annotations

import re
from typing import Any

from ..errors import ValidationError
from .filesystem import FileStorage

DEFAULT_PREFERENCES: dict[str, Any] = {
    "rememberMe": False,
    "rememberedEmail": None,
    "theme": "light",
}

# Owner keys become file names, so only a plain character set is accepted.
_OWNER_PATTERN = re.compile(r"[A-Za-z0-9_@-][A-Za-z0-9_.@-]{0,127}")


def validate_owner(owner: str) -> str:
    if not _OWNER_PATTERN.fullmatch(owner or ""):
        raise ValidationError(
            "Preference keys use letters, digits and _ . @ - only (max 128, no leading dot)"
        )
    return owner


class PreferenceStore:
    """One JSON document per device under ``<data_root>/preferences``."""

    def __init__(self, storage: FileStorage | None = None) -> None:
        self.storage = storage or FileStorage()
        self.directory = self.storage.directory("preferences")

    def _path(self, owner: str):
        return self.directory / f"{validate_owner(owner)}.json"

    def load(self, owner: str) -> dict[str, Any]:
        stored = self.storage.read_json(self._path(owner), default={}) or {}
        return {**DEFAULT_PREFERENCES, **stored}

    def update(self, owner: str, **values: Any) -> dict[str, Any]:
        current = self.load(owner)
        current.update(values)
        self.storage.write_json(self._path(owner), current)
        return current

    def remember_login(self, owner: str, email: str, remember: bool) -> dict[str, Any]:
        if remember:
            return self.update(owner, rememberMe=True, rememberedEmail=email)
        return self.update(owner, rememberMe=False, rememberedEmail=None)
