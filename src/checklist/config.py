"""Application configuration and settings management."""

from pathlib import Path
from typing import Any, Literal, Optional

import json
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="CHECKLIST_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "Small Checklist API"
    api_prefix: str = "/api"
    log_level: str = Field(default="INFO", description="Root log level for the service.")
    data_root: Path = Field(default=Path("data"), description="Root directory for local state files.")

    storage_backend: Literal["supabase", "sqlite"] = Field(
        default="supabase",
        description="Where visits and profiles live: the managed backend or the legacy local store.",
    )
    sqlite_path: Path = Field(
        default=Path("data/visitlog.db"),
        description="Embedded database file used by the legacy local store.",
    )
    sqlite_seed_demo_data: bool = Field(default=True, description="Insert demo rows into an empty local store.")

    # Supabase configuration
    supabase_url: Optional[str] = Field(
        default=None,
        description="Supabase project URL (e.g., https://xxx.supabase.co).",
    )
    supabase_key: Optional[str] = Field(
        default=None,
        description="Supabase key used for backend operations.",
    )
    supabase_realtime_enabled: bool = Field(
        default=True,
        description="Subscribe to new visit inserts to feed manager notifications.",
    )
    visits_table: str = "visitas"
    profiles_table: str = "profiles"
    avatars_bucket: str = "avatars"
    site_url: str = Field(
        default="http://localhost:3000",
        description="Public origin used as redirect target in auth e-mails.",
    )

    frontend_allowed_origins: tuple[str, ...] = Field(
        default=(
            "http://localhost:3000",
            "http://127.0.0.1:3000",
            "http://localhost:5173",
            "http://127.0.0.1:5173",
        ),
        description="Permitted web origins for browser clients (CORS).",
    )

    geocoding_base_url: str = Field(
        default="https://nominatim.openstreetmap.org",
        description="Base URL of the Nominatim-compatible reverse geocoding service.",
    )
    geocoding_user_agent: str = "small-checklist/1.0"
    geocoding_timeout_seconds: float = Field(default=10.0, gt=0.0)
    geocoding_max_retries: int = Field(default=2, ge=0)
    geocoding_backoff_seconds: float = Field(default=0.5, ge=0.0)

    dashboard_window_days: int = Field(default=30, ge=1)
    dashboard_top_n: int = Field(default=3, ge=1)
    dashboard_histogram_days: int = Field(default=7, ge=1)

    @field_validator("data_root", "sqlite_path", mode="before")
    @classmethod
    def _expand_path(cls, value: Any) -> Path:
        path_value = value if isinstance(value, Path) else Path(str(value))
        return path_value.expanduser().resolve()

    @field_validator("frontend_allowed_origins", mode="before")
    @classmethod
    def _parse_str_tuple_from_env(cls, value: Any) -> tuple[str, ...]:
        """Parse string tuple from environment variable (comma-separated or JSON array)."""
        if isinstance(value, tuple):
            return value
        if isinstance(value, list):
            return tuple(str(item) for item in value)
        if isinstance(value, str):
            # Try JSON first
            try:
                parsed = json.loads(value)
                if isinstance(parsed, list):
                    return tuple(str(item) for item in parsed)
            except (json.JSONDecodeError, TypeError):
                pass
            if "," in value:
                return tuple(item.strip() for item in value.split(",") if item.strip())
            if value.strip():
                return (value.strip(),)
        return tuple()


settings = Settings()
