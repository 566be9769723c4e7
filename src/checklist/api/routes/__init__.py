"""Route group exports."""

from . import auth, dashboard, geocoding, health, notifications, preferences, profile, users, visits

__all__ = ["auth", "dashboard", "geocoding", "health", "notifications", "preferences", "profile", "users", "visits"]
