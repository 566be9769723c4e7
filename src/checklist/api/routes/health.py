"""Health endpoints."""

from __future__ import annotations

from fastapi import APIRouter, status

from ...config import settings

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
def health_root() -> dict:
    """Simple health check endpoint that doesn't require any dependencies."""
    return {"status": "ok"}


@router.get("/health/database", status_code=status.HTTP_200_OK)
def check_database() -> dict:
    """Check that the configured storage backend answers."""
    if settings.storage_backend == "sqlite":
        from ...db.sqlite import get_db_connection

        try:
            conn = get_db_connection()
            try:
                visits = conn.execute("SELECT COUNT(*) AS count FROM visits").fetchone()["count"]
            finally:
                conn.close()
        except Exception as exc:
            return {
                "backend": "sqlite",
                "configured": True,
                "connected": False,
                "error": str(exc),
                "message": f"Local store error: {exc}",
            }
        return {
            "backend": "sqlite",
            "configured": True,
            "connected": True,
            "visits_count": visits,
            "message": f"Local store at {settings.sqlite_path} holds {visits} visits.",
        }

    from ...db.supabase import get_supabase_client

    supabase = get_supabase_client()
    if not supabase:
        return {
            "backend": "supabase",
            "configured": False,
            "message": "Supabase not configured. Set CHECKLIST_SUPABASE_URL and CHECKLIST_SUPABASE_KEY environment variables.",
        }

    try:
        response = supabase.table(settings.visits_table).select("id", count="exact").limit(1).execute()
    except Exception as exc:
        return {
            "backend": "supabase",
            "configured": True,
            "connected": False,
            "error": str(exc),
            "message": f"Database connection error: {exc}",
        }
    return {
        "backend": "supabase",
        "configured": True,
        "connected": True,
        "visits_count": response.count or 0,
        "message": f"Database connected. Found {response.count or 0} visits.",
    }
