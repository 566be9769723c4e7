"""FastAPI application entry point."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api.routes import auth, dashboard, geocoding, health, notifications, preferences, profile, users, visits
from .config import settings
from .db.sqlite import initialize_database
from .services.notifications import NotificationCenter, VisitInsertFeed

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    feed = None
    if settings.storage_backend == "sqlite":
        initialize_database(settings.sqlite_path)
        logger.info(f"Using local SQLite store at {settings.sqlite_path}")
    elif settings.supabase_realtime_enabled:
        feed = VisitInsertFeed(app.state.notifications)
        try:
            await feed.start()
        except Exception as exc:
            # The API still serves requests; only live notifications are lost.
            logger.error(f"Could not subscribe to new visits: {exc}")
            feed = None
    app.state.visit_feed = feed
    yield
    if feed is not None:
        await feed.stop()


def create_app() -> FastAPI:
    logging.basicConfig(level=settings.log_level.upper())
    app = FastAPI(title=settings.app_name, lifespan=lifespan)
    app.state.notifications = NotificationCenter()
    if settings.frontend_allowed_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=list(settings.frontend_allowed_origins),
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    @app.get("/")
    def root():
        return {
            "service": settings.app_name,
            "status": "running",
            "backend": settings.storage_backend,
            "api_prefix": settings.api_prefix,
            "health": f"{settings.api_prefix}/health",
            "docs": "/docs",
        }

    for module in (health, auth, dashboard, visits, users, profile, notifications, geocoding, preferences):
        app.include_router(module.router, prefix=settings.api_prefix)
    return app


app = create_app()
