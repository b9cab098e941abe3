"""Founding Circle API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map FoundingCircleError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Store, notifier, dispatcher, and service are built once in the lifespan and
      reach routes only through app.state (no process-wide singletons)

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Pending email deliveries are drained on shutdown before the engine is disposed
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from foundingcircle.api.error_handlers import register_error_handlers
from foundingcircle.api.routes import admin, health, waitlist
from foundingcircle.config import Settings, get_settings
from foundingcircle.core.repository_protocols import EmailNotifier
from foundingcircle.infrastructure.database import DatabaseSessionManager
from foundingcircle.infrastructure.email_notifier import (
    LoggingEmailNotifier, WebhookEmailNotifier,
)
from foundingcircle.infrastructure.member_store import SqlAlchemyMemberStore
from foundingcircle.infrastructure.memory_store import InMemoryMemberStore
from foundingcircle.infrastructure.notification_dispatcher import NotificationDispatcher
from foundingcircle.infrastructure.observability import setup_logging
from foundingcircle.services.founding_circle import FoundingCircleService

logger = logging.getLogger(__name__)


def build_notifier(settings: Settings) -> EmailNotifier:
    if settings.email_webhook_url:
        return WebhookEmailNotifier(
            settings.email_webhook_url,
            settings.email_sender,
            settings.email_timeout_seconds,
        )
    return LoggingEmailNotifier()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)

    db_manager: DatabaseSessionManager | None = None
    if settings.store_backend == "memory":
        store = InMemoryMemberStore()
    else:
        db_manager = DatabaseSessionManager(
            settings.database_url,
            pool_size=settings.database_pool_size,
            max_overflow=settings.database_max_overflow,
        )
        store = SqlAlchemyMemberStore(db_manager)
        await store.ensure_sequence()

    dispatcher = NotificationDispatcher(build_notifier(settings))
    app.state.founding_circle = FoundingCircleService(
        store, dispatcher, capacity=settings.max_founding_members,
    )
    logger.info(f"Founding Circle API started (store={settings.store_backend})")
    yield
    logger.info("Founding Circle API shutting down")
    await dispatcher.drain()
    if db_manager:
        await db_manager.dispose()


app = FastAPI(
    title="Founding Circle API", version="1.0.0", lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(waitlist.router)
app.include_router(admin.router)

register_error_handlers(app)
