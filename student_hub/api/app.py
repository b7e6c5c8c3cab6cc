# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""FastAPI Application Factory.

This module provides the main application factory for the Student Hub API.
"""

import json
import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi.errors import RateLimitExceeded

from student_hub import __version__
from student_hub.api.middleware.auth import AuthMiddleware
from student_hub.api.middleware.rate_limit import (
    configure_limiter,
    rate_limit_exceeded_handler,
)
from student_hub.api.routes import health_router
from student_hub.api.v1 import router as v1_router
from student_hub.core.config import Settings, get_settings
from student_hub.core.intelligence.llm import LLMClient
from student_hub.domains.auth import IdentityProvider
from student_hub.domains.catalog import CatalogService
from student_hub.domains.enrollment import EnrollmentService
from student_hub.domains.moderation import ModerationService
from student_hub.domains.tutor import TutorService
from student_hub.infrastructure.events import EventBus
from student_hub.infrastructure.notifications import create_notification_service
from student_hub.infrastructure.store import RESOURCES, DocumentStore, create_store
from student_hub.utils.logging import setup_logging

logger = logging.getLogger(__name__)

NOTIFICATION_DRAIN_TIMEOUT = 10.0


def _load_seed(path: str) -> dict[str, dict[str, Any]]:
    with Path(path).open(encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"Seed file {path} must contain an object keyed by id")
    return data


async def seed_catalog(store: DocumentStore, seed_file: str) -> int:
    """Load catalog resources into an empty catalog.

    Returns:
        Number of resources written (0 if the catalog already had entries).
    """
    existing = await store.query(RESOURCES, limit=1)
    if existing:
        logger.info("Catalog already populated, skipping seed")
        return 0
    documents = _load_seed(seed_file)
    await store.seed(RESOURCES, documents)
    logger.info("Seeded %d catalog resources from %s", len(documents), seed_file)
    return len(documents)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Builds the event bus, document store and services on startup and
    stores them on app.state. On shutdown waits for detached
    notifications and closes the store.

    Args:
        app: The FastAPI application instance.

    Yields:
        None during application runtime.
    """
    settings: Settings = app.state.settings
    logger.info(
        "Starting Student Hub API: environment=%s, store=%s",
        settings.environment,
        settings.store.backend,
    )

    # =========================================================================
    # Startup
    # =========================================================================

    event_bus = EventBus()
    try:
        store = await create_store(settings, event_bus)
    except Exception as e:
        logger.error("Failed to initialize document store: %s", str(e))
        raise
    logger.info("Document store initialized")

    if settings.store.seed_file:
        try:
            await seed_catalog(store, settings.store.seed_file)
        except Exception as e:
            logger.warning("Failed to seed catalog: %s", str(e))

    notification_service = create_notification_service(settings, event_bus)
    llm_client = LLMClient(llm_settings=settings.llm)

    app.state.event_bus = event_bus
    app.state.store = store
    app.state.notification_service = notification_service
    app.state.identity = IdentityProvider(settings.identity)
    app.state.enrollment_service = EnrollmentService(store, notification_service)
    app.state.moderation_service = ModerationService(
        store, settings.admin.email_set, event_bus
    )
    app.state.catalog_service = CatalogService(store)
    app.state.tutor_service = TutorService(llm_client, settings.llm)

    yield

    # =========================================================================
    # Shutdown
    # =========================================================================

    try:
        await notification_service.drain(timeout=NOTIFICATION_DRAIN_TIMEOUT)
        logger.info("Pending notifications drained")
    except Exception as e:
        logger.warning("Error draining notifications: %s", str(e))

    try:
        await store.close()
        logger.info("Document store closed")
    except Exception as e:
        logger.warning("Error closing document store: %s", str(e))

    event_bus.clear()
    logger.info("Student Hub API shutdown complete")


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Settings to use. Defaults to get_settings().

    Returns:
        Configured FastAPI application instance.
    """
    settings = settings or get_settings()
    setup_logging(settings)

    app = FastAPI(
        title="Somali Student Hub API",
        description="Course catalog, enrollment and AI tutor backend",
        version=__version__,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        openapi_url="/openapi.json" if settings.debug else None,
        lifespan=lifespan,
    )
    app.state.settings = settings

    # Rate limiting
    app.state.limiter = configure_limiter(settings.rate_limit)
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

    # Middleware order: last added runs first
    app.add_middleware(AuthMiddleware, identity=IdentityProvider(settings.identity))
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors.origins_list,
        allow_credentials=settings.cors.allow_credentials,
        allow_methods=settings.cors.allow_methods,
        allow_headers=settings.cors.allow_headers,
    )

    app.include_router(health_router, tags=["Health"])
    app.include_router(v1_router)

    return app
