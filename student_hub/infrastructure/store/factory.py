# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Store construction from settings."""

import logging
from typing import TYPE_CHECKING

from student_hub.infrastructure.events import EventBus
from student_hub.infrastructure.store.base import DocumentStore
from student_hub.infrastructure.store.memory import InMemoryDocumentStore
from student_hub.infrastructure.store.sql import SQLAlchemyDocumentStore

if TYPE_CHECKING:
    from student_hub.core.config.settings import Settings

logger = logging.getLogger(__name__)

ENROLLMENTS = "enrollments"
RESOURCES = "resources"

# The catalog is provisioned out of band and never written by the service.
READ_ONLY_COLLECTIONS = frozenset({RESOURCES})


async def create_store(settings: "Settings", event_bus: EventBus) -> DocumentStore:
    """Build and initialize the configured document store.

    Args:
        settings: Application settings.
        event_bus: Bus that receives change events.

    Returns:
        A ready-to-use store.

    Raises:
        StoreUnavailableError: If the SQL backend cannot be initialized.
    """
    if settings.store.backend == "memory":
        logger.info("Using in-memory document store")
        return InMemoryDocumentStore(
            event_bus=event_bus,
            read_only_collections=READ_ONLY_COLLECTIONS,
        )

    store = SQLAlchemyDocumentStore(
        settings.store.database_url,
        event_bus=event_bus,
        read_only_collections=READ_ONLY_COLLECTIONS,
        echo=settings.store.echo,
        pool_size=settings.store.pool_size,
    )
    await store.initialize()
    return store
