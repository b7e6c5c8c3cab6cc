# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Live enrollment snapshots.

An EnrollmentSubscription yields the full, ordered enrollments collection
immediately and again after every committed change. Changes that land
while a snapshot is being read are coalesced into the next one, so a
consumer always converges on the latest committed state.

Example:
    async with moderation.subscribe() as subscription:
        async for snapshot in subscription:
            render(snapshot)
"""

import asyncio
import logging
from types import TracebackType

from student_hub.domains.enrollment.errors import PersistenceError, PersistenceFailure
from student_hub.domains.enrollment.schemas import Enrollment
from student_hub.infrastructure.events import EventBus, EventData, EventTypes
from student_hub.infrastructure.store import (
    ENROLLMENTS,
    DocumentStore,
    StoreError,
    StoreUnavailableError,
)

logger = logging.getLogger(__name__)


async def load_snapshot(store: DocumentStore) -> list[Enrollment]:
    """Read all enrollments, newest first.

    Raises:
        PersistenceError: If the store cannot be read.
    """
    try:
        documents = await store.query(ENROLLMENTS, order_by="enrolledAt", descending=True)
    except StoreUnavailableError as e:
        raise PersistenceError(PersistenceFailure.UNAVAILABLE, e) from e
    except StoreError as e:
        raise PersistenceError(PersistenceFailure.UNKNOWN, e) from e
    return [Enrollment.from_document(document) for document in documents]


class EnrollmentSubscription:
    """Cancellable async iterator of enrollment snapshots."""

    def __init__(self, store: DocumentStore, event_bus: EventBus) -> None:
        self._store = store
        self._event_bus = event_bus
        self._pattern = EventTypes.Store.pattern(ENROLLMENTS)
        self._changed = asyncio.Event()
        self._changed.set()
        self._closed = False
        self._event_bus.subscribe(self._pattern, self._on_change)
        logger.debug("Enrollment subscription opened")

    @property
    def closed(self) -> bool:
        return self._closed

    async def _on_change(self, event: EventData) -> None:
        self._changed.set()

    def cancel(self) -> None:
        """Stop delivering snapshots. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        self._event_bus.unsubscribe(self._pattern, self._on_change)
        self._changed.set()
        logger.debug("Enrollment subscription cancelled")

    def refresh(self) -> None:
        """Ask for a new snapshot even though nothing changed."""
        if not self._closed:
            self._changed.set()

    def __aiter__(self) -> "EnrollmentSubscription":
        return self

    async def __anext__(self) -> list[Enrollment]:
        if self._closed:
            raise StopAsyncIteration
        await self._changed.wait()
        if self._closed:
            raise StopAsyncIteration
        self._changed.clear()
        return await load_snapshot(self._store)

    async def __aenter__(self) -> "EnrollmentSubscription":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.cancel()
