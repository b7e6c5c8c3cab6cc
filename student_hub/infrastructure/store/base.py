# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Document store abstraction.

A document store keeps JSON-like documents grouped in named collections.
Concrete adapters implement a handful of storage primitives; this base
class layers the shared behavior on top of them:

- access rules (read-only collections are rejected with PermissionDeniedError)
- server-assigned, strictly increasing timestamps via SERVER_TIMESTAMP
- a change event on the event bus after every committed write

Example:
    store = InMemoryDocumentStore(event_bus=bus)
    doc = await store.create("enrollments", {"status": "pending",
                                             "enrolledAt": SERVER_TIMESTAMP})
    latest = await store.query("enrollments", order_by="enrolledAt", descending=True)
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Iterable
from uuid import uuid4

from student_hub.infrastructure.events import EventBus, EventTypes
from student_hub.utils.datetime import utc_now

logger = logging.getLogger(__name__)


class _ServerTimestamp:
    """Sentinel replaced by the store clock when a document is written."""

    _instance: "_ServerTimestamp | None" = None

    def __new__(cls) -> "_ServerTimestamp":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "SERVER_TIMESTAMP"


SERVER_TIMESTAMP = _ServerTimestamp()


class StoreError(Exception):
    """Base exception for document store operations.

    Attributes:
        message: Human-readable error description.
        original_error: The underlying driver error, if any.
    """

    def __init__(self, message: str, original_error: Exception | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.original_error = original_error

    def __str__(self) -> str:
        if self.original_error:
            return f"{self.message}: {self.original_error}"
        return self.message


class PermissionDeniedError(StoreError):
    """Raised when the store's access rules reject an operation."""


class StoreUnavailableError(StoreError):
    """Raised when the backing storage cannot be reached."""


class DocumentNotFoundError(StoreError):
    """Raised when updating or deleting a document that does not exist."""

    def __init__(self, collection: str, document_id: str) -> None:
        super().__init__(f"Document {collection}/{document_id} not found")
        self.collection = collection
        self.document_id = document_id


@dataclass(frozen=True)
class Document:
    """A stored document.

    Attributes:
        id: Store-assigned identifier, unique within the collection.
        collection: Collection name.
        data: Field values. Timestamps are timezone-aware datetimes.
    """

    id: str
    collection: str
    data: dict[str, Any] = field(default_factory=dict)

    def get(self, key: str, default: Any = None) -> Any:
        """Return a field value or default."""
        return self.data.get(key, default)


class DocumentStore(ABC):
    """Abstract base for document store adapters.

    Subclasses implement the underscore-prefixed primitives. Public
    methods enforce access rules, resolve SERVER_TIMESTAMP and publish
    change events.

    Args:
        event_bus: Bus receiving ``store.<collection>.<change>`` events.
        read_only_collections: Collections that reject every write.
    """

    def __init__(
        self,
        event_bus: EventBus | None = None,
        read_only_collections: Iterable[str] = (),
    ) -> None:
        self._event_bus = event_bus
        self._read_only = frozenset(read_only_collections)
        self._last_timestamp: datetime | None = None

    # =========================================================================
    # Storage primitives
    # =========================================================================

    @abstractmethod
    async def _insert(self, collection: str, document_id: str, data: dict[str, Any]) -> None:
        """Persist a new document."""

    @abstractmethod
    async def _fetch(self, collection: str, document_id: str) -> dict[str, Any] | None:
        """Load one document's data, or None."""

    @abstractmethod
    async def _merge(self, collection: str, document_id: str, changes: dict[str, Any]) -> dict[str, Any]:
        """Merge changes into an existing document and return the result.

        Raises:
            DocumentNotFoundError: If the document does not exist.
        """

    @abstractmethod
    async def _remove(self, collection: str, document_id: str) -> None:
        """Delete a document.

        Raises:
            DocumentNotFoundError: If the document does not exist.
        """

    @abstractmethod
    async def _select(
        self,
        collection: str,
        order_by: str | None,
        descending: bool,
        start_at: Any,
        end_at: Any,
        limit: int | None,
    ) -> list[tuple[str, dict[str, Any]]]:
        """Run an ordered range query and return (id, data) pairs."""

    async def ping(self) -> bool:
        """Check that the backing storage is reachable."""
        return True

    async def close(self) -> None:
        """Release any resources held by the adapter."""

    # =========================================================================
    # Public API
    # =========================================================================

    async def create(self, collection: str, data: dict[str, Any]) -> Document:
        """Create a document with a store-assigned identifier.

        Args:
            collection: Target collection.
            data: Field values; SERVER_TIMESTAMP is replaced by the store clock.

        Returns:
            The stored document.

        Raises:
            PermissionDeniedError: If the collection is read-only.
            StoreError: If the write fails.
        """
        self._check_writable(collection, "create")
        document_id = uuid4().hex
        resolved = self._resolve(data)
        await self._insert(collection, document_id, resolved)
        logger.debug("Created document %s/%s", collection, document_id)
        await self._notify(collection, EventTypes.Store.CREATED, document_id)
        return Document(id=document_id, collection=collection, data=resolved)

    async def get(self, collection: str, document_id: str) -> Document | None:
        """Read one document, or None when it does not exist."""
        data = await self._fetch(collection, document_id)
        if data is None:
            return None
        return Document(id=document_id, collection=collection, data=data)

    async def update(self, collection: str, document_id: str, changes: dict[str, Any]) -> Document:
        """Merge field changes into an existing document.

        Raises:
            PermissionDeniedError: If the collection is read-only.
            DocumentNotFoundError: If the document does not exist.
            StoreError: If the write fails.
        """
        self._check_writable(collection, "update")
        merged = await self._merge(collection, document_id, self._resolve(changes))
        logger.debug("Updated document %s/%s: %s", collection, document_id, sorted(changes))
        await self._notify(collection, EventTypes.Store.UPDATED, document_id)
        return Document(id=document_id, collection=collection, data=merged)

    async def delete(self, collection: str, document_id: str) -> None:
        """Hard-delete a document.

        Raises:
            PermissionDeniedError: If the collection is read-only.
            DocumentNotFoundError: If the document does not exist.
            StoreError: If the write fails.
        """
        self._check_writable(collection, "delete")
        await self._remove(collection, document_id)
        logger.debug("Deleted document %s/%s", collection, document_id)
        await self._notify(collection, EventTypes.Store.DELETED, document_id)

    async def query(
        self,
        collection: str,
        *,
        order_by: str | None = None,
        descending: bool = False,
        start_at: Any = None,
        end_at: Any = None,
        limit: int | None = None,
    ) -> list[Document]:
        """Query a collection.

        When order_by is given, documents lacking that field are excluded and
        ties are broken by document id. start_at and end_at bound the
        order_by field inclusively.

        Args:
            collection: Collection to read.
            order_by: Field to sort on.
            descending: Sort direction.
            start_at: Inclusive lower bound on the order_by field.
            end_at: Inclusive upper bound on the order_by field.
            limit: Maximum number of documents.

        Returns:
            Matching documents in order.

        Raises:
            ValueError: If a bound is given without order_by.
        """
        if order_by is None and (start_at is not None or end_at is not None):
            raise ValueError("start_at/end_at require order_by")
        if limit is not None and limit < 1:
            raise ValueError("limit must be positive")
        rows = await self._select(collection, order_by, descending, start_at, end_at, limit)
        return [Document(id=doc_id, collection=collection, data=data) for doc_id, data in rows]

    async def seed(self, collection: str, documents: dict[str, dict[str, Any]]) -> None:
        """Load fixture documents, bypassing access rules and events.

        Used to provision read-only collections such as the catalog.
        """
        for document_id, data in documents.items():
            await self._insert(collection, document_id, self._resolve(data))
        logger.info("Seeded %d documents into %s", len(documents), collection)

    # =========================================================================
    # Helpers
    # =========================================================================

    def _check_writable(self, collection: str, operation: str) -> None:
        if collection in self._read_only:
            logger.warning("Rejected %s on read-only collection %s", operation, collection)
            raise PermissionDeniedError(
                f"Missing or insufficient permissions to {operation} in {collection}"
            )

    def _next_timestamp(self) -> datetime:
        now = utc_now()
        if self._last_timestamp is not None and now <= self._last_timestamp:
            now = self._last_timestamp + timedelta(microseconds=1)
        self._last_timestamp = now
        return now

    def _resolve(self, data: dict[str, Any]) -> dict[str, Any]:
        resolved = dict(data)
        timestamp: datetime | None = None
        for key, value in resolved.items():
            if value is SERVER_TIMESTAMP:
                if timestamp is None:
                    timestamp = self._next_timestamp()
                resolved[key] = timestamp
        return resolved

    async def _notify(self, collection: str, change: str, document_id: str) -> None:
        if self._event_bus is None:
            return
        await self._event_bus.publish(
            EventTypes.Store.changed(collection, change),
            {"collection": collection, "document_id": document_id, "change": change},
        )


def sort_key(value: Any) -> tuple[int, Any]:
    """Order values of mixed type the way a document store would.

    Numbers sort before strings, strings before timestamps.
    """
    if isinstance(value, bool):
        return (0, int(value))
    if isinstance(value, (int, float)):
        return (1, value)
    if isinstance(value, str):
        return (2, value)
    if isinstance(value, datetime):
        return (3, value)
    return (4, str(value))
