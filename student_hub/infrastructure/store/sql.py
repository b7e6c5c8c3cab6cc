# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""SQLAlchemy-backed document store.

Documents live in a single ``documents`` table keyed by (collection, id)
with their fields in a JSON column. Timestamps are serialized in a
fixed-width UTC format so that ordering on the JSON value is
chronological; the names of timestamp fields are kept alongside so they
are restored as datetimes on read.

Uses SQLAlchemy 2.0 async API with aiosqlite (development) or asyncpg
(production).

Example:
    store = SQLAlchemyDocumentStore("sqlite+aiosqlite:///./student_hub.db", event_bus=bus)
    await store.initialize()
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any, AsyncIterator, Iterable

from sqlalchemy import (
    JSON,
    Column,
    DateTime,
    MetaData,
    String,
    Table,
    and_,
    delete,
    insert,
    select,
    text,
    update,
)
from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncConnection,
    AsyncEngine,
    create_async_engine,
)

from student_hub.infrastructure.events import EventBus
from student_hub.infrastructure.store.base import (
    DocumentNotFoundError,
    DocumentStore,
    StoreError,
    StoreUnavailableError,
)
from student_hub.utils.datetime import format_storage, parse_storage, utc_now

logger = logging.getLogger(__name__)

metadata = MetaData()

documents_table = Table(
    "documents",
    metadata,
    Column("collection", String(64), primary_key=True),
    Column("id", String(64), primary_key=True),
    Column("data", JSON, nullable=False),
    Column("timestamp_fields", JSON, nullable=False, default=list),
    Column("created_at", DateTime(timezone=True), nullable=False, default=utc_now),
)


def _encode(data: dict[str, Any]) -> tuple[dict[str, Any], list[str]]:
    encoded: dict[str, Any] = {}
    timestamp_fields: list[str] = []
    for key, value in data.items():
        if isinstance(value, datetime):
            encoded[key] = format_storage(value)
            timestamp_fields.append(key)
        else:
            encoded[key] = value
    return encoded, timestamp_fields


def _decode(data: dict[str, Any], timestamp_fields: Iterable[str]) -> dict[str, Any]:
    decoded = dict(data)
    for key in timestamp_fields:
        if isinstance(decoded.get(key), str):
            decoded[key] = parse_storage(decoded[key])
    return decoded


def _encode_bound(value: Any) -> Any:
    return format_storage(value) if isinstance(value, datetime) else value


class SQLAlchemyDocumentStore(DocumentStore):
    """Document store persisted through an async SQLAlchemy engine.

    Args:
        database_url: Async SQLAlchemy URL.
        event_bus: Bus receiving change events.
        read_only_collections: Collections that reject every write.
        echo: Log SQL statements.
        pool_size: Pool size for server databases.
    """

    def __init__(
        self,
        database_url: str,
        event_bus: EventBus | None = None,
        read_only_collections: Iterable[str] = (),
        echo: bool = False,
        pool_size: int = 5,
    ) -> None:
        super().__init__(event_bus=event_bus, read_only_collections=read_only_collections)
        self._database_url = database_url
        self._echo = echo
        self._pool_size = pool_size
        self._engine: AsyncEngine | None = None

    async def initialize(self) -> None:
        """Create the engine and the documents table if missing.

        Raises:
            StoreUnavailableError: If the database cannot be reached.
        """
        engine_kwargs: dict[str, Any] = {"echo": self._echo, "pool_pre_ping": True}
        if not self._database_url.startswith("sqlite"):
            engine_kwargs.update(pool_size=self._pool_size, pool_recycle=1800)

        try:
            self._engine = create_async_engine(self._database_url, **engine_kwargs)
            async with self._engine.begin() as conn:
                await conn.run_sync(metadata.create_all)
        except SQLAlchemyError as e:
            raise StoreUnavailableError("Failed to initialize document store", e) from e

        logger.info("Document store initialized: %s", self._engine.url.render_as_string())

    async def close(self) -> None:
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None

    async def ping(self) -> bool:
        if self._engine is None:
            return False
        try:
            async with self._engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError:
            logger.warning("Document store ping failed", exc_info=True)
            return False

    @asynccontextmanager
    async def _transaction(self) -> AsyncIterator[AsyncConnection]:
        if self._engine is None:
            raise StoreUnavailableError(
                "Document store not initialized. Call initialize() first."
            )
        try:
            async with self._engine.begin() as conn:
                yield conn
        except OperationalError as e:
            raise StoreUnavailableError("Document store unavailable", e) from e
        except SQLAlchemyError as e:
            raise StoreError("Document store operation failed", e) from e

    def _key(self, collection: str, document_id: str) -> Any:
        return and_(
            documents_table.c.collection == collection,
            documents_table.c.id == document_id,
        )

    async def _insert(self, collection: str, document_id: str, data: dict[str, Any]) -> None:
        encoded, timestamp_fields = _encode(data)
        async with self._transaction() as conn:
            await conn.execute(
                insert(documents_table).values(
                    collection=collection,
                    id=document_id,
                    data=encoded,
                    timestamp_fields=timestamp_fields,
                    created_at=self._next_timestamp(),
                )
            )

    async def _fetch(self, collection: str, document_id: str) -> dict[str, Any] | None:
        async with self._transaction() as conn:
            result = await conn.execute(
                select(documents_table.c.data, documents_table.c.timestamp_fields).where(
                    self._key(collection, document_id)
                )
            )
            row = result.first()
        if row is None:
            return None
        return _decode(row.data, row.timestamp_fields)

    async def _merge(self, collection: str, document_id: str, changes: dict[str, Any]) -> dict[str, Any]:
        async with self._transaction() as conn:
            result = await conn.execute(
                select(documents_table.c.data, documents_table.c.timestamp_fields).where(
                    self._key(collection, document_id)
                )
            )
            row = result.first()
            if row is None:
                raise DocumentNotFoundError(collection, document_id)

            merged = _decode(row.data, row.timestamp_fields)
            merged.update(changes)
            encoded, timestamp_fields = _encode(merged)
            await conn.execute(
                update(documents_table)
                .where(self._key(collection, document_id))
                .values(data=encoded, timestamp_fields=timestamp_fields)
            )
        return merged

    async def _remove(self, collection: str, document_id: str) -> None:
        async with self._transaction() as conn:
            result = await conn.execute(
                delete(documents_table).where(self._key(collection, document_id))
            )
            if result.rowcount == 0:
                raise DocumentNotFoundError(collection, document_id)

    async def _select(
        self,
        collection: str,
        order_by: str | None,
        descending: bool,
        start_at: Any,
        end_at: Any,
        limit: int | None,
    ) -> list[tuple[str, dict[str, Any]]]:
        stmt = select(
            documents_table.c.id,
            documents_table.c.data,
            documents_table.c.timestamp_fields,
        ).where(documents_table.c.collection == collection)

        if order_by is not None:
            field = documents_table.c.data[order_by].as_string()
            stmt = stmt.where(field.is_not(None))
            if start_at is not None:
                stmt = stmt.where(field >= _encode_bound(start_at))
            if end_at is not None:
                stmt = stmt.where(field <= _encode_bound(end_at))
            if descending:
                stmt = stmt.order_by(field.desc(), documents_table.c.id.desc())
            else:
                stmt = stmt.order_by(field.asc(), documents_table.c.id.asc())
        else:
            stmt = stmt.order_by(documents_table.c.created_at.asc(), documents_table.c.id.asc())

        if limit is not None:
            stmt = stmt.limit(limit)

        async with self._transaction() as conn:
            result = await conn.execute(stmt)
            rows = result.all()
        return [(row.id, _decode(row.data, row.timestamp_fields)) for row in rows]
