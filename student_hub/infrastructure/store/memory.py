# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""In-memory document store.

Used for development, tests and single-process deployments that do not
need durability. Documents are deep-copied on the way in and out so
callers never share mutable state with the store.
"""

import copy
from typing import Any

from student_hub.infrastructure.store.base import (
    DocumentNotFoundError,
    DocumentStore,
    sort_key,
)


class InMemoryDocumentStore(DocumentStore):
    """Document store backed by nested dictionaries."""

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._collections: dict[str, dict[str, dict[str, Any]]] = {}

    async def _insert(self, collection: str, document_id: str, data: dict[str, Any]) -> None:
        self._collections.setdefault(collection, {})[document_id] = copy.deepcopy(data)

    async def _fetch(self, collection: str, document_id: str) -> dict[str, Any] | None:
        data = self._collections.get(collection, {}).get(document_id)
        return copy.deepcopy(data) if data is not None else None

    async def _merge(self, collection: str, document_id: str, changes: dict[str, Any]) -> dict[str, Any]:
        documents = self._collections.get(collection, {})
        if document_id not in documents:
            raise DocumentNotFoundError(collection, document_id)
        documents[document_id].update(copy.deepcopy(changes))
        return copy.deepcopy(documents[document_id])

    async def _remove(self, collection: str, document_id: str) -> None:
        documents = self._collections.get(collection, {})
        if documents.pop(document_id, None) is None:
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
        rows = list(self._collections.get(collection, {}).items())

        if order_by is not None:
            rows = [(doc_id, data) for doc_id, data in rows if data.get(order_by) is not None]
            if start_at is not None:
                rows = [r for r in rows if sort_key(r[1][order_by]) >= sort_key(start_at)]
            if end_at is not None:
                rows = [r for r in rows if sort_key(r[1][order_by]) <= sort_key(end_at)]
            rows.sort(key=lambda r: (sort_key(r[1][order_by]), r[0]), reverse=descending)

        if limit is not None:
            rows = rows[:limit]
        return [(doc_id, copy.deepcopy(data)) for doc_id, data in rows]

    def __len__(self) -> int:
        return sum(len(docs) for docs in self._collections.values())
