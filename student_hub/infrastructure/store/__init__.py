# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Document store adapters.

Components:
- DocumentStore: Abstract adapter with access rules, server timestamps
  and change events
- InMemoryDocumentStore: Process-local store
- SQLAlchemyDocumentStore: Persistent store over an async engine
- create_store: Build the configured adapter
"""

from student_hub.infrastructure.store.base import (
    SERVER_TIMESTAMP,
    Document,
    DocumentNotFoundError,
    DocumentStore,
    PermissionDeniedError,
    StoreError,
    StoreUnavailableError,
)
from student_hub.infrastructure.store.factory import (
    ENROLLMENTS,
    READ_ONLY_COLLECTIONS,
    RESOURCES,
    create_store,
)
from student_hub.infrastructure.store.memory import InMemoryDocumentStore
from student_hub.infrastructure.store.sql import SQLAlchemyDocumentStore

__all__ = [
    "SERVER_TIMESTAMP",
    "Document",
    "DocumentStore",
    "InMemoryDocumentStore",
    "SQLAlchemyDocumentStore",
    "create_store",
    "ENROLLMENTS",
    "RESOURCES",
    "READ_ONLY_COLLECTIONS",
    # Errors
    "StoreError",
    "PermissionDeniedError",
    "StoreUnavailableError",
    "DocumentNotFoundError",
]
