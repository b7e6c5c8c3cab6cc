# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Catalog service for read-only access to course resources."""

import logging

from student_hub.domains.catalog.schemas import Resource
from student_hub.infrastructure.store import RESOURCES, DocumentStore, StoreError

logger = logging.getLogger(__name__)

UNKNOWN_TITLE = "Unknown"
FEATURED_LIMIT = 6
SEARCH_LIMIT = 5

# Highest BMP private-use code point; closes a prefix range.
PREFIX_END = "\uf8ff"


class CatalogError(Exception):
    """Base exception for catalog errors."""


class ResourceNotFoundError(CatalogError):
    """Raised when a resource does not exist."""

    def __init__(self, resource_id: str) -> None:
        super().__init__(f"Resource {resource_id} not found")
        self.resource_id = resource_id


class CatalogUnavailableError(CatalogError):
    """Raised when the catalog cannot be read."""


class CatalogService:
    """Read-only queries over the resources collection.

    Args:
        store: Document store holding the catalog.
    """

    def __init__(self, store: DocumentStore) -> None:
        self.store = store

    async def get(self, resource_id: str) -> Resource:
        """Fetch one resource.

        Raises:
            ResourceNotFoundError: If it does not exist.
            CatalogUnavailableError: If the store fails.
        """
        try:
            document = await self.store.get(RESOURCES, resource_id)
        except StoreError as e:
            raise CatalogUnavailableError(str(e)) from e
        if document is None:
            raise ResourceNotFoundError(resource_id)
        return Resource.from_document(document)

    async def list_featured(self, limit: int = FEATURED_LIMIT) -> list[Resource]:
        """First resources of the catalog, for the landing page."""
        try:
            documents = await self.store.query(RESOURCES, limit=limit)
        except StoreError as e:
            raise CatalogUnavailableError(str(e)) from e
        if not documents:
            logger.warning("No documents found in %s collection", RESOURCES)
        return [Resource.from_document(d) for d in documents]

    async def search(self, prefix: str, limit: int = SEARCH_LIMIT) -> list[Resource]:
        """Case-sensitive title prefix search.

        Documents using the legacy capitalised Title field are searched
        when the current field yields nothing.

        Args:
            prefix: Leading characters of the title. Blank returns nothing.
            limit: Maximum number of results.

        Returns:
            Matching resources ordered by title.
        """
        if not prefix or not prefix.strip():
            return []

        try:
            for field in ("title", "Title"):
                documents = await self.store.query(
                    RESOURCES,
                    order_by=field,
                    start_at=prefix,
                    end_at=prefix + PREFIX_END,
                    limit=limit,
                )
                if documents:
                    return [Resource.from_document(d) for d in documents]
        except StoreError as e:
            logger.error("Catalog search failed for %r: %s", prefix, e)
            raise CatalogUnavailableError(str(e)) from e
        return []

    async def resolve_title(self, resource_id: str) -> str:
        """Title to snapshot on an enrollment; "Unknown" when unavailable."""
        try:
            resource = await self.get(resource_id)
        except CatalogError as e:
            logger.info("Could not resolve title for resource %s: %s", resource_id, e)
            return UNKNOWN_TITLE
        return resource.title or UNKNOWN_TITLE
