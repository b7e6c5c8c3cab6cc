# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Catalog domain: read-only course resources."""

from student_hub.domains.catalog.schemas import Resource
from student_hub.domains.catalog.service import (
    CatalogError,
    CatalogService,
    CatalogUnavailableError,
    ResourceNotFoundError,
)

__all__ = [
    "CatalogService",
    "Resource",
    "CatalogError",
    "ResourceNotFoundError",
    "CatalogUnavailableError",
]
