# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Course catalog endpoints.

Endpoints:
- GET / - Featured resources for the landing page
- GET /search - Title prefix search
- GET /{resource_id} - Resource details

The catalog is read-only through the API.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status

from student_hub.api.dependencies import get_catalog_service
from student_hub.domains.catalog import (
    CatalogService,
    CatalogUnavailableError,
    Resource,
    ResourceNotFoundError,
)
from student_hub.domains.catalog.service import FEATURED_LIMIT, SEARCH_LIMIT

logger = logging.getLogger(__name__)

router = APIRouter()


def _unavailable(error: CatalogUnavailableError) -> HTTPException:
    logger.error("Catalog unavailable: %s", error)
    return HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail="The course catalog is temporarily unavailable",
    )


@router.get(
    "",
    response_model=list[Resource],
    response_model_by_alias=True,
    summary="List featured resources",
)
async def list_resources(
    limit: int = Query(FEATURED_LIMIT, ge=1, le=50),
    catalog: CatalogService = Depends(get_catalog_service),
) -> list[Resource]:
    try:
        return await catalog.list_featured(limit)
    except CatalogUnavailableError as e:
        raise _unavailable(e)


@router.get(
    "/search",
    response_model=list[Resource],
    response_model_by_alias=True,
    summary="Search resources by title prefix",
    description="Case-sensitive title prefix match. A blank query returns nothing.",
)
async def search_resources(
    q: str = Query("", max_length=200),
    limit: int = Query(SEARCH_LIMIT, ge=1, le=20),
    catalog: CatalogService = Depends(get_catalog_service),
) -> list[Resource]:
    try:
        return await catalog.search(q, limit)
    except CatalogUnavailableError as e:
        raise _unavailable(e)


@router.get(
    "/{resource_id}",
    response_model=Resource,
    response_model_by_alias=True,
    summary="Get resource details",
)
async def get_resource(
    resource_id: str,
    catalog: CatalogService = Depends(get_catalog_service),
) -> Resource:
    try:
        return await catalog.get(resource_id)
    except ResourceNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except CatalogUnavailableError as e:
        raise _unavailable(e)
