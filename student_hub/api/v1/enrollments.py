# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Public enrollment submission endpoint.

Endpoints:
- POST /enrollments - Submit an enrollment for a course resource
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import JSONResponse

from student_hub.api.dependencies import get_catalog_service, get_enrollment_service
from student_hub.api.middleware.rate_limit import limiter, submit_limit
from student_hub.domains.catalog import CatalogService
from student_hub.domains.enrollment import (
    DuplicateSubmissionError,
    EnrollmentService,
    EnrollmentSubmission,
    EnrollmentSubmitted,
    PersistenceError,
    ValidationError,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def persistence_http_error(error: PersistenceError) -> HTTPException:
    """Map a persistence failure to 403 (access rules) or 503."""
    return HTTPException(
        status_code=(
            status.HTTP_403_FORBIDDEN
            if error.is_permission_denied
            else status.HTTP_503_SERVICE_UNAVAILABLE
        ),
        detail=error.user_message,
    )


def _wire_field(field: str) -> str:
    """Name of a submission field as the client spells it (camelCase)."""
    info = EnrollmentSubmission.model_fields.get(field)
    return info.alias if info is not None and info.alias else field


@router.post(
    "",
    response_model=EnrollmentSubmitted,
    response_model_by_alias=True,
    status_code=status.HTTP_201_CREATED,
    summary="Submit an enrollment",
    description="""
Enroll a student in a course resource. The enrollment starts as
``pending`` until an administrator reviews it.

When ``resourceTitle`` is omitted it is taken from the catalog.
""",
)
@limiter.limit(submit_limit)
async def submit_enrollment(
    request: Request,
    body: EnrollmentSubmission,
    enrollments: EnrollmentService = Depends(get_enrollment_service),
    catalog: CatalogService = Depends(get_catalog_service),
) -> EnrollmentSubmitted | JSONResponse:
    title = body.resource_title
    if title is None:
        title = await catalog.resolve_title(body.resource_id)

    try:
        enrollment_id = await enrollments.submit(
            resource_id=body.resource_id,
            resource_title=title,
            student_name=body.student_name,
            student_email=body.student_email,
            student_phone=body.student_phone,
        )
    except ValidationError as e:
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"detail": e.message, "field": _wire_field(e.field)},
        )
    except DuplicateSubmissionError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=e.message)
    except PersistenceError as e:
        raise persistence_http_error(e)

    return EnrollmentSubmitted(id=enrollment_id)
