# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Enrollment notification endpoint.

Endpoints:
- POST /notify - Announce an enrollment through the configured channels

Kept for clients that announce enrollments themselves. Submissions made
through POST /enrollments are announced automatically.
"""

import logging

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from student_hub.api.dependencies import get_notification_service
from student_hub.api.middleware.rate_limit import limiter, notify_limit
from student_hub.domains.enrollment.schemas import CamelModel
from student_hub.domains.tutor import ErrorResponse
from student_hub.infrastructure.notifications import (
    NotificationError,
    NotificationService,
)

logger = logging.getLogger(__name__)

router = APIRouter()


class NotifyRequest(CamelModel):
    """Enrollment announcement."""

    student_name: str = Field(..., min_length=1, max_length=200)
    student_email: str = Field(..., min_length=1, max_length=320)
    resource_title: str = Field(..., min_length=1, max_length=300)


class NotifyResponse(BaseModel):
    success: bool = True
    message: str


@router.post(
    "/notify",
    response_model=NotifyResponse,
    responses={500: {"model": ErrorResponse}},
    summary="Send an enrollment notification",
)
@limiter.limit(notify_limit)
async def notify(
    request: Request,
    body: NotifyRequest,
    notifier: NotificationService = Depends(get_notification_service),
) -> NotifyResponse | JSONResponse:
    """Deliver the notification and wait for the outcome."""
    payload = notifier.build_payload(
        body.student_name,
        body.student_email,
        body.resource_title,
    )
    try:
        await notifier.send(payload)
    except NotificationError as e:
        logger.error("Notification error: %s", e.message)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": e.message},
        )
    return NotifyResponse(message="Notification sent")
