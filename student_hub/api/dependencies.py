# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""FastAPI dependency injection definitions.

Services are built once in the application lifespan and kept on
app.state. The functions here hand them to endpoints and enforce
authentication and the admin allow-list.

Example:
    @router.get("/admin/enrollments")
    async def list_enrollments(
        principal: Principal = Depends(require_admin),
        moderation: ModerationService = Depends(get_moderation_service),
    ):
        ...
"""

import logging
from typing import Any

from fastapi import Depends, HTTPException, Request, status
from starlette.requests import HTTPConnection

from student_hub.api.middleware.auth import get_current_principal
from student_hub.domains.auth import IdentityProvider, Principal
from student_hub.domains.catalog import CatalogService
from student_hub.domains.enrollment import EnrollmentService
from student_hub.domains.moderation import ModerationService
from student_hub.domains.tutor import TutorService
from student_hub.infrastructure.notifications import NotificationService

logger = logging.getLogger(__name__)


def _state(connection: HTTPConnection, name: str) -> Any:
    service = getattr(connection.app.state, name, None)
    if service is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"{name} not initialized",
        )
    return service


# =========================================================================
# Service Dependencies
# =========================================================================


def get_notification_service(connection: HTTPConnection) -> NotificationService:
    return _state(connection, "notification_service")


def get_enrollment_service(connection: HTTPConnection) -> EnrollmentService:
    """Application-wide enrollment service.

    A single instance is shared so its in-flight duplicate guard sees
    every concurrent submission.
    """
    return _state(connection, "enrollment_service")


def get_moderation_service(connection: HTTPConnection) -> ModerationService:
    return _state(connection, "moderation_service")


def get_catalog_service(connection: HTTPConnection) -> CatalogService:
    return _state(connection, "catalog_service")


def get_tutor_service(connection: HTTPConnection) -> TutorService:
    return _state(connection, "tutor_service")


def get_identity_provider(connection: HTTPConnection) -> IdentityProvider:
    return _state(connection, "identity")


# =========================================================================
# Authentication Dependencies
# =========================================================================


def require_auth(request: Request) -> Principal:
    """Require an authenticated principal.

    Raises:
        HTTPException: If not authenticated.
    """
    principal = get_current_principal(request)
    if not principal:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return principal


def require_admin(
    principal: Principal = Depends(require_auth),
    moderation: ModerationService = Depends(get_moderation_service),
) -> Principal:
    """Require a principal whose verified email is on the admin allow-list.

    Raises:
        HTTPException: If not authenticated or not an admin.
    """
    if not moderation.authorize(principal.verified_email):
        logger.info("Admin access denied for %s", principal.email or principal.uid)
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return principal
