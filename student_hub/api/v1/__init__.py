# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""API v1 routes package.

Each module provides a FastAPI router for one area of the site.

Modules:
    chat: AI tutor chat.
    notify: Enrollment notification passthrough.
    enrollments: Public enrollment submission.
    resources: Course catalog browsing and search.
    admin: Moderation dashboard (list, stream, status, delete, export).
"""

from fastapi import APIRouter

from student_hub.api.v1 import admin, chat, enrollments, notify, resources

router = APIRouter(prefix="/api")

router.include_router(chat.router, tags=["Tutor"])
router.include_router(notify.router, tags=["Notifications"])
router.include_router(enrollments.router, prefix="/enrollments", tags=["Enrollments"])
router.include_router(resources.router, prefix="/resources", tags=["Resources"])
router.include_router(admin.router, prefix="/admin", tags=["Admin"])

__all__ = ["router"]
