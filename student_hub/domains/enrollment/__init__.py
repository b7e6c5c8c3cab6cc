# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Enrollment domain.

Provides the EnrollmentService for accepting public submissions, the
Enrollment schemas and the error taxonomy shared with moderation.

Example:
    service = EnrollmentService(store, notifier)
    enrollment_id = await service.submit(
        "res-1", "Algebra", "Amina", "amina@example.com", "+252 61 000 0000"
    )
"""

from student_hub.domains.enrollment.errors import (
    AuthorizationError,
    DuplicateSubmissionError,
    EnrollmentNotFoundError,
    EnrollmentServiceError,
    NotificationError,
    PersistenceError,
    PersistenceFailure,
    ValidationError,
)
from student_hub.domains.enrollment.schemas import (
    Enrollment,
    EnrollmentListResponse,
    EnrollmentStats,
    EnrollmentStatus,
    EnrollmentSubmission,
    EnrollmentSubmitted,
    StatusUpdateRequest,
)
from student_hub.domains.enrollment.service import (
    UNKNOWN_RESOURCE_TITLE,
    EnrollmentService,
)

__all__ = [
    # Service
    "EnrollmentService",
    "UNKNOWN_RESOURCE_TITLE",
    # Schemas
    "Enrollment",
    "EnrollmentStatus",
    "EnrollmentSubmission",
    "EnrollmentSubmitted",
    "EnrollmentStats",
    "EnrollmentListResponse",
    "StatusUpdateRequest",
    # Errors
    "EnrollmentServiceError",
    "ValidationError",
    "PersistenceError",
    "PersistenceFailure",
    "AuthorizationError",
    "EnrollmentNotFoundError",
    "DuplicateSubmissionError",
    "NotificationError",
]
