# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Enrollment service for accepting student submissions.

This module provides the EnrollmentService class for:
- Validating the public enrollment form
- Persisting a pending enrollment with a store-assigned timestamp
- Announcing the enrollment through the notification sink

The announcement runs detached from the request: its failure is logged
and never changes the outcome of a submission.
"""

from __future__ import annotations

import logging

from student_hub.domains.enrollment.errors import (
    DuplicateSubmissionError,
    PersistenceError,
    PersistenceFailure,
    ValidationError,
)
from student_hub.domains.enrollment.schemas import EnrollmentStatus
from student_hub.infrastructure.notifications import NotificationService
from student_hub.infrastructure.store import (
    ENROLLMENTS,
    SERVER_TIMESTAMP,
    DocumentStore,
    PermissionDeniedError,
    StoreError,
    StoreUnavailableError,
)

logger = logging.getLogger(__name__)

UNKNOWN_RESOURCE_TITLE = "Unknown"


def _required(field: str, value: str | None) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(field)
    return str(value).strip()


class EnrollmentService:
    """Service accepting enrollment submissions.

    Attributes:
        store: Document store holding the enrollments collection.
        notifier: Notification sink, or None to disable announcements.
    """

    def __init__(
        self,
        store: DocumentStore,
        notifier: NotificationService | None = None,
    ) -> None:
        self.store = store
        self.notifier = notifier
        self._in_flight: set[tuple[str, str]] = set()

    async def submit(
        self,
        resource_id: str,
        resource_title: str | None,
        student_name: str,
        student_email: str,
        student_phone: str,
    ) -> str:
        """Create a pending enrollment.

        Args:
            resource_id: Catalog entry enrolled in.
            resource_title: Catalog title snapshot; blank becomes "Unknown".
            student_name: Required, non-blank.
            student_email: Required, non-blank.
            student_phone: Required, non-blank.

        Returns:
            The new enrollment id.

        Raises:
            ValidationError: If a required field is blank. Nothing is written.
            DuplicateSubmissionError: If the same submission is in flight.
            PersistenceError: If the store rejects or fails the write.
        """
        resource_id = _required("resource_id", resource_id)
        student_name = _required("student_name", student_name)
        student_email = _required("student_email", student_email)
        student_phone = _required("student_phone", student_phone)
        title = (resource_title or "").strip() or UNKNOWN_RESOURCE_TITLE

        key = (resource_id, student_email.lower())
        if key in self._in_flight:
            logger.info(
                "Rejected duplicate in-flight enrollment: resource=%s, email=%s",
                resource_id,
                student_email,
            )
            raise DuplicateSubmissionError()

        self._in_flight.add(key)
        try:
            document = await self.store.create(
                ENROLLMENTS,
                {
                    "resourceId": resource_id,
                    "resourceTitle": title,
                    "studentName": student_name,
                    "studentEmail": student_email,
                    "studentPhone": student_phone,
                    "status": EnrollmentStatus.PENDING.value,
                    "enrolledAt": SERVER_TIMESTAMP,
                },
            )
        except PermissionDeniedError as e:
            logger.warning("Enrollment write denied by access rules: %s", e)
            raise PersistenceError(PersistenceFailure.PERMISSION_DENIED, e) from e
        except StoreUnavailableError as e:
            logger.error("Enrollment store unavailable: %s", e)
            raise PersistenceError(PersistenceFailure.UNAVAILABLE, e) from e
        except StoreError as e:
            logger.error("Enrollment write failed: %s", e, exc_info=True)
            raise PersistenceError(PersistenceFailure.UNKNOWN, e) from e
        finally:
            self._in_flight.discard(key)

        logger.info(
            "Enrollment submitted: id=%s, resource=%s, email=%s",
            document.id,
            resource_id,
            student_email,
        )

        self._announce(document.id, student_name, student_email, title)
        return document.id

    def _announce(
        self,
        enrollment_id: str,
        student_name: str,
        student_email: str,
        resource_title: str,
    ) -> None:
        if self.notifier is None:
            return
        try:
            payload = self.notifier.build_payload(
                student_name,
                student_email,
                resource_title,
                enrollment_id=enrollment_id,
            )
            self.notifier.dispatch(payload)
        except Exception as e:
            # The enrollment is already committed.
            logger.error(
                "Could not schedule notification for enrollment %s: %s",
                enrollment_id,
                str(e),
                exc_info=True,
            )
