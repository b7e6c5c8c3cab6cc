# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Enrollment and moderation error taxonomy.

Every error carries a message safe to show to the caller. Routers map
these to HTTP status codes; store exceptions never escape the services.
"""

from enum import Enum

from student_hub.infrastructure.notifications import NotificationError


class EnrollmentServiceError(Exception):
    """Base exception for enrollment service errors."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(EnrollmentServiceError):
    """Raised when a required field is missing or a value is outside its set.

    Attributes:
        field: Name of the offending field.
    """

    def __init__(self, field: str, message: str | None = None) -> None:
        super().__init__(message or f"{field} is required")
        self.field = field


class PersistenceFailure(str, Enum):
    """Why the store rejected a write."""

    PERMISSION_DENIED = "permission_denied"
    UNAVAILABLE = "unavailable"
    UNKNOWN = "unknown"


_USER_MESSAGES = {
    PersistenceFailure.PERMISSION_DENIED: (
        "Your enrollment was refused by the database access rules. "
        "Please contact the site administrator."
    ),
    PersistenceFailure.UNAVAILABLE: (
        "The enrollment service is temporarily unavailable. Please try again shortly."
    ),
    PersistenceFailure.UNKNOWN: (
        "Sorry, something went wrong while saving your enrollment. Please try again."
    ),
}


class PersistenceError(EnrollmentServiceError):
    """Raised when the store rejects or fails a write.

    Attributes:
        reason: Failure category.
        user_message: Actionable message for the submitter.
        original_error: The store exception.
    """

    def __init__(
        self,
        reason: PersistenceFailure,
        original_error: Exception | None = None,
    ) -> None:
        super().__init__(_USER_MESSAGES[reason])
        self.reason = reason
        self.user_message = _USER_MESSAGES[reason]
        self.original_error = original_error

    @property
    def is_permission_denied(self) -> bool:
        return self.reason == PersistenceFailure.PERMISSION_DENIED


class AuthorizationError(EnrollmentServiceError):
    """Raised when the acting principal is not an allow-listed admin."""

    def __init__(self, message: str = "Admin access required") -> None:
        super().__init__(message)


class EnrollmentNotFoundError(EnrollmentServiceError):
    """Raised when an enrollment does not exist."""

    def __init__(self, enrollment_id: str) -> None:
        super().__init__(f"Enrollment {enrollment_id} not found")
        self.enrollment_id = enrollment_id


class DuplicateSubmissionError(EnrollmentServiceError):
    """Raised when the same submission is already in flight."""

    def __init__(self) -> None:
        super().__init__("This enrollment is already being submitted.")


__all__ = [
    "EnrollmentServiceError",
    "ValidationError",
    "PersistenceFailure",
    "PersistenceError",
    "AuthorizationError",
    "EnrollmentNotFoundError",
    "DuplicateSubmissionError",
    "NotificationError",
]
