# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Moderation service for admin review of enrollments.

This module provides the ModerationService class for:
- Checking principals against the admin allow-list
- Live and one-shot views of all enrollments
- Status transitions (any status to any status)
- Confirmed hard deletion

Every mutating operation re-checks the acting principal, so callers
cannot bypass authorization by reaching the service directly.
"""

from __future__ import annotations

import logging
from typing import Iterable, Sequence

from student_hub.domains.enrollment.errors import (
    AuthorizationError,
    EnrollmentNotFoundError,
    PersistenceError,
    PersistenceFailure,
    ValidationError,
)
from student_hub.domains.enrollment.schemas import (
    Enrollment,
    EnrollmentStats,
    EnrollmentStatus,
)
from student_hub.domains.moderation.export import (
    export_csv,
    filter_enrollments,
    summarize,
)
from student_hub.domains.moderation.subscription import (
    EnrollmentSubscription,
    load_snapshot,
)
from student_hub.infrastructure.events import EventBus
from student_hub.infrastructure.store import (
    ENROLLMENTS,
    DocumentNotFoundError,
    DocumentStore,
    PermissionDeniedError,
    StoreError,
    StoreUnavailableError,
)

logger = logging.getLogger(__name__)


def _normalize_email(email: str | None) -> str:
    return (email or "").strip().lower()


def _persistence_error(error: StoreError) -> PersistenceError:
    if isinstance(error, PermissionDeniedError):
        return PersistenceError(PersistenceFailure.PERMISSION_DENIED, error)
    if isinstance(error, StoreUnavailableError):
        return PersistenceError(PersistenceFailure.UNAVAILABLE, error)
    return PersistenceError(PersistenceFailure.UNKNOWN, error)


class ModerationService:
    """Service for admin moderation of enrollments.

    Attributes:
        store: Document store holding the enrollments collection.
        event_bus: Bus carrying store change events for subscriptions.
    """

    def __init__(
        self,
        store: DocumentStore,
        admin_emails: Iterable[str],
        event_bus: EventBus,
    ) -> None:
        self.store = store
        self.event_bus = event_bus
        self._admin_emails = frozenset(
            _normalize_email(email) for email in admin_emails if _normalize_email(email)
        )
        if not self._admin_emails:
            logger.warning("Admin allow-list is empty; moderation is locked")

    # =========================================================================
    # Authorization
    # =========================================================================

    def authorize(self, principal_email: str | None) -> bool:
        """Check an email against the admin allow-list (case-insensitive)."""
        email = _normalize_email(principal_email)
        return bool(email) and email in self._admin_emails

    def _require_admin(self, acting_email: str | None, action: str) -> None:
        if not self.authorize(acting_email):
            logger.warning("Unauthorized %s attempt by %s", action, acting_email or "<anonymous>")
            raise AuthorizationError()

    # =========================================================================
    # Reads
    # =========================================================================

    def subscribe(self) -> EnrollmentSubscription:
        """Open a live view of all enrollments, newest first."""
        return EnrollmentSubscription(self.store, self.event_bus)

    async def list_enrollments(self) -> list[Enrollment]:
        """Current snapshot of all enrollments, newest first.

        Raises:
            PersistenceError: If the store cannot be read.
        """
        return await load_snapshot(self.store)

    async def get(self, enrollment_id: str) -> Enrollment:
        """Read one enrollment.

        Raises:
            EnrollmentNotFoundError: If it does not exist.
            PersistenceError: If the store cannot be read.
        """
        try:
            document = await self.store.get(ENROLLMENTS, enrollment_id)
        except StoreError as e:
            raise _persistence_error(e) from e
        if document is None:
            raise EnrollmentNotFoundError(enrollment_id)
        return Enrollment.from_document(document)

    # =========================================================================
    # Mutations
    # =========================================================================

    async def set_status(
        self,
        enrollment_id: str,
        new_status: EnrollmentStatus | str,
        acting_email: str | None,
    ) -> Enrollment:
        """Change the moderation status of an enrollment.

        Any status may follow any status. Setting the current status again
        leaves the enrollment unchanged.

        Args:
            enrollment_id: Enrollment to change.
            new_status: Target status.
            acting_email: Email of the admin performing the change.

        Returns:
            The updated enrollment.

        Raises:
            AuthorizationError: If acting_email is not an admin.
            ValidationError: If new_status is not a known status.
            EnrollmentNotFoundError: If the enrollment does not exist.
            PersistenceError: If the store rejects the write.
        """
        self._require_admin(acting_email, "status change")

        try:
            status = EnrollmentStatus(new_status)
        except ValueError as e:
            raise ValidationError("status", f"Unknown status: {new_status}") from e

        try:
            document = await self.store.update(
                ENROLLMENTS, enrollment_id, {"status": status.value}
            )
        except DocumentNotFoundError as e:
            raise EnrollmentNotFoundError(enrollment_id) from e
        except StoreError as e:
            logger.error("Status update failed for %s: %s", enrollment_id, e)
            raise _persistence_error(e) from e

        logger.info(
            "Enrollment status changed: id=%s, status=%s, by=%s",
            enrollment_id,
            status.value,
            acting_email,
        )
        return Enrollment.from_document(document)

    async def remove(
        self,
        enrollment_id: str,
        acting_email: str | None,
        confirmed: bool,
    ) -> bool:
        """Hard-delete an enrollment once the admin has confirmed.

        Args:
            enrollment_id: Enrollment to delete.
            acting_email: Email of the admin performing the deletion.
            confirmed: Answer to the confirmation prompt.

        Returns:
            True if deleted, False if the admin declined.

        Raises:
            AuthorizationError: If acting_email is not an admin.
            EnrollmentNotFoundError: If the enrollment does not exist.
            PersistenceError: If the store rejects the delete.
        """
        self._require_admin(acting_email, "delete")

        if not confirmed:
            logger.info("Deletion of %s declined by %s", enrollment_id, acting_email)
            return False

        try:
            await self.store.delete(ENROLLMENTS, enrollment_id)
        except DocumentNotFoundError as e:
            raise EnrollmentNotFoundError(enrollment_id) from e
        except StoreError as e:
            logger.error("Delete failed for %s: %s", enrollment_id, e)
            raise _persistence_error(e) from e

        logger.info("Enrollment deleted: id=%s, by=%s", enrollment_id, acting_email)
        return True

    # =========================================================================
    # Snapshot helpers
    # =========================================================================

    @staticmethod
    def filter(enrollments: Sequence[Enrollment], search_term: str | None) -> list[Enrollment]:
        return filter_enrollments(enrollments, search_term)

    @staticmethod
    def export(enrollments: Sequence[Enrollment]) -> str:
        return export_csv(enrollments)

    @staticmethod
    def summarize(enrollments: Sequence[Enrollment]) -> EnrollmentStats:
        return summarize(enrollments)
