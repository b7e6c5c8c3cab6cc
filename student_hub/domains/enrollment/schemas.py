# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Enrollment schemas.

The persisted and wire layouts use camelCase keys (``studentName``,
``enrolledAt``); Python code uses snake_case attributes.
"""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from student_hub.infrastructure.store import Document


class EnrollmentStatus(str, Enum):
    """Moderation status of an enrollment."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class CamelModel(BaseModel):
    """Base model serializing to camelCase."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class Enrollment(CamelModel):
    """A student's request to join a course resource.

    Attributes:
        id: Store-assigned identifier.
        resource_id: Catalog entry the student enrolled in.
        resource_title: Catalog title at submission time.
        student_name: Name entered by the student.
        student_email: Email entered by the student.
        student_phone: Phone entered by the student.
        status: Moderation status.
        enrolled_at: Store-assigned creation time.
    """

    id: str
    resource_id: str = ""
    resource_title: str | None = None
    student_name: str | None = None
    student_email: str = ""
    student_phone: str = ""
    status: EnrollmentStatus = EnrollmentStatus.PENDING
    enrolled_at: datetime | None = None

    @classmethod
    def from_document(cls, document: Document) -> "Enrollment":
        data: dict[str, Any] = dict(document.data)
        data.pop("id", None)
        return cls.model_validate({"id": document.id, **data})


class EnrollmentSubmission(CamelModel):
    """Public enrollment form.

    When resource_title is omitted it is resolved from the catalog.
    """

    resource_id: str = Field(..., min_length=1, max_length=128)
    resource_title: str | None = Field(default=None, max_length=300)
    student_name: str = Field(..., max_length=200)
    student_email: str = Field(..., max_length=320)
    student_phone: str = Field(..., max_length=50)


class EnrollmentSubmitted(CamelModel):
    """Response to a successful submission."""

    id: str
    status: EnrollmentStatus = EnrollmentStatus.PENDING
    message: str = "Enrollment received. An administrator will review it shortly."


class EnrollmentStats(BaseModel):
    """Dashboard counters."""

    total: int = 0
    pending: int = 0
    approved: int = 0
    rejected: int = 0


class EnrollmentListResponse(BaseModel):
    """Admin list response."""

    enrollments: list[Enrollment]
    stats: EnrollmentStats
    total: int


class StatusUpdateRequest(BaseModel):
    """Admin status change request."""

    status: EnrollmentStatus
