# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pure helpers over enrollment snapshots: search, counters and CSV export."""

from datetime import date
from typing import Sequence

from student_hub.domains.enrollment.schemas import (
    Enrollment,
    EnrollmentStats,
    EnrollmentStatus,
)
from student_hub.utils.datetime import format_us_date

CSV_HEADER = "ID,Student Name,Email,Phone,Course,Status,Date"
MISSING = "N/A"

_SPECIAL_CHARS = (",", '"', "\n", "\r")


def _quote(value: str) -> str:
    return '"' + value.replace('"', '""') + '"'


def _cell(value: str) -> str:
    if any(char in value for char in _SPECIAL_CHARS):
        return _quote(value)
    return value


def filter_enrollments(enrollments: Sequence[Enrollment], search_term: str | None) -> list[Enrollment]:
    """Case-insensitive substring search on student name or course title.

    Args:
        enrollments: Snapshot to search.
        search_term: Text to look for. Empty returns the input unchanged.

    Returns:
        Matching enrollments in their original order.
    """
    term = (search_term or "").lower()
    if not term:
        return list(enrollments)

    return [
        e
        for e in enrollments
        if term in (e.student_name or "").lower() or term in (e.resource_title or "").lower()
    ]


def summarize(enrollments: Sequence[Enrollment]) -> EnrollmentStats:
    """Count enrollments per status."""
    stats = EnrollmentStats(total=len(enrollments))
    for e in enrollments:
        if e.status == EnrollmentStatus.PENDING:
            stats.pending += 1
        elif e.status == EnrollmentStatus.APPROVED:
            stats.approved += 1
        elif e.status == EnrollmentStatus.REJECTED:
            stats.rejected += 1
    return stats


def export_csv(enrollments: Sequence[Enrollment]) -> str:
    """Render enrollments as CSV text.

    The student name and course title are always quoted; other cells are
    quoted only when they contain a delimiter, a quote or a line break.
    Embedded quotes are doubled.

    Args:
        enrollments: Rows to export, in order.

    Returns:
        Header line followed by one line per enrollment, joined by newlines.

    Example:
        e1,"Amina",amina@example.com,+252 61 000,"Algebra",approved,3/7/2024
    """
    lines = [CSV_HEADER]
    for e in enrollments:
        lines.append(
            ",".join(
                [
                    _cell(e.id),
                    _quote(e.student_name or MISSING),
                    _cell(e.student_email),
                    _cell(e.student_phone),
                    _quote(e.resource_title or MISSING),
                    e.status.value,
                    format_us_date(e.enrolled_at) or MISSING,
                ]
            )
        )
    return "\n".join(lines)


def export_filename(day: date) -> str:
    """Download name for an export made on the given day."""
    return f"enrollments_{day.isoformat()}.csv"
