# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Moderation domain.

Admin review of enrollments: allow-list authorization, live snapshots,
status transitions, deletion, search and CSV export.
"""

from student_hub.domains.moderation.export import (
    CSV_HEADER,
    export_csv,
    export_filename,
    filter_enrollments,
    summarize,
)
from student_hub.domains.moderation.service import ModerationService
from student_hub.domains.moderation.subscription import (
    EnrollmentSubscription,
    load_snapshot,
)

__all__ = [
    "ModerationService",
    "EnrollmentSubscription",
    "load_snapshot",
    "CSV_HEADER",
    "export_csv",
    "export_filename",
    "filter_enrollments",
    "summarize",
]
