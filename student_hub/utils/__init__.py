# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Utility functions and helpers for Student Hub.

This package contains cross-cutting utilities:
- logging: Structured logging with structlog
- datetime: Timezone-aware datetime operations
"""

from student_hub.utils.datetime import (
    ensure_utc,
    format_storage,
    format_us_date,
    is_expired,
    minutes_from_now,
    parse_storage,
    utc_now,
)
from student_hub.utils.logging import (
    bind_context,
    clear_context,
    get_logger,
    setup_logging,
)

__all__ = [
    # datetime
    "utc_now",
    "ensure_utc",
    "minutes_from_now",
    "is_expired",
    "format_us_date",
    "format_storage",
    "parse_storage",
    # logging
    "setup_logging",
    "get_logger",
    "bind_context",
    "clear_context",
]
