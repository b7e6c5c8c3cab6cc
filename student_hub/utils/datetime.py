# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""DateTime utilities for Student Hub.

All timestamps handled by the service are timezone-aware UTC datetimes.
Stores assign them, the API serializes them as ISO 8601 and the CSV
export renders them as US locale dates.

Usage:
------
    from student_hub.utils.datetime import utc_now

    now = utc_now()
"""

from datetime import datetime, timedelta, timezone

# Fixed-width layout so that lexical order equals chronological order.
STORAGE_FORMAT = "%Y-%m-%dT%H:%M:%S.%fZ"


def utc_now() -> datetime:
    """Get current UTC time as timezone-aware datetime.

    Returns:
        Timezone-aware datetime representing current UTC time.
    """
    return datetime.now(timezone.utc)


def ensure_utc(dt: datetime | None) -> datetime | None:
    """Ensure a datetime is timezone-aware UTC.

    Args:
        dt: A datetime object (naive or aware) or None.

    Returns:
        Timezone-aware UTC datetime or None.

    Note:
        - If dt is None, returns None
        - If dt is naive, assumes UTC and adds tzinfo
        - If dt is aware, converts to UTC
    """
    if dt is None:
        return None

    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)

    return dt.astimezone(timezone.utc)


def minutes_from_now(minutes: int) -> datetime:
    """Get a datetime N minutes from now.

    Args:
        minutes: Number of minutes to add.

    Returns:
        Timezone-aware UTC datetime.
    """
    return utc_now() + timedelta(minutes=minutes)


def is_expired(expiry: datetime | None) -> bool:
    """Check if a datetime has passed (is expired).

    Args:
        expiry: The expiry datetime to check.

    Returns:
        True if expired or expiry is None, False otherwise.
    """
    if expiry is None:
        return True

    return utc_now() > ensure_utc(expiry)


def format_us_date(dt: datetime | None) -> str | None:
    """Format a datetime as a US locale date (M/D/YYYY).

    Args:
        dt: Datetime to format, or None.

    Returns:
        Date string without zero padding, or None.

    Example:
        >>> format_us_date(datetime(2024, 3, 7, tzinfo=timezone.utc))
        '3/7/2024'
    """
    if dt is None:
        return None
    dt = ensure_utc(dt)
    return f"{dt.month}/{dt.day}/{dt.year}"


def format_storage(dt: datetime) -> str:
    """Serialize a datetime into the fixed-width storage format."""
    return ensure_utc(dt).strftime(STORAGE_FORMAT)


def parse_storage(value: str) -> datetime:
    """Parse a datetime written by format_storage."""
    return datetime.strptime(value, STORAGE_FORMAT).replace(tzinfo=timezone.utc)
