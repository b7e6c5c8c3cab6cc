# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Centralized event type definitions for Student Hub.

Store change events follow the layout store.<collection>.<change>
so subscribers can listen to one collection with a wildcard.
"""


class EventTypes:
    """All event types in Student Hub organized by domain."""

    class Store:
        """Document store change events."""

        CREATED = "created"
        UPDATED = "updated"
        DELETED = "deleted"

        @staticmethod
        def changed(collection: str, change: str) -> str:
            """Event type for one change on one collection."""
            return f"store.{collection}.{change}"

        @staticmethod
        def pattern(collection: str) -> str:
            """Wildcard matching every change on a collection."""
            return f"store.{collection}.*"

    class Notification:
        """Notification delivery events."""

        DISPATCHED = "notification.dispatched"
        FAILED = "notification.failed"
