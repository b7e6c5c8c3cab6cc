# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Event infrastructure module for Student Hub.

Components:
- EventBus: In-memory pub/sub with pattern matching
- EventTypes: Centralized event type constants

Quick Start:
    from student_hub.infrastructure.events import EventBus, EventTypes

    bus = EventBus()
    bus.subscribe(EventTypes.Store.pattern("enrollments"), handler)
"""

from student_hub.infrastructure.events.bus import (
    EventBus,
    EventData,
    EventHandler,
)
from student_hub.infrastructure.events.types import EventTypes

__all__ = [
    "EventBus",
    "EventData",
    "EventHandler",
    "EventTypes",
]
