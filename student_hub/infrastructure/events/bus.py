# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""In-process event bus.

Document stores publish a change event after every committed write.
Live moderation subscriptions (and through them the admin WebSocket
stream) listen for those events. Subscriptions are keyed by an fnmatch
pattern, so an exact event name and a wildcard such as
``store.enrollments.*`` are registered the same way.

Example:
    bus = EventBus()

    async def on_change(event: EventData) -> None:
        print(event.event_type, event.payload["document_id"])

    bus.subscribe(EventTypes.Store.pattern("enrollments"), on_change)
    await bus.publish("store.enrollments.created", {"document_id": "abc"})
"""

import asyncio
import fnmatch
import logging
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Awaitable, Callable
from uuid import uuid4

from student_hub.utils.datetime import utc_now

logger = logging.getLogger(__name__)

EventHandler = Callable[["EventData"], Awaitable[None]]


@dataclass
class EventData:
    """One published event.

    Attributes:
        event_type: Dotted event name, e.g. ``store.enrollments.updated``.
        payload: Event specific data.
        event_id: Unique id of this publication.
        timestamp: Publication time (UTC).
    """

    event_type: str
    payload: dict[str, Any]
    event_id: str = field(default_factory=lambda: uuid4().hex)
    timestamp: datetime = field(default_factory=utc_now)


class EventBus:
    """Async publish/subscribe within one process and one event loop.

    publish() awaits every matching handler, so when it returns all
    subscribers have seen the event. A handler that raises is logged and
    does not affect the others or the publisher.
    """

    def __init__(self) -> None:
        self._subscriptions: defaultdict[str, list[EventHandler]] = defaultdict(list)

    def subscribe(self, pattern: str, handler: EventHandler) -> None:
        """Register a handler for an event name or fnmatch pattern."""
        self._subscriptions[pattern].append(handler)
        logger.debug("Subscribed handler to %s", pattern)

    def unsubscribe(self, pattern: str, handler: EventHandler) -> bool:
        """Remove a handler registered with subscribe().

        Returns:
            False if the handler was not registered under this pattern.
        """
        handlers = self._subscriptions.get(pattern)
        if not handlers or handler not in handlers:
            return False
        handlers.remove(handler)
        if not handlers:
            del self._subscriptions[pattern]
        logger.debug("Unsubscribed handler from %s", pattern)
        return True

    def _matching(self, event_type: str) -> list[EventHandler]:
        return [
            handler
            for pattern, handlers in self._subscriptions.items()
            if pattern == event_type or fnmatch.fnmatchcase(event_type, pattern)
            for handler in handlers
        ]

    async def publish(self, event_type: str, payload: dict[str, Any]) -> EventData:
        """Deliver an event to every matching handler concurrently.

        Args:
            event_type: Dotted event name.
            payload: Event data.

        Returns:
            The published event.
        """
        event = EventData(event_type=event_type, payload=payload)
        handlers = self._matching(event_type)
        if not handlers:
            return event

        logger.debug("Publishing %s to %d handler(s)", event_type, len(handlers))
        results = await asyncio.gather(
            *(handler(event) for handler in handlers),
            return_exceptions=True,
        )
        for result in results:
            if isinstance(result, Exception):
                logger.error(
                    "Event handler failed for %s: %s",
                    event_type,
                    result,
                    exc_info=result,
                )
        return event

    def handler_count(self, pattern: str | None = None) -> int:
        """Number of registered handlers, overall or for one pattern."""
        if pattern is not None:
            return len(self._subscriptions.get(pattern, ()))
        return sum(len(handlers) for handlers in self._subscriptions.values())

    def clear(self) -> None:
        """Drop every subscription."""
        self._subscriptions.clear()
