# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Notification service for new-enrollment announcements.

The service fans a payload out to every configured channel. It is the
notification sink of the enrollment workflow:

1. send() delivers once and reports per-channel results
2. dispatch() runs send() as a detached task whose outcome is only logged
3. drain() waits for detached tasks (application shutdown, tests)

A failed notification is never retried and never reaches the student.
"""

import asyncio
import logging
from typing import TYPE_CHECKING, Any, Sequence

from student_hub.infrastructure.events import EventBus, EventTypes
from student_hub.infrastructure.notifications.channels import (
    BaseChannel,
    ChannelResult,
    DeliveryStatus,
    EmailChannel,
    LogChannel,
    NotificationPayload,
)

if TYPE_CHECKING:
    from student_hub.core.config.settings import Settings

logger = logging.getLogger(__name__)


class NotificationError(Exception):
    """Raised when a notification could not be delivered on any channel.

    Attributes:
        message: Human-readable error description.
        results: Per-channel results of the attempt.
    """

    def __init__(self, message: str, results: Sequence[ChannelResult] = ()) -> None:
        super().__init__(message)
        self.message = message
        self.results = list(results)


class NotificationService:
    """Deliver enrollment notifications through configured channels.

    Args:
        channels: Channels to deliver through.
        recipient_email: Admin inbox for channels that need one.
        event_bus: Optional bus receiving delivery outcome events.
    """

    def __init__(
        self,
        channels: Sequence[BaseChannel],
        recipient_email: str | None = None,
        event_bus: EventBus | None = None,
    ) -> None:
        self._channels = list(channels)
        self._recipient_email = recipient_email
        self._event_bus = event_bus
        self._pending: set[asyncio.Task[Any]] = set()

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    def build_payload(
        self,
        student_name: str,
        student_email: str,
        resource_title: str,
        **data: Any,
    ) -> NotificationPayload:
        return NotificationPayload(
            student_name=student_name,
            student_email=student_email,
            resource_title=resource_title,
            recipient_email=self._recipient_email,
            data=data,
        )

    async def send(self, payload: NotificationPayload) -> list[ChannelResult]:
        """Deliver a payload through every channel concurrently.

        Args:
            payload: Notification to deliver.

        Returns:
            One result per channel.

        Raises:
            NotificationError: If no channel delivered and at least one failed.
        """
        results = await asyncio.gather(
            *[self._send_one(channel, payload) for channel in self._channels]
        )

        sent = [r for r in results if r.status == DeliveryStatus.SENT]
        failed = [r for r in results if r.status == DeliveryStatus.FAILED]

        if failed and not sent:
            await self._publish(EventTypes.Notification.FAILED, payload, results)
            raise NotificationError(
                "; ".join(r.error_message or r.channel.value for r in failed),
                results,
            )

        await self._publish(EventTypes.Notification.DISPATCHED, payload, results)
        return results

    def dispatch(self, payload: NotificationPayload) -> asyncio.Task[Any]:
        """Send a payload in a detached task.

        The caller is never affected by the outcome. Failures are logged.

        Returns:
            The scheduled task.
        """
        task = asyncio.create_task(self._send_detached(payload))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def drain(self, timeout: float | None = None) -> None:
        """Wait for detached notifications to finish.

        Args:
            timeout: Seconds to wait before giving up on stragglers.
        """
        if not self._pending:
            return
        done, pending = await asyncio.wait(set(self._pending), timeout=timeout)
        if pending:
            logger.warning("%d notifications still pending at shutdown", len(pending))
            for task in pending:
                task.cancel()

    async def _send_detached(self, payload: NotificationPayload) -> None:
        try:
            results = await self.send(payload)
        except NotificationError as e:
            logger.warning(
                "Enrollment notification failed for %s: %s",
                payload.student_email,
                e.message,
            )
        except Exception as e:
            logger.error(
                "Enrollment notification crashed for %s: %s",
                payload.student_email,
                str(e),
                exc_info=True,
            )
        else:
            logger.info(
                "Enrollment notification for %s: %s",
                payload.student_email,
                ", ".join(f"{r.channel.value}={r.status.value}" for r in results),
            )

    async def _send_one(self, channel: BaseChannel, payload: NotificationPayload) -> ChannelResult:
        try:
            return await channel.send(payload)
        except Exception as e:
            logger.error(
                "Channel %s raised while sending: %s",
                channel.channel_type.value,
                str(e),
                exc_info=True,
            )
            return ChannelResult.failed(channel.channel_type, str(e))

    async def _publish(
        self,
        event_type: str,
        payload: NotificationPayload,
        results: Sequence[ChannelResult],
    ) -> None:
        if self._event_bus is None:
            return
        await self._event_bus.publish(
            event_type,
            {
                "student_email": payload.student_email,
                "resource_title": payload.resource_title,
                "results": [r.to_dict() for r in results],
            },
        )


def create_notification_service(
    settings: "Settings",
    event_bus: EventBus | None = None,
) -> NotificationService:
    """Build the notification service from settings.

    Unknown channel names are ignored with a warning. The log channel is
    used when no valid channel is configured.
    """
    channels: list[BaseChannel] = []
    for name in settings.notifications.channel_list:
        if name == "log":
            channels.append(LogChannel())
        elif name == "email":
            channels.append(EmailChannel(settings.smtp))
        else:
            logger.warning("Unknown notification channel ignored: %s", name)

    if not channels:
        channels.append(LogChannel())

    return NotificationService(
        channels,
        recipient_email=settings.notifications.admin_recipient,
        event_bus=event_bus,
    )
