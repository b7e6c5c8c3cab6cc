# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Log notification channel.

Writes the enrollment announcement to the application log instead of
delivering it. This is the default channel until an email provider is
configured.
"""

from student_hub.infrastructure.notifications.channels.base import (
    BaseChannel,
    ChannelResult,
    ChannelType,
    NotificationPayload,
)


class LogChannel(BaseChannel):
    """Notification channel that only logs."""

    @property
    def channel_type(self) -> ChannelType:
        return ChannelType.LOG

    async def send(self, payload: NotificationPayload) -> ChannelResult:
        self.logger.info("[EMAIL NOTIFICATION]: %s", payload.message)
        return ChannelResult.sent(self.channel_type, mocked=True)
