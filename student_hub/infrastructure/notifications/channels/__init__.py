# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Notification channels.

Channels:
- LogChannel: Writes the announcement to the application log
- EmailChannel: Sends it to the admin inbox over SMTP
"""

from student_hub.infrastructure.notifications.channels.base import (
    BaseChannel,
    ChannelResult,
    ChannelType,
    DeliveryStatus,
    NotificationPayload,
)
from student_hub.infrastructure.notifications.channels.email import EmailChannel
from student_hub.infrastructure.notifications.channels.log import LogChannel

__all__ = [
    "BaseChannel",
    "ChannelResult",
    "ChannelType",
    "DeliveryStatus",
    "NotificationPayload",
    "EmailChannel",
    "LogChannel",
]
