# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Notification System for Student Hub.

Announces new enrollments to the admins. Delivery is best effort and at
most once per enrollment.

Usage:
    from student_hub.infrastructure.notifications import create_notification_service

    service = create_notification_service(settings)
    service.dispatch(service.build_payload("Amina", "amina@example.com", "Algebra"))
"""

from student_hub.infrastructure.notifications.channels import (
    BaseChannel,
    ChannelResult,
    ChannelType,
    DeliveryStatus,
    EmailChannel,
    LogChannel,
    NotificationPayload,
)
from student_hub.infrastructure.notifications.service import (
    NotificationError,
    NotificationService,
    create_notification_service,
)

__all__ = [
    "NotificationService",
    "NotificationError",
    "create_notification_service",
    "NotificationPayload",
    "ChannelResult",
    "ChannelType",
    "DeliveryStatus",
    "BaseChannel",
    "LogChannel",
    "EmailChannel",
]
