# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Shared types for enrollment notification channels.

A channel delivers one NotificationPayload through one medium and
reports the outcome as a ChannelResult. Channels never retry; an
enrollment is announced at most once.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from student_hub.utils.datetime import utc_now


class ChannelType(str, Enum):
    LOG = "log"
    EMAIL = "email"


class DeliveryStatus(str, Enum):
    SENT = "sent"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass
class NotificationPayload:
    """A new enrollment to announce.

    Attributes:
        student_name: Name entered on the form.
        student_email: Email entered on the form.
        resource_title: Course the student enrolled in.
        recipient_email: Inbox of the person notified, for channels that need one.
        data: Extra context (e.g. the enrollment id).
    """

    student_name: str
    student_email: str
    resource_title: str
    recipient_email: str | None = None
    data: dict[str, Any] = field(default_factory=dict)

    @property
    def title(self) -> str:
        return "New student enrollment"

    @property
    def message(self) -> str:
        return (
            f"New! {self.student_name} ({self.student_email}) "
            f"enrolled in {self.resource_title}."
        )


@dataclass
class ChannelResult:
    """Outcome of one delivery attempt.

    Attributes:
        channel: Channel that made the attempt.
        status: Sent, failed or skipped.
        message_id: Provider message id, when the medium has one.
        error_message: Why the attempt failed or was skipped.
        finished_at: When the attempt ended.
        metadata: Channel specific details.
    """

    channel: ChannelType
    status: DeliveryStatus
    message_id: str | None = None
    error_message: str | None = None
    finished_at: datetime = field(default_factory=utc_now)
    metadata: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def sent(
        cls,
        channel: ChannelType,
        message_id: str | None = None,
        **metadata: Any,
    ) -> "ChannelResult":
        return cls(channel, DeliveryStatus.SENT, message_id=message_id, metadata=metadata)

    @classmethod
    def failed(cls, channel: ChannelType, error: str) -> "ChannelResult":
        return cls(channel, DeliveryStatus.FAILED, error_message=error)

    @classmethod
    def skipped(cls, channel: ChannelType, reason: str) -> "ChannelResult":
        return cls(channel, DeliveryStatus.SKIPPED, error_message=reason)

    @property
    def succeeded(self) -> bool:
        return self.status == DeliveryStatus.SENT

    def to_dict(self) -> dict[str, Any]:
        """Plain form for event payloads and logs."""
        return {
            "channel": self.channel.value,
            "status": self.status.value,
            "message_id": self.message_id,
            "error_message": self.error_message,
            "finished_at": self.finished_at.isoformat(),
            "metadata": self.metadata,
        }


class BaseChannel(ABC):
    """A delivery medium.

    send() reports delivery problems through the returned result instead
    of raising.
    """

    def __init__(self) -> None:
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    @property
    @abstractmethod
    def channel_type(self) -> ChannelType: ...

    @abstractmethod
    async def send(self, payload: NotificationPayload) -> ChannelResult:
        """Deliver the payload once."""
