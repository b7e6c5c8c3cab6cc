# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Email notification channel using async SMTP.

Sends the new-enrollment announcement to the admin inbox with aiosmtplib.
Both plain text and HTML parts are generated.

Configuration comes from SMTPSettings (SMTP_* environment variables);
the recipient is NOTIFY_ADMIN_RECIPIENT.
"""

from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import make_msgid
from html import escape

import aiosmtplib

from student_hub.core.config.settings import SMTPSettings
from student_hub.infrastructure.notifications.channels.base import (
    BaseChannel,
    ChannelResult,
    ChannelType,
    NotificationPayload,
)


class EmailChannel(BaseChannel):
    """Email notification channel using async SMTP.

    Args:
        smtp: SMTP server settings.
    """

    def __init__(self, smtp: SMTPSettings) -> None:
        super().__init__()
        self._smtp = smtp
        if not smtp.is_configured:
            self.logger.warning(
                "Email notifications disabled: SMTP_HOST, SMTP_USERNAME, "
                "SMTP_PASSWORD, or SMTP_FROM_EMAIL not set"
            )

    @property
    def channel_type(self) -> ChannelType:
        return ChannelType.EMAIL

    async def send(self, payload: NotificationPayload) -> ChannelResult:
        """Send email notification via SMTP.

        Args:
            payload: The notification payload.

        Returns:
            ChannelResult with delivery status.
        """
        if not self._smtp.is_configured:
            return ChannelResult.skipped(self.channel_type, "SMTP configuration incomplete")

        if not payload.recipient_email:
            return ChannelResult.skipped(self.channel_type, "No recipient email address")

        message = self._build_email_message(payload)
        try:
            await aiosmtplib.send(
                message,
                hostname=self._smtp.host,
                port=self._smtp.port,
                username=self._smtp.username,
                password=self._smtp.password.get_secret_value() if self._smtp.password else None,
                start_tls=self._smtp.use_tls,
                timeout=self._smtp.timeout,
            )
        except (aiosmtplib.SMTPException, OSError) as e:
            self.logger.error(
                "Failed to send email to %s: %s",
                payload.recipient_email,
                str(e),
                exc_info=True,
            )
            return ChannelResult.failed(self.channel_type, f"SMTP error: {e}")

        self.logger.info("Email sent to %s: %s", payload.recipient_email, payload.title)
        return ChannelResult.sent(
            self.channel_type,
            message_id=message["Message-ID"],
            recipient=payload.recipient_email,
        )

    def _build_email_message(self, payload: NotificationPayload) -> MIMEMultipart:
        message = MIMEMultipart("alternative")
        message["From"] = f"{self._smtp.from_name} <{self._smtp.from_email}>"
        message["To"] = payload.recipient_email
        message["Subject"] = payload.title
        message["Message-ID"] = make_msgid(domain=self._smtp.from_email.split("@")[-1])

        message.attach(MIMEText(self._build_plain_text(payload), "plain", "utf-8"))
        message.attach(MIMEText(self._build_html(payload), "html", "utf-8"))
        return message

    def _build_plain_text(self, payload: NotificationPayload) -> str:
        lines = [
            payload.title,
            "=" * len(payload.title),
            "",
            f"Name: {payload.student_name}",
            f"Email: {payload.student_email}",
            f"Course: {payload.resource_title}",
            "",
            "---",
            "This notification was sent by Student Hub.",
        ]
        return "\n".join(lines)

    def _build_html(self, payload: NotificationPayload) -> str:
        return (
            "<!DOCTYPE html><html><head><meta charset=\"utf-8\"></head>"
            "<body style=\"font-family: Arial, sans-serif; color: #1F2937;\">"
            f"<h1 style=\"color: #4F46E5;\">{escape(payload.title)}</h1>"
            f"<p><strong>Name:</strong> {escape(payload.student_name)}</p>"
            f"<p><strong>Email:</strong> {escape(payload.student_email)}</p>"
            f"<p><strong>Course:</strong> {escape(payload.resource_title)}</p>"
            "<p style=\"font-size: 12px; color: #9CA3AF;\">"
            "This notification was sent by Student Hub.</p>"
            "</body></html>"
        )
