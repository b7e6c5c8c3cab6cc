# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for notification channels and the notification service."""

import asyncio
import logging
from unittest.mock import AsyncMock, MagicMock, patch

import aiosmtplib
import pytest
from pydantic import SecretStr

from student_hub.core.config.settings import (
    NotificationSettings,
    Settings,
    SMTPSettings,
)
from student_hub.infrastructure.events import EventBus, EventTypes
from student_hub.infrastructure.notifications import (
    BaseChannel,
    ChannelResult,
    ChannelType,
    DeliveryStatus,
    EmailChannel,
    LogChannel,
    NotificationError,
    NotificationPayload,
    NotificationService,
    create_notification_service,
)


@pytest.fixture
def payload() -> NotificationPayload:
    return NotificationPayload(
        student_name="Amina Yusuf",
        student_email="amina@example.com",
        resource_title="Algebra",
        recipient_email="admin@example.com",
    )


@pytest.fixture
def smtp_settings() -> SMTPSettings:
    return SMTPSettings(
        host="smtp.example.com",
        port=587,
        username="hub",
        password=SecretStr("secret"),
        from_email="hub@example.com",
    )


def _channel(result_status: DeliveryStatus, channel_type: ChannelType = ChannelType.EMAIL) -> MagicMock:
    channel = MagicMock(spec=BaseChannel)
    channel.channel_type = channel_type
    channel.send = AsyncMock(
        return_value=ChannelResult(
            channel=channel_type,
            status=result_status,
            error_message="smtp down" if result_status == DeliveryStatus.FAILED else None,
        )
    )
    return channel


class TestNotificationPayload:
    """Tests for the payload text."""

    def test_message(self, payload: NotificationPayload) -> None:
        assert payload.message == "New! Amina Yusuf (amina@example.com) enrolled in Algebra."


class TestLogChannel:
    """Tests for LogChannel."""

    @pytest.mark.asyncio
    async def test_logs_announcement(
        self, payload: NotificationPayload, caplog: pytest.LogCaptureFixture
    ) -> None:
        channel = LogChannel()

        with caplog.at_level(logging.INFO):
            result = await channel.send(payload)

        assert result.succeeded
        assert result.metadata == {"mocked": True}
        assert (
            "[EMAIL NOTIFICATION]: New! Amina Yusuf (amina@example.com) enrolled in Algebra."
            in caplog.text
        )


class TestEmailChannel:
    """Tests for EmailChannel."""

    @pytest.mark.asyncio
    async def test_skipped_when_not_configured(self, payload: NotificationPayload) -> None:
        channel = EmailChannel(SMTPSettings(host=None))

        result = await channel.send(payload)

        assert result.status == DeliveryStatus.SKIPPED

    @pytest.mark.asyncio
    async def test_skipped_without_recipient(
        self, payload: NotificationPayload, smtp_settings: SMTPSettings
    ) -> None:
        payload.recipient_email = None

        result = await EmailChannel(smtp_settings).send(payload)

        assert result.status == DeliveryStatus.SKIPPED

    @pytest.mark.asyncio
    async def test_sends_via_smtp(
        self, payload: NotificationPayload, smtp_settings: SMTPSettings
    ) -> None:
        with patch(
            "student_hub.infrastructure.notifications.channels.email.aiosmtplib.send",
            new_callable=AsyncMock,
        ) as mock_send:
            result = await EmailChannel(smtp_settings).send(payload)

        assert result.succeeded
        message = mock_send.await_args.args[0]
        assert message["To"] == "admin@example.com"
        assert message["Subject"] == "New student enrollment"
        assert mock_send.await_args.kwargs["hostname"] == "smtp.example.com"
        assert mock_send.await_args.kwargs["timeout"] == smtp_settings.timeout

    @pytest.mark.asyncio
    async def test_html_is_escaped(self, smtp_settings: SMTPSettings) -> None:
        channel = EmailChannel(smtp_settings)
        payload = NotificationPayload(
            student_name="<script>x</script>",
            student_email="a@example.com",
            resource_title="Algebra & Geometry",
            recipient_email="admin@example.com",
        )

        html = channel._build_html(payload)

        assert "<script>" not in html
        assert "Algebra &amp; Geometry" in html

    @pytest.mark.asyncio
    async def test_smtp_error_is_a_failure_result(
        self, payload: NotificationPayload, smtp_settings: SMTPSettings
    ) -> None:
        with patch(
            "student_hub.infrastructure.notifications.channels.email.aiosmtplib.send",
            new_callable=AsyncMock,
            side_effect=aiosmtplib.SMTPException("connection refused"),
        ):
            result = await EmailChannel(smtp_settings).send(payload)

        assert result.status == DeliveryStatus.FAILED
        assert "connection refused" in result.error_message


class TestNotificationService:
    """Tests for NotificationService."""

    @pytest.mark.asyncio
    async def test_send_returns_results(self, payload: NotificationPayload) -> None:
        service = NotificationService([_channel(DeliveryStatus.SENT)])

        results = await service.send(payload)

        assert [r.status for r in results] == [DeliveryStatus.SENT]

    @pytest.mark.asyncio
    async def test_send_raises_when_every_channel_failed(self, payload: NotificationPayload) -> None:
        service = NotificationService([_channel(DeliveryStatus.FAILED)])

        with pytest.raises(NotificationError, match="smtp down"):
            await service.send(payload)

    @pytest.mark.asyncio
    async def test_partial_failure_is_success(self, payload: NotificationPayload) -> None:
        service = NotificationService(
            [_channel(DeliveryStatus.FAILED), _channel(DeliveryStatus.SENT, ChannelType.LOG)]
        )

        results = await service.send(payload)

        assert len(results) == 2

    @pytest.mark.asyncio
    async def test_skipped_only_is_not_an_error(self, payload: NotificationPayload) -> None:
        service = NotificationService([_channel(DeliveryStatus.SKIPPED)])

        results = await service.send(payload)

        assert results[0].status == DeliveryStatus.SKIPPED

    @pytest.mark.asyncio
    async def test_raising_channel_becomes_failure(self, payload: NotificationPayload) -> None:
        channel = MagicMock(spec=BaseChannel)
        channel.channel_type = ChannelType.EMAIL
        channel.send = AsyncMock(side_effect=RuntimeError("unexpected"))
        service = NotificationService([channel])

        with pytest.raises(NotificationError):
            await service.send(payload)

    @pytest.mark.asyncio
    async def test_publishes_outcome_events(self, payload: NotificationPayload) -> None:
        bus = EventBus()
        dispatched = AsyncMock()
        failed = AsyncMock()
        bus.subscribe(EventTypes.Notification.DISPATCHED, dispatched)
        bus.subscribe(EventTypes.Notification.FAILED, failed)

        await NotificationService([_channel(DeliveryStatus.SENT)], event_bus=bus).send(payload)
        with pytest.raises(NotificationError):
            await NotificationService([_channel(DeliveryStatus.FAILED)], event_bus=bus).send(payload)

        dispatched.assert_awaited_once()
        failed.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_dispatch_is_detached_and_drained(self, payload: NotificationPayload) -> None:
        release = asyncio.Event()
        channel = _channel(DeliveryStatus.SENT)

        async def slow_send(_: NotificationPayload) -> ChannelResult:
            await release.wait()
            return ChannelResult(channel=ChannelType.EMAIL, status=DeliveryStatus.SENT)

        channel.send = AsyncMock(side_effect=slow_send)
        service = NotificationService([channel])

        task = service.dispatch(payload)
        assert service.pending_count == 1
        assert not task.done()

        release.set()
        await service.drain(timeout=1)

        assert task.done()
        assert service.pending_count == 0

    @pytest.mark.asyncio
    async def test_dispatch_swallows_failures(self, payload: NotificationPayload) -> None:
        service = NotificationService([_channel(DeliveryStatus.FAILED)])

        task = service.dispatch(payload)
        await service.drain(timeout=1)

        assert task.exception() is None

    def test_build_payload_uses_recipient(self) -> None:
        service = NotificationService([LogChannel()], recipient_email="admin@example.com")

        payload = service.build_payload("Ali", "ali@example.com", "Biology", enrollment_id="e1")

        assert payload.recipient_email == "admin@example.com"
        assert payload.data == {"enrollment_id": "e1"}


class TestCreateNotificationService:
    """Tests for building the service from settings."""

    def test_unknown_channels_fall_back_to_log(self) -> None:
        settings = Settings(_env_file=None, notifications=NotificationSettings(channels="pigeon"))

        service = create_notification_service(settings)

        assert [type(c) for c in service._channels] == [LogChannel]

    def test_log_and_email(self) -> None:
        settings = Settings(
            _env_file=None,
            notifications=NotificationSettings(channels="log,email", admin_recipient="a@example.com"),
        )

        service = create_notification_service(settings)

        assert [type(c) for c in service._channels] == [LogChannel, EmailChannel]
        assert service.build_payload("a", "b", "c").recipient_email == "a@example.com"
