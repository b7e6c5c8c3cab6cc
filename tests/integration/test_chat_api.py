# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Integration tests for the tutor chat and notify endpoints."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from student_hub.domains.tutor import FALLBACK_REPLY
from student_hub.infrastructure.notifications import NotificationError


def _completion(content: str) -> MagicMock:
    response = MagicMock()
    response.choices = [MagicMock()]
    response.choices[0].message.content = content
    response.choices[0].finish_reason = "stop"
    response.usage.prompt_tokens = 12
    response.usage.completion_tokens = 30
    return response


@pytest.mark.integration
class TestChatEndpoint:
    """Tests for POST /api/chat."""

    def test_chat_reply(self, client: TestClient) -> None:
        with patch(
            "student_hub.core.intelligence.llm.client.acompletion",
            new=AsyncMock(return_value=_completion("Photosynthesis turns light into sugar.")),
        ) as mock_completion:
            response = client.post("/api/chat", json={"message": "What is photosynthesis?"})

        assert response.status_code == 200
        assert response.json() == {"reply": "Photosynthesis turns light into sugar."}

        messages = mock_completion.call_args.kwargs["messages"]
        assert messages[0]["role"] == "system"
        assert messages[-1] == {"role": "user", "content": "What is photosynthesis?"}

    def test_model_failure_returns_fallback(self, client: TestClient) -> None:
        with patch(
            "student_hub.core.intelligence.llm.client.acompletion",
            new=AsyncMock(side_effect=RuntimeError("quota exceeded")),
        ):
            response = client.post("/api/chat", json={"message": "Sharax aljebrada"})

        assert response.status_code == 502
        assert response.json() == {"error": FALLBACK_REPLY}

    def test_blank_message(self, client: TestClient) -> None:
        response = client.post("/api/chat", json={"message": "   "})

        assert response.status_code == 400
        assert "error" in response.json()

    def test_missing_message(self, client: TestClient) -> None:
        assert client.post("/api/chat", json={}).status_code == 422


@pytest.mark.integration
class TestNotifyEndpoint:
    """Tests for POST /api/notify."""

    NOTIFY_BODY = {
        "studentName": "Amina Yusuf",
        "studentEmail": "amina@example.com",
        "resourceTitle": "Biology",
    }

    def test_notify_success(self, client: TestClient) -> None:
        response = client.post("/api/notify", json=self.NOTIFY_BODY)

        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Notification sent"}

    def test_notify_failure(self, client: TestClient) -> None:
        notifier = client.app.state.notification_service

        with patch.object(
            notifier,
            "send",
            new=AsyncMock(side_effect=NotificationError("smtp: connection refused")),
        ):
            response = client.post("/api/notify", json=self.NOTIFY_BODY)

        assert response.status_code == 500
        assert response.json() == {"error": "smtp: connection refused"}

    def test_notify_requires_fields(self, client: TestClient) -> None:
        response = client.post("/api/notify", json={"studentName": "Amina"})

        assert response.status_code == 422
