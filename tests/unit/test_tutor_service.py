# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for the LLM client and the AI tutor service."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from pydantic import SecretStr

from student_hub.core.config.settings import DEFAULT_TUTOR_PROMPT, LLMSettings
from student_hub.core.intelligence.llm import LLMClient, LLMError, LLMResponse
from student_hub.domains.tutor import (
    FALLBACK_REPLY,
    TutorService,
    TutorUnavailableError,
)


def _completion(content: str | None) -> MagicMock:
    response = MagicMock()
    response.choices = [MagicMock()]
    response.choices[0].message.content = content
    response.choices[0].finish_reason = "stop"
    response.usage.prompt_tokens = 12
    response.usage.completion_tokens = 8
    return response


@pytest.fixture
def llm_settings() -> LLMSettings:
    return LLMSettings(
        model="gpt-3.5-turbo",
        openai_api_key=SecretStr("sk-test"),
        request_timeout=15.0,
        max_retries=1,
    )


class TestLLMClient:
    """Tests for LLMClient."""

    def test_initialization_from_settings(self, llm_settings: LLMSettings) -> None:
        client = LLMClient(llm_settings=llm_settings)

        assert client.model == "gpt-3.5-turbo"

    def test_explicit_model_overrides_settings(self, llm_settings: LLMSettings) -> None:
        assert LLMClient(model="gpt-4o", llm_settings=llm_settings).model == "gpt-4o"

    @pytest.mark.asyncio
    async def test_complete_builds_messages(self, llm_settings: LLMSettings) -> None:
        client = LLMClient(llm_settings=llm_settings)

        with patch(
            "student_hub.core.intelligence.llm.client.acompletion",
            new_callable=AsyncMock,
            return_value=_completion("Photosynthesis turns light into energy."),
        ) as mock_completion:
            response = await client.complete("What is photosynthesis?", system_prompt="Be kind.")

        assert isinstance(response, LLMResponse)
        assert response.content == "Photosynthesis turns light into energy."
        assert response.total_tokens == 20
        kwargs = mock_completion.await_args.kwargs
        assert kwargs["model"] == "gpt-3.5-turbo"
        assert kwargs["messages"] == [
            {"role": "system", "content": "Be kind."},
            {"role": "user", "content": "What is photosynthesis?"},
        ]
        assert kwargs["api_key"] == "sk-test"
        assert kwargs["timeout"] == 15.0
        assert kwargs["num_retries"] == 1

    @pytest.mark.asyncio
    async def test_complete_wraps_errors(self, llm_settings: LLMSettings) -> None:
        client = LLMClient(llm_settings=llm_settings)

        with patch(
            "student_hub.core.intelligence.llm.client.acompletion",
            new_callable=AsyncMock,
            side_effect=RuntimeError("rate limited"),
        ):
            with pytest.raises(LLMError) as exc_info:
                await client.complete("Hello")

        assert exc_info.value.model == "gpt-3.5-turbo"
        assert isinstance(exc_info.value.original_error, RuntimeError)

    @pytest.mark.asyncio
    async def test_empty_prompt(self, llm_settings: LLMSettings) -> None:
        with pytest.raises(ValueError):
            await LLMClient(llm_settings=llm_settings).complete("   ")


class TestTutorService:
    """Tests for TutorService."""

    @pytest.fixture
    def mock_llm(self) -> MagicMock:
        llm = MagicMock(spec=LLMClient)
        llm.complete = AsyncMock(
            return_value=LLMResponse(content="Jawaab", model="gpt-3.5-turbo")
        )
        return llm

    @pytest.mark.asyncio
    async def test_reply_uses_fixed_system_prompt(self, mock_llm: MagicMock) -> None:
        tutor = TutorService(mock_llm, LLMSettings())

        reply = await tutor.reply("Sharax aljebrada")

        assert reply == "Jawaab"
        kwargs = mock_llm.complete.await_args.kwargs
        assert kwargs["prompt"] == "Sharax aljebrada"
        assert kwargs["system_prompt"] == DEFAULT_TUTOR_PROMPT
        assert tutor.system_prompt == DEFAULT_TUTOR_PROMPT

    @pytest.mark.asyncio
    async def test_llm_failure_becomes_fallback(self, mock_llm: MagicMock) -> None:
        error = LLMError("Completion failed", model="gpt-3.5-turbo")
        mock_llm.complete.side_effect = error
        tutor = TutorService(mock_llm, LLMSettings())

        with pytest.raises(TutorUnavailableError) as exc_info:
            await tutor.reply("Hello")

        assert exc_info.value.message == FALLBACK_REPLY
        assert exc_info.value.original_error is error

    @pytest.mark.asyncio
    async def test_empty_reply_is_unavailable(self, mock_llm: MagicMock) -> None:
        mock_llm.complete.return_value = LLMResponse(content="  ", model="gpt-3.5-turbo")
        tutor = TutorService(mock_llm, LLMSettings())

        with pytest.raises(TutorUnavailableError):
            await tutor.reply("Hello")

    @pytest.mark.asyncio
    async def test_blank_message(self, mock_llm: MagicMock) -> None:
        tutor = TutorService(mock_llm, LLMSettings())

        with pytest.raises(ValueError):
            await tutor.reply("  ")

        mock_llm.complete.assert_not_called()
