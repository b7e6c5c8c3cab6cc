# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""AI tutor service.

Forwards one student message to the chat model with a fixed system
prompt. No conversation history is kept between requests.
"""

import logging

from student_hub.core.config.settings import LLMSettings
from student_hub.core.intelligence.llm import LLMClient, LLMError

logger = logging.getLogger(__name__)

FALLBACK_REPLY = (
    "Sorry, the tutor is unavailable right now. Please try again in a moment."
)


class TutorUnavailableError(Exception):
    """Raised when the model call fails or returns nothing.

    Attributes:
        message: Friendly text to show in the conversation.
        original_error: The underlying LLM error, if any.
    """

    def __init__(self, original_error: Exception | None = None) -> None:
        super().__init__(FALLBACK_REPLY)
        self.message = FALLBACK_REPLY
        self.original_error = original_error


class TutorService:
    """Stateless chat passthrough to the tutor model.

    Args:
        llm_client: LiteLLM wrapper.
        settings: Prompt and sampling settings.
    """

    def __init__(self, llm_client: LLMClient, settings: LLMSettings) -> None:
        self._llm = llm_client
        self._settings = settings

    @property
    def system_prompt(self) -> str:
        return self._settings.system_prompt

    async def reply(self, message: str) -> str:
        """Answer one message.

        Args:
            message: The student's message.

        Returns:
            The model's reply text.

        Raises:
            ValueError: If message is blank.
            TutorUnavailableError: If the model fails or answers with nothing.
        """
        if not message or not message.strip():
            raise ValueError("Message cannot be empty")

        try:
            response = await self._llm.complete(
                prompt=message,
                system_prompt=self._settings.system_prompt,
                temperature=self._settings.temperature,
                max_tokens=self._settings.max_tokens,
            )
        except LLMError as e:
            logger.warning("Tutor completion failed: %s", e.message)
            raise TutorUnavailableError(e) from e

        if not response.content.strip():
            logger.warning("Tutor model %s returned an empty reply", response.model)
            raise TutorUnavailableError()

        logger.info(
            "Tutor replied: model=%s, tokens=%d",
            response.model,
            response.total_tokens,
        )
        return response.content
