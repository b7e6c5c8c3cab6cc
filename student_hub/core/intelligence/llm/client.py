# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Chat completion client backed by LiteLLM.

The AI tutor sends one user turn (plus its fixed system prompt) per
request, so the client only exposes single-turn completion. Provider
credentials, the optional OpenAI compatible base URL, the request
timeout and the retry budget all come from LLMSettings.

Example:
    >>> client = LLMClient(llm_settings=get_settings().llm)
    >>> response = await client.complete("Sharax aljebrada", system_prompt=TUTOR_PROMPT)
    >>> response.content
"""

import logging
from dataclasses import dataclass
from typing import Any

import litellm
from litellm import acompletion

from student_hub.core.config.settings import LLMSettings, get_settings

logger = logging.getLogger(__name__)


@dataclass
class LLMResponse:
    """Text produced by the model and its token usage."""

    content: str
    model: str
    tokens_input: int = 0
    tokens_output: int = 0

    @property
    def total_tokens(self) -> int:
        return self.tokens_input + self.tokens_output


class LLMError(Exception):
    """Raised when the provider call fails.

    Attributes:
        message: Error description.
        model: Model that was called.
        original_error: Exception raised by LiteLLM.
    """

    def __init__(
        self,
        message: str,
        model: str | None = None,
        original_error: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.model = model
        self.original_error = original_error


class LLMClient:
    """Single-turn chat completions.

    Args:
        model: LiteLLM model name. Defaults to the configured model.
        llm_settings: LLM configuration. Uses get_settings() if None.
    """

    def __init__(
        self,
        model: str | None = None,
        llm_settings: LLMSettings | None = None,
    ) -> None:
        self._settings = llm_settings or get_settings().llm
        self._model = model or self._settings.model

        # Providers reject parameters they do not know (e.g. max_tokens=None).
        litellm.drop_params = True

        logger.info(
            "LLMClient ready: model=%s, timeout=%.1fs, retries=%d",
            self._model,
            self._settings.request_timeout,
            self._settings.max_retries,
        )

    @property
    def model(self) -> str:
        return self._model

    def _credentials(self) -> dict[str, Any]:
        credentials: dict[str, Any] = {}
        if self._settings.openai_api_key is not None:
            credentials["api_key"] = self._settings.openai_api_key.get_secret_value()
        if self._settings.api_base:
            credentials["api_base"] = self._settings.api_base
        return credentials

    async def complete(
        self,
        prompt: str,
        system_prompt: str | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> LLMResponse:
        """Ask the model one question.

        Args:
            prompt: User message.
            system_prompt: Instructions sent before the user message.
            temperature: Sampling temperature; defaults to the configured one.
            max_tokens: Completion cap; defaults to the configured one.

        Returns:
            The reply and its token usage.

        Raises:
            ValueError: If prompt is blank.
            LLMError: If the provider call fails after retries.
        """
        if not prompt or not prompt.strip():
            raise ValueError("Prompt cannot be empty")

        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})

        try:
            response = await acompletion(
                model=self._model,
                messages=messages,
                temperature=(
                    temperature if temperature is not None else self._settings.temperature
                ),
                max_tokens=max_tokens if max_tokens is not None else self._settings.max_tokens,
                timeout=self._settings.request_timeout,
                num_retries=self._settings.max_retries,
                **self._credentials(),
            )
        except Exception as e:
            logger.error(
                "Completion failed: model=%s, prompt_length=%d, error=%s",
                self._model,
                len(prompt),
                str(e),
            )
            raise LLMError(
                f"Completion failed: {e}",
                model=self._model,
                original_error=e,
            ) from e

        usage = getattr(response, "usage", None)
        result = LLMResponse(
            content=response.choices[0].message.content or "",
            model=self._model,
            tokens_input=getattr(usage, "prompt_tokens", 0) or 0,
            tokens_output=getattr(usage, "completion_tokens", 0) or 0,
        )
        logger.debug(
            "Completion received: model=%s, tokens_in=%d, tokens_out=%d",
            self._model,
            result.tokens_input,
            result.tokens_output,
        )
        return result
