# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""LLM access through LiteLLM."""

from student_hub.core.intelligence.llm.client import LLMClient, LLMError, LLMResponse

__all__ = ["LLMClient", "LLMError", "LLMResponse"]
