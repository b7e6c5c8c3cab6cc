# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""AI tutor request/response models."""

from pydantic import BaseModel, Field


class ChatRequest(BaseModel):
    """A single question for the tutor.

    Attributes:
        message: The student's message. Each request is independent.
    """

    message: str = Field(
        ...,
        min_length=1,
        max_length=4000,
        description="Student's question",
        examples=["What is photosynthesis?", "Sharax aljebrada"],
    )


class ChatReply(BaseModel):
    """The tutor's answer."""

    reply: str


class ErrorResponse(BaseModel):
    """Error body returned by public endpoints."""

    error: str
