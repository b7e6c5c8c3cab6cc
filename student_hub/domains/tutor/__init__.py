# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""AI tutor domain."""

from student_hub.domains.tutor.schemas import ChatReply, ChatRequest, ErrorResponse
from student_hub.domains.tutor.service import (
    FALLBACK_REPLY,
    TutorService,
    TutorUnavailableError,
)

__all__ = [
    "TutorService",
    "TutorUnavailableError",
    "FALLBACK_REPLY",
    "ChatRequest",
    "ChatReply",
    "ErrorResponse",
]
