# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""AI tutor chat endpoint.

Endpoints:
- POST /chat - Ask the tutor one question

The endpoint is public and rate limited. Every request is independent;
no conversation history is kept.
"""

import logging

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from student_hub.api.dependencies import get_tutor_service
from student_hub.api.middleware.rate_limit import chat_limit, limiter
from student_hub.domains.tutor import (
    ChatReply,
    ChatRequest,
    ErrorResponse,
    TutorService,
    TutorUnavailableError,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/chat",
    response_model=ChatReply,
    responses={
        400: {"model": ErrorResponse},
        502: {"model": ErrorResponse, "description": "Tutor model unavailable"},
    },
    summary="Chat with the AI tutor",
    description="""
Send one message to the AI tutor and receive its reply.

The tutor answers in Somali or English. If the model is unavailable a
friendly message is returned in the error field with status 502.
""",
)
@limiter.limit(chat_limit)
async def chat(
    request: Request,
    body: ChatRequest,
    tutor: TutorService = Depends(get_tutor_service),
) -> ChatReply | JSONResponse:
    try:
        reply = await tutor.reply(body.message)
    except ValueError as e:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": str(e)},
        )
    except TutorUnavailableError as e:
        logger.error("AI tutor error: %s", e.original_error or "empty reply")
        return JSONResponse(
            status_code=status.HTTP_502_BAD_GATEWAY,
            content={"error": e.message},
        )
    return ChatReply(reply=reply)
