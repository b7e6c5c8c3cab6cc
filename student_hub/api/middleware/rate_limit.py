# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Rate limiting using slowapi.

Public endpoints that reach paid or write-heavy backends (chat, notify,
enrollment submission) are limited per client. create_app() calls
configure_limiter() with the application's RateLimitSettings; the limit
callables and the storage backend follow whatever was configured last.

Example:
    @router.post("/chat")
    @limiter.limit(chat_limit)
    async def chat(request: Request, ...):
        ...
"""

import logging

from fastapi import Request
from fastapi.responses import JSONResponse
from limits.storage import storage_from_string
from limits.strategies import FixedWindowRateLimiter
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from student_hub.core.config import get_settings
from student_hub.core.config.settings import RateLimitSettings

logger = logging.getLogger(__name__)


def get_client_identifier(request: Request) -> str:
    """Get a unique identifier for the client.

    Uses the principal uid if authenticated, otherwise the IP address.
    """
    principal = getattr(request.state, "principal", None)
    if principal is not None:
        return f"user:{principal.uid}"
    return f"ip:{get_remote_address(request)}"


_active: RateLimitSettings = get_settings().rate_limit


def chat_limit() -> str:
    return _active.chat


def submit_limit() -> str:
    return _active.submit


def notify_limit() -> str:
    return _active.notify


limiter = Limiter(
    key_func=get_client_identifier,
    storage_uri=_active.storage_uri,
    enabled=_active.enabled,
)


def configure_limiter(rate_limit: RateLimitSettings) -> Limiter:
    """Apply an application's rate limit settings to the shared limiter.

    Swaps in a fresh storage backend built from rate_limit.storage_uri,
    so counters never carry over from a previously configured app.

    Args:
        rate_limit: Limits, storage URI and on/off switch to enforce.

    Returns:
        The configured limiter.
    """
    global _active
    _active = rate_limit

    storage = storage_from_string(rate_limit.storage_uri)
    limiter._storage = storage
    limiter._limiter = FixedWindowRateLimiter(storage)
    limiter.enabled = rate_limit.enabled

    logger.info(
        "Rate limiter configured: enabled=%s, storage=%s, chat=%s, submit=%s, notify=%s",
        rate_limit.enabled,
        rate_limit.storage_uri,
        rate_limit.chat,
        rate_limit.submit,
        rate_limit.notify,
    )
    return limiter


async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Return a JSON error body when a limit is hit."""
    logger.warning(
        "Rate limit exceeded: client=%s, path=%s, limit=%s",
        get_client_identifier(request),
        request.url.path,
        exc.detail,
    )
    return JSONResponse(
        status_code=429,
        content={"error": f"Too many requests: {exc.detail}"},
    )
