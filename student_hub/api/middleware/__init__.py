# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""API middleware components.

Exports:
    AuthMiddleware: Bearer token authentication middleware.
    limiter: slowapi rate limiter shared by the routers.
"""

from student_hub.api.middleware.auth import (
    AuthMiddleware,
    extract_bearer_token,
    get_current_principal,
)
from student_hub.api.middleware.rate_limit import (
    configure_limiter,
    limiter,
    rate_limit_exceeded_handler,
)

__all__ = [
    "AuthMiddleware",
    "configure_limiter",
    "extract_bearer_token",
    "get_current_principal",
    "limiter",
    "rate_limit_exceeded_handler",
]
