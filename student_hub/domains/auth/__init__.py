# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Authentication domain.

Verifies bearer tokens and exposes the authenticated principal.
"""

from student_hub.domains.auth.identity import (
    IdentityError,
    IdentityProvider,
    InvalidTokenError,
    Principal,
    TokenExpiredError,
)

__all__ = [
    "IdentityProvider",
    "Principal",
    "IdentityError",
    "InvalidTokenError",
    "TokenExpiredError",
]
