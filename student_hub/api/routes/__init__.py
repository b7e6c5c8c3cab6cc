# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Non-versioned API routes (health checks)."""

from student_hub.api.routes.health import router as health_router

__all__ = ["health_router"]
