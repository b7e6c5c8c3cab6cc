# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Infrastructure layer for external service integrations.

This package contains adapters for:
- Document storage (in-memory and SQLAlchemy)
- In-process event bus
- Notifications (log and email channels)
"""
