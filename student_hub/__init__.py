"""Student Hub Backend.

Enrollment, moderation and AI tutor services for the Student Hub
course catalog.

Copyright (C) 2025 Global Digital Labs (gdlabs.io)
SPDX-License-Identifier: LGPL-3.0-or-later
"""

__version__ = "1.0.0"
