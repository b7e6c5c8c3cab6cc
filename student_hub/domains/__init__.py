# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Domain services layer for Student Hub.

Domains:
    auth: Identity verification for admin principals.
    catalog: Read-only course resource catalog.
    enrollment: Enrollment submission lifecycle.
    moderation: Admin moderation of enrollments.
    tutor: Stateless AI tutor chat.
"""
