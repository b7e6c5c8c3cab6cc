# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Configuration package for Student Hub.

Example:
    >>> from student_hub.core.config import get_settings
    >>> settings = get_settings()
    >>> print(settings.environment)
    'development'
"""

from student_hub.core.config.settings import (
    AdminSettings,
    APISettings,
    CORSSettings,
    IdentitySettings,
    LLMSettings,
    NotificationSettings,
    RateLimitSettings,
    Settings,
    SMTPSettings,
    StoreSettings,
    clear_settings_cache,
    get_settings,
)

__all__ = [
    # Settings
    "Settings",
    "get_settings",
    "clear_settings_cache",
    # Subsettings
    "StoreSettings",
    "AdminSettings",
    "IdentitySettings",
    "LLMSettings",
    "NotificationSettings",
    "SMTPSettings",
    "RateLimitSettings",
    "CORSSettings",
    "APISettings",
]
