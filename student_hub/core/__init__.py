# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Core package for Student Hub.

This package contains configuration and shared integrations:
- config: Application configuration and settings
- intelligence: LLM client used by the AI tutor
"""
