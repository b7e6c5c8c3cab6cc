# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pytest configuration and shared fixtures.

This module provides fixtures used across all test types:
- Unit tests (services over the in-memory store)
- Integration tests (FastAPI TestClient, SQLite store)
"""

from collections.abc import Generator
from typing import Any

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from pydantic import SecretStr

from student_hub.api.app import create_app
from student_hub.core.config.settings import (
    AdminSettings,
    IdentitySettings,
    NotificationSettings,
    RateLimitSettings,
    Settings,
    StoreSettings,
)
from student_hub.domains.auth import IdentityProvider
from student_hub.infrastructure.events import EventBus
from student_hub.infrastructure.store import (
    READ_ONLY_COLLECTIONS,
    RESOURCES,
    InMemoryDocumentStore,
)

ADMIN_EMAIL = "admin@example.com"


# =============================================================================
# Settings Fixtures
# =============================================================================


@pytest.fixture
def test_settings() -> Settings:
    """Settings for tests: in-memory store, no rate limits, one admin."""
    return Settings(
        environment="development",
        debug=True,
        log_level="DEBUG",
        store=StoreSettings(backend="memory"),
        admin=AdminSettings(emails=ADMIN_EMAIL),
        identity=IdentitySettings(secret_key=SecretStr("test-secret-key-for-identity")),
        notifications=NotificationSettings(channels="log"),
        rate_limit=RateLimitSettings(enabled=False),
    )


# =============================================================================
# Store Fixtures
# =============================================================================


@pytest.fixture
def event_bus() -> EventBus:
    return EventBus()


@pytest.fixture
def memory_store(event_bus: EventBus) -> InMemoryDocumentStore:
    """Empty in-memory store with the catalog marked read-only."""
    return InMemoryDocumentStore(
        event_bus=event_bus,
        read_only_collections=READ_ONLY_COLLECTIONS,
    )


@pytest.fixture
def sample_resources() -> dict[str, dict[str, Any]]:
    """Catalog entries, including legacy capitalised field names."""
    return {
        "math-101": {
            "title": "Mathematics Basics",
            "description": "Numbers, fractions and algebra",
            "icon": "calculator",
            "videoUrl": "https://videos.example.com/math-101",
        },
        "bio-201": {
            "title": "Biology",
            "description": "Cells and photosynthesis",
        },
        "eng-101": {
            "title": "English Grammar",
            "description": "Sentences and tenses",
        },
        "som-101": {
            "Title": "Somali Literature",
            "Description": "Gabay and sheeko",
            "DownloadUrl": "https://files.example.com/som-101.pdf",
        },
    }


# =============================================================================
# Identity Fixtures
# =============================================================================


@pytest.fixture
def identity(test_settings: Settings) -> IdentityProvider:
    return IdentityProvider(test_settings.identity)


@pytest.fixture
def admin_token(identity: IdentityProvider) -> str:
    return identity.issue_token("admin-uid", ADMIN_EMAIL)


@pytest.fixture
def admin_headers(admin_token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {admin_token}"}


@pytest.fixture
def user_headers(identity: IdentityProvider) -> dict[str, str]:
    """Headers of a signed-in user who is not an admin."""
    token = identity.issue_token("user-uid", "student@example.com")
    return {"Authorization": f"Bearer {token}"}


# =============================================================================
# Application Fixtures
# =============================================================================


@pytest.fixture
def app(test_settings: Settings) -> FastAPI:
    return create_app(test_settings)


@pytest.fixture
def client(
    app: FastAPI,
    sample_resources: dict[str, dict[str, Any]],
) -> Generator[TestClient, None, None]:
    """TestClient with the lifespan running and the catalog seeded."""
    with TestClient(app) as test_client:
        test_client.portal.call(app.state.store.seed, RESOURCES, sample_resources)
        yield test_client


# =============================================================================
# Marker Configuration
# =============================================================================


def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test (in-memory or SQLite store)"
    )
    config.addinivalue_line(
        "markers", "slow: mark test as slow running"
    )
