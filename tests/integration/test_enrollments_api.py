# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Integration tests for the public enrollment and catalog endpoints.

Runs the full application with the in-memory store.
"""

from typing import Any
from unittest.mock import AsyncMock, patch

import pytest
from fastapi.testclient import TestClient

from student_hub.infrastructure.store import (
    ENROLLMENTS,
    PermissionDeniedError,
    StoreUnavailableError,
)


def _form(**overrides: Any) -> dict[str, Any]:
    form = {
        "resourceId": "math-101",
        "resourceTitle": "Mathematics Basics",
        "studentName": "Amina Yusuf",
        "studentEmail": "amina@example.com",
        "studentPhone": "+252 61 000 0000",
    }
    form.update(overrides)
    return form


@pytest.mark.integration
class TestSubmitEnrollment:
    """Tests for POST /api/enrollments."""

    def test_submit_success(self, client: TestClient) -> None:
        response = client.post("/api/enrollments", json=_form())

        assert response.status_code == 201
        body = response.json()
        assert body["id"]
        assert body["status"] == "pending"
        assert body["message"]

        document = client.portal.call(client.app.state.store.get, ENROLLMENTS, body["id"])
        assert document.data["studentName"] == "Amina Yusuf"
        assert document.data["status"] == "pending"

    def test_title_resolved_from_catalog(self, client: TestClient) -> None:
        form = _form(resourceId="bio-201")
        del form["resourceTitle"]

        response = client.post("/api/enrollments", json=form)

        assert response.status_code == 201
        document = client.portal.call(
            client.app.state.store.get, ENROLLMENTS, response.json()["id"]
        )
        assert document.data["resourceTitle"] == "Biology"

    def test_unknown_resource_title(self, client: TestClient) -> None:
        form = _form(resourceId="not-in-catalog")
        del form["resourceTitle"]

        response = client.post("/api/enrollments", json=form)

        assert response.status_code == 201
        document = client.portal.call(
            client.app.state.store.get, ENROLLMENTS, response.json()["id"]
        )
        assert document.data["resourceTitle"] == "Unknown"

    @pytest.mark.parametrize(
        "field", ["resourceId", "studentName", "studentEmail", "studentPhone"]
    )
    def test_blank_field_reported_by_wire_name(self, client: TestClient, field: str) -> None:
        response = client.post("/api/enrollments", json=_form(**{field: "   "}))

        assert response.status_code == 422
        assert response.json()["field"] == field
        assert client.portal.call(client.app.state.moderation_service.list_enrollments) == []

    def test_missing_field_rejected_by_schema(self, client: TestClient) -> None:
        form = _form()
        del form["studentPhone"]

        response = client.post("/api/enrollments", json=form)

        assert response.status_code == 422

    def test_permission_denied(self, client: TestClient) -> None:
        with patch.object(
            client.app.state.store,
            "create",
            new=AsyncMock(side_effect=PermissionDeniedError("rules")),
        ):
            response = client.post("/api/enrollments", json=_form())

        assert response.status_code == 403
        assert "administrator" in response.json()["detail"]

    def test_store_unavailable(self, client: TestClient) -> None:
        with patch.object(
            client.app.state.store,
            "create",
            new=AsyncMock(side_effect=StoreUnavailableError("down")),
        ):
            response = client.post("/api/enrollments", json=_form())

        assert response.status_code == 503

    def test_notification_is_logged(self, client: TestClient) -> None:
        notifier = client.app.state.notification_service

        with patch.object(notifier, "dispatch", wraps=notifier.dispatch) as mock_dispatch:
            response = client.post("/api/enrollments", json=_form())

        assert response.status_code == 201
        payload = mock_dispatch.call_args.args[0]
        assert payload.message == (
            "New! Amina Yusuf (amina@example.com) enrolled in Mathematics Basics."
        )


@pytest.mark.integration
class TestResources:
    """Tests for the catalog endpoints."""

    def test_featured(self, client: TestClient) -> None:
        response = client.get("/api/resources")

        assert response.status_code == 200
        assert len(response.json()) == 4

    def test_featured_limit(self, client: TestClient) -> None:
        assert len(client.get("/api/resources", params={"limit": 2}).json()) == 2

    def test_get_resource(self, client: TestClient) -> None:
        response = client.get("/api/resources/math-101")

        assert response.status_code == 200
        body = response.json()
        assert body["title"] == "Mathematics Basics"
        assert body["videoUrl"] == "https://videos.example.com/math-101"

    def test_get_missing_resource(self, client: TestClient) -> None:
        assert client.get("/api/resources/nope").status_code == 404

    def test_search(self, client: TestClient) -> None:
        response = client.get("/api/resources/search", params={"q": "Eng"})

        assert response.status_code == 200
        assert [r["id"] for r in response.json()] == ["eng-101"]

    def test_search_blank(self, client: TestClient) -> None:
        assert client.get("/api/resources/search", params={"q": ""}).json() == []


@pytest.mark.integration
class TestHealth:
    """Tests for GET /health."""

    def test_health(self, client: TestClient) -> None:
        response = client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["environment"] == "development"
        assert body["store"]["status"] == "healthy"
        assert response.headers["X-Request-ID"]
