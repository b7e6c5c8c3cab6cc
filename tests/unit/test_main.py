# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for the command line entry points."""

from unittest.mock import MagicMock, patch

import pytest

from student_hub.core.config.settings import Settings
from student_hub.domains.auth import IdentityProvider
from student_hub.main import build_parser, main


@pytest.mark.unit
class TestIssueToken:
    """Tests for student-hub issue-token."""

    def test_prints_verifiable_token(
        self,
        test_settings: Settings,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        with patch("student_hub.main.get_settings", return_value=test_settings):
            exit_code = main(["issue-token", "admin@example.com", "--uid", "admin-1"])

        assert exit_code == 0
        token = capsys.readouterr().out.strip()
        principal = IdentityProvider(test_settings.identity).verify(token)
        assert principal.uid == "admin-1"
        assert principal.verified_email == "admin@example.com"

    def test_unverified_flag(
        self,
        test_settings: Settings,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        with patch("student_hub.main.get_settings", return_value=test_settings):
            main(["issue-token", "admin@example.com", "--unverified"])

        token = capsys.readouterr().out.strip()
        principal = IdentityProvider(test_settings.identity).verify(token)
        assert principal.uid == "admin@example.com"
        assert principal.verified_email is None

    def test_refuses_in_production(self, capsys: pytest.CaptureFixture[str]) -> None:
        settings = MagicMock()
        settings.is_production = True

        with patch("student_hub.main.get_settings", return_value=settings):
            exit_code = main(["issue-token", "admin@example.com"])

        assert exit_code == 1
        assert capsys.readouterr().out == ""


@pytest.mark.unit
class TestServe:
    """Tests for student-hub serve."""

    def test_runs_app_factory(self, test_settings: Settings) -> None:
        with (
            patch("student_hub.main.get_settings", return_value=test_settings),
            patch("student_hub.main.setup_logging"),
            patch("student_hub.main.uvicorn.run") as mock_run,
        ):
            exit_code = main(["serve", "--port", "8080"])

        assert exit_code == 0
        args, kwargs = mock_run.call_args
        assert args[0] == "student_hub.api.app:create_app"
        assert kwargs["factory"] is True
        assert kwargs["port"] == 8080
        assert kwargs["host"] == test_settings.api.host

    def test_command_required(self) -> None:
        with pytest.raises(SystemExit):
            build_parser().parse_args([])
