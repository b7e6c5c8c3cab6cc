# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for identity token verification."""

import pytest
from jose import jwt
from pydantic import SecretStr

from student_hub.core.config.settings import IdentitySettings
from student_hub.domains.auth import (
    IdentityProvider,
    InvalidTokenError,
    TokenExpiredError,
)


@pytest.fixture
def identity_settings() -> IdentitySettings:
    return IdentitySettings(
        secret_key=SecretStr("unit-test-secret"),
        algorithm="HS256",
        token_expire_minutes=30,
        issuer="student-hub",
    )


@pytest.fixture
def provider(identity_settings: IdentitySettings) -> IdentityProvider:
    return IdentityProvider(identity_settings)


class TestIssueAndVerify:
    """Tests for the token round trip."""

    def test_verified_principal(self, provider: IdentityProvider) -> None:
        token = provider.issue_token("uid-1", "Admin@Example.com")

        principal = provider.verify(token)

        assert principal.uid == "uid-1"
        assert principal.email == "Admin@Example.com"
        assert principal.verified_email == "Admin@Example.com"
        assert principal.is_expired is False

    def test_unverified_email_is_hidden(self, provider: IdentityProvider) -> None:
        token = provider.issue_token("uid-1", "admin@example.com", email_verified=False)

        principal = provider.verify(token)

        assert principal.email == "admin@example.com"
        assert principal.verified_email is None

    def test_claims(self, provider: IdentityProvider) -> None:
        token = provider.issue_token("uid-1", "admin@example.com")

        claims = jwt.get_unverified_claims(token)

        assert claims["iss"] == "student-hub"
        assert claims["email_verified"] is True
        assert claims["exp"] - claims["iat"] == pytest.approx(30 * 60, abs=2)
        assert claims["jti"]


class TestRejection:
    """Tests for invalid tokens."""

    def test_expired(self, provider: IdentityProvider) -> None:
        token = provider.issue_token("uid-1", "admin@example.com", expires_minutes=-1)

        with pytest.raises(TokenExpiredError):
            provider.verify(token)

    def test_wrong_secret(self, identity_settings: IdentitySettings) -> None:
        other = IdentityProvider(
            identity_settings.model_copy(update={"secret_key": SecretStr("other-secret")})
        )
        token = other.issue_token("uid-1", "admin@example.com")

        with pytest.raises(InvalidTokenError):
            IdentityProvider(identity_settings).verify(token)

    def test_wrong_issuer(self, identity_settings: IdentitySettings) -> None:
        other = IdentityProvider(identity_settings.model_copy(update={"issuer": "elsewhere"}))
        token = other.issue_token("uid-1", "admin@example.com")

        with pytest.raises(InvalidTokenError):
            IdentityProvider(identity_settings).verify(token)

    def test_missing_subject(self, identity_settings: IdentitySettings, provider: IdentityProvider) -> None:
        token = jwt.encode(
            {"email": "admin@example.com", "iss": "student-hub", "exp": 4102444800},
            "unit-test-secret",
            algorithm="HS256",
        )

        with pytest.raises(InvalidTokenError):
            provider.verify(token)

    def test_garbage(self, provider: IdentityProvider) -> None:
        with pytest.raises(InvalidTokenError):
            provider.verify("not-a-token")

    @pytest.mark.parametrize("token", [None, "", "garbage"])
    def test_resolve_returns_none(self, provider: IdentityProvider, token: str | None) -> None:
        assert provider.resolve(token) is None
