# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Identity verification for bearer tokens.

Admins authenticate with an identity provider that issues signed tokens
carrying an email claim. This module verifies those tokens with
python-jose and exposes the authenticated principal. Authorization is
not decided here; the moderation allow-list does that with the
principal's verified email.

Example:
    >>> provider = IdentityProvider(get_settings().identity)
    >>> token = provider.issue_token("uid-1", "admin@example.com")
    >>> provider.verify(token).verified_email
    'admin@example.com'
"""

import logging
import secrets
from datetime import datetime, timezone

from jose import ExpiredSignatureError, JWTError as JoseJWTError, jwt
from pydantic import BaseModel

from student_hub.core.config.settings import IdentitySettings
from student_hub.utils.datetime import is_expired, minutes_from_now, utc_now

logger = logging.getLogger(__name__)


class Principal(BaseModel):
    """An authenticated caller.

    Attributes:
        uid: Subject identifier from the provider.
        email: Email claim, if present.
        email_verified: Whether the provider verified the email.
        expires_at: Token expiry.
    """

    uid: str
    email: str | None = None
    email_verified: bool = False
    expires_at: datetime

    @property
    def verified_email(self) -> str | None:
        """The email, only when the provider verified it."""
        return self.email if self.email_verified else None

    @property
    def is_expired(self) -> bool:
        return is_expired(self.expires_at)


class IdentityError(Exception):
    """Base exception for token verification."""


class TokenExpiredError(IdentityError):
    """Raised when a token has expired."""


class InvalidTokenError(IdentityError):
    """Raised when a token is malformed or wrongly signed."""


class IdentityProvider:
    """Issue and verify identity tokens.

    Args:
        settings: Signing secret, algorithm, issuer and lifetime.
    """

    def __init__(self, settings: IdentitySettings) -> None:
        self._settings = settings

    def issue_token(
        self,
        uid: str,
        email: str,
        email_verified: bool = True,
        expires_minutes: int | None = None,
    ) -> str:
        """Sign a token for a principal.

        Args:
            uid: Subject identifier.
            email: Email claim.
            email_verified: Verified flag.
            expires_minutes: Lifetime override; negative values issue an
                already expired token.

        Returns:
            Encoded JWT.
        """
        minutes = (
            expires_minutes
            if expires_minutes is not None
            else self._settings.token_expire_minutes
        )
        payload = {
            "sub": uid,
            "email": email,
            "email_verified": email_verified,
            "iss": self._settings.issuer,
            "iat": int(utc_now().timestamp()),
            "exp": int(minutes_from_now(minutes).timestamp()),
            "jti": secrets.token_urlsafe(16),
        }
        return jwt.encode(
            payload,
            self._settings.secret_key.get_secret_value(),
            algorithm=self._settings.algorithm,
        )

    def verify(self, token: str) -> Principal:
        """Decode and validate a token.

        Raises:
            TokenExpiredError: If the token has expired.
            InvalidTokenError: If the token is invalid.
        """
        try:
            claims = jwt.decode(
                token,
                self._settings.secret_key.get_secret_value(),
                algorithms=[self._settings.algorithm],
                issuer=self._settings.issuer,
            )
        except ExpiredSignatureError as e:
            raise TokenExpiredError("Token has expired") from e
        except JoseJWTError as e:
            logger.warning("Token decode failed: %s", str(e))
            raise InvalidTokenError(f"Invalid token: {e}") from e

        if not claims.get("sub") or "exp" not in claims:
            raise InvalidTokenError("Token is missing required claims")

        return Principal(
            uid=claims["sub"],
            email=claims.get("email"),
            email_verified=bool(claims.get("email_verified", False)),
            expires_at=datetime.fromtimestamp(claims["exp"], tz=timezone.utc),
        )

    def resolve(self, token: str | None) -> Principal | None:
        """Verify a token, returning None instead of raising."""
        if not token:
            return None
        try:
            return self.verify(token)
        except IdentityError:
            return None
