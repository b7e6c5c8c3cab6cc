# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Application configuration settings using Pydantic Settings.

Settings are loaded from environment variables (and an optional ``.env``
file) with development defaults. The Settings class aggregates all
subsettings; a cached instance is provided via get_settings().

Example:
    >>> from student_hub.core.config.settings import get_settings
    >>> settings = get_settings()
    >>> settings.admin.email_set
    frozenset()
"""

from functools import lru_cache
from typing import Literal, Self

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_IDENTITY_SECRET = "change-this-in-production"

DEFAULT_TUTOR_PROMPT = (
    "You are a helpful AI tutor for Somali students on the 'Somali Student Hub'. "
    "Answer in Somali or English as appropriate. Be encouraging and clear."
)


def _split_csv(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


class StoreSettings(BaseSettings):
    """Document store configuration.

    Attributes:
        backend: Which store adapter to use. ``memory`` keeps documents in
            process memory; ``sql`` persists through SQLAlchemy.
        database_url: Async SQLAlchemy URL used by the ``sql`` backend.
        echo: Log every SQL statement.
        pool_size: Connection pool size (ignored for SQLite).
        seed_file: JSON file of catalog resources loaded into an empty
            catalog at startup (``{"<id>": {"title": ...}}``).
    """

    model_config = SettingsConfigDict(
        env_prefix="STORE_",
        extra="ignore",
    )

    backend: Literal["memory", "sql"] = "sql"
    database_url: str = "sqlite+aiosqlite:///./student_hub.db"
    echo: bool = False
    pool_size: int = 5
    seed_file: str | None = None


class AdminSettings(BaseSettings):
    """Admin allow-list configuration.

    Attributes:
        emails: Comma-separated list of moderator email addresses.
    """

    model_config = SettingsConfigDict(
        env_prefix="ADMIN_",
        extra="ignore",
    )

    emails: str = ""

    @property
    def email_set(self) -> frozenset[str]:
        """Lower-cased allow-list."""
        return frozenset(email.lower() for email in _split_csv(self.emails))


class IdentitySettings(BaseSettings):
    """Bearer token verification settings.

    Attributes:
        secret_key: Secret key used to sign and verify tokens.
        algorithm: JWT signing algorithm.
        token_expire_minutes: Lifetime of issued tokens.
        issuer: Expected ``iss`` claim.
    """

    model_config = SettingsConfigDict(
        env_prefix="IDENTITY_",
        extra="ignore",
    )

    secret_key: SecretStr = SecretStr(DEFAULT_IDENTITY_SECRET)
    algorithm: str = "HS256"
    token_expire_minutes: int = 60
    issuer: str = "student-hub"


class LLMSettings(BaseSettings):
    """LLM configuration for the AI tutor (LiteLLM).

    Attributes:
        model: LiteLLM model identifier.
        openai_api_key: OpenAI API key.
        api_base: Optional base URL of an OpenAI compatible endpoint.
        request_timeout: Request timeout in seconds.
        max_retries: Maximum retry attempts.
        temperature: Sampling temperature.
        max_tokens: Completion token cap.
        system_prompt: Fixed system prompt sent with every chat turn.
    """

    model_config = SettingsConfigDict(
        env_prefix="LLM_",
        extra="ignore",
    )

    model: str = "gpt-3.5-turbo"
    openai_api_key: SecretStr | None = Field(
        default=None,
        validation_alias="OPENAI_API_KEY",
    )
    api_base: str | None = None
    request_timeout: float = 30.0
    max_retries: int = 2
    temperature: float = 0.7
    max_tokens: int | None = None
    system_prompt: str = DEFAULT_TUTOR_PROMPT


class NotificationSettings(BaseSettings):
    """Enrollment notification settings.

    Attributes:
        channels: Comma-separated channel names (``log``, ``email``).
        admin_recipient: Inbox that receives new-enrollment emails.
    """

    model_config = SettingsConfigDict(
        env_prefix="NOTIFY_",
        extra="ignore",
    )

    channels: str = "log"
    admin_recipient: str | None = None

    @property
    def channel_list(self) -> list[str]:
        """Parse channels string into a list."""
        return [name.lower() for name in _split_csv(self.channels)]


class SMTPSettings(BaseSettings):
    """SMTP server settings for the email channel.

    Attributes:
        host: SMTP server hostname.
        port: SMTP server port.
        username: SMTP authentication username.
        password: SMTP authentication password.
        use_tls: Use STARTTLS.
        from_email: Sender email address.
        from_name: Sender display name.
        timeout: Connection timeout in seconds.
    """

    model_config = SettingsConfigDict(
        env_prefix="SMTP_",
        extra="ignore",
    )

    host: str | None = None
    port: int = 587
    username: str | None = None
    password: SecretStr | None = None
    use_tls: bool = True
    from_email: str | None = None
    from_name: str = "Student Hub"
    timeout: float = 10.0

    @property
    def is_configured(self) -> bool:
        """Whether every value needed to send mail is present."""
        return all([self.host, self.username, self.password, self.from_email])


class RateLimitSettings(BaseSettings):
    """Rate limiting configuration (slowapi).

    Attributes:
        enabled: Whether limits are enforced.
        storage_uri: limits storage backend URI.
        chat: Limit for the chat endpoint.
        submit: Limit for enrollment submission.
        notify: Limit for the notify endpoint.
    """

    model_config = SettingsConfigDict(
        env_prefix="RATE_LIMIT_",
        extra="ignore",
    )

    enabled: bool = True
    storage_uri: str = "memory://"
    chat: str = "20/minute"
    submit: str = "10/minute"
    notify: str = "10/minute"


class CORSSettings(BaseSettings):
    """CORS configuration for API.

    Attributes:
        origins: Comma-separated list of allowed origins.
        allow_credentials: Whether to allow credentials.
        allow_methods: Allowed HTTP methods.
        allow_headers: Allowed HTTP headers.
    """

    model_config = SettingsConfigDict(
        env_prefix="CORS_",
        extra="ignore",
    )

    origins: str = "http://localhost:3000"
    allow_credentials: bool = True
    allow_methods: list[str] = ["*"]
    allow_headers: list[str] = ["*"]

    @property
    def origins_list(self) -> list[str]:
        """Parse origins string into a list."""
        return _split_csv(self.origins)


class APISettings(BaseSettings):
    """API server configuration.

    Attributes:
        host: Host to bind to.
        port: Port to listen on.
        reload: Whether to enable auto-reload.
    """

    model_config = SettingsConfigDict(
        env_prefix="API_",
        extra="ignore",
    )

    host: str = "0.0.0.0"
    port: int = 5000
    reload: bool = False


class Settings(BaseSettings):
    """Main application settings aggregating all subsettings.

    Use get_settings() to obtain a cached singleton instance.

    Attributes:
        environment: Current environment (development, staging, production).
        debug: Enable debug mode.
        log_level: Logging level.
        store: Document store settings.
        admin: Admin allow-list.
        identity: Bearer token settings.
        llm: AI tutor model settings.
        notifications: Enrollment notification settings.
        smtp: SMTP settings for the email channel.
        rate_limit: Rate limiting settings.
        cors: CORS settings.
        api: API server settings.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    environment: Literal["development", "staging", "production"] = "development"
    debug: bool = True
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    # Subsettings - loaded with their own env prefixes
    store: StoreSettings = Field(default_factory=StoreSettings)
    admin: AdminSettings = Field(default_factory=AdminSettings)
    identity: IdentitySettings = Field(default_factory=IdentitySettings)
    llm: LLMSettings = Field(default_factory=LLMSettings)
    notifications: NotificationSettings = Field(default_factory=NotificationSettings)
    smtp: SMTPSettings = Field(default_factory=SMTPSettings)
    rate_limit: RateLimitSettings = Field(default_factory=RateLimitSettings)
    cors: CORSSettings = Field(default_factory=CORSSettings)
    api: APISettings = Field(default_factory=APISettings)

    @model_validator(mode="after")
    def validate_production_settings(self) -> Self:
        """Validate that production settings are properly configured.

        Raises:
            ValueError: If running in production with insecure defaults.
        """
        if self.environment == "production":
            if self.identity.secret_key.get_secret_value() == DEFAULT_IDENTITY_SECRET:
                raise ValueError(
                    "Identity secret key must be changed from default in production. "
                    "Set IDENTITY_SECRET_KEY environment variable."
                )
            if not self.admin.email_set:
                raise ValueError(
                    "ADMIN_EMAILS must list at least one moderator in production."
                )
        return self

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    Call clear_settings_cache() if you need to reload settings.

    Returns:
        Cached Settings instance.
    """
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache.

    Call this if you need to reload settings from environment.
    Useful for testing or dynamic configuration updates.
    """
    get_settings.cache_clear()
