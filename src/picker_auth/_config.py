from __future__ import annotations

from typing import Any

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from ._token_exchange import ClientCredentials
from .exceptions import ConfigurationError

PHOTOS_PICKER_SCOPE = "https://www.googleapis.com/auth/photospicker.mediaitems.readonly"

MIN_SESSION_SECRET_LENGTH = 32


class OAuthConfig(BaseSettings):
    """Process-wide configuration, built once at startup.

    Values come from keyword arguments first, then the environment, then a
    `.env` file. Use `OAuthConfig.load()` to get a validated instance.
    """

    model_config = SettingsConfigDict(
        env_prefix="PICKER_AUTH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    client_id: str = Field("", validation_alias="GOOGLE_CLIENT_ID")
    client_secret: str = Field("", validation_alias="GOOGLE_CLIENT_SECRET")
    redirect_uri: str = Field("", validation_alias="GOOGLE_REDIRECT_URI")
    session_secret: str = Field("", validation_alias="SESSION_SECRET")

    scope: str = PHOTOS_PICKER_SCOPE

    # Seconds allowed for each call to Google.
    http_timeout: float = 10.0

    # Lifetime of a pending login attempt (state + PKCE verifier).
    state_ttl: int = 600

    use_pkce: bool = True

    # prompt=consent makes Google re-issue a refresh token on every login.
    force_consent: bool = True

    cookie_name: str = "picker_session"
    cookie_secure: bool = True
    cookie_max_age: int = 60 * 60 * 24 * 7

    post_login_redirect: str = "/"

    @classmethod
    def load(cls, **values: Any) -> OAuthConfig:
        try:
            config = cls(**values)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid configuration: {e}") from e

        config.validate_credentials()
        config.validate_session_secret()

        return config

    def validate_credentials(self) -> None:
        missing = [
            name
            for name, value in (
                ("client_id", self.client_id),
                ("client_secret", self.client_secret),
                ("redirect_uri", self.redirect_uri),
            )
            if not value
        ]

        if missing:
            raise ConfigurationError(
                f"Missing required OAuth settings: {', '.join(missing)}"
            )

    def validate_session_secret(self) -> None:
        if not self.session_secret:
            raise ConfigurationError("session_secret is required")

        if len(self.session_secret) < MIN_SESSION_SECRET_LENGTH:
            raise ConfigurationError(
                f"session_secret must be at least {MIN_SESSION_SECRET_LENGTH} characters long"
            )

    @property
    def credentials(self) -> ClientCredentials:
        return ClientCredentials(
            client_id=self.client_id,
            client_secret=self.client_secret,
            redirect_uri=self.redirect_uri,
        )
