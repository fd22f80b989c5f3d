"""Application settings using pydantic-settings.

Settings are loaded from environment variables with sensible defaults
for development. Production deployments should set all values explicitly.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    """Database connection settings.

    Environment variables:
        TBR_DB_HOST: Database host (default: localhost)
        TBR_DB_PORT: Database port (default: 5432)
        TBR_DB_DATABASE: Database name (default: tbr)
        TBR_DB_USERNAME: Database user (default: tbr)
        TBR_DB_PASSWORD: Database password (required in production)
        TBR_DB_POOL_SIZE: Connections kept per engine (default: 10)
        TBR_DB_ECHO: Log emitted SQL (default: false)
    """

    model_config = SettingsConfigDict(
        env_prefix="TBR_DB_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    host: str = Field(default="localhost", description="Database host")
    port: int = Field(default=5432, description="Database port")
    database: str = Field(default="tbr", description="Database name")
    username: str = Field(default="tbr", description="Database username")
    password: SecretStr = Field(
        default=SecretStr(""),
        description="Database password",
    )
    pool_size: int = Field(
        default=10,
        description="Connections kept per engine",
        ge=1,
        le=100,
    )
    echo: bool = Field(default=False, description="Log emitted SQL statements")

    @property
    def connection_string(self) -> str:
        """Generate a connection string (without password for logging)."""
        return f"postgresql://{self.username}@{self.host}:{self.port}/{self.database}"


class AuthSettings(BaseSettings):
    """Session token validation settings for the identity provider.

    Environment variables:
        TBR_AUTH_ISSUER_URL: Token issuer (the provider's frontend API URL)
        TBR_AUTH_JWKS_URL: JWKS endpoint (default: <issuer>/.well-known/jwks.json)
        TBR_AUTH_AUTHORIZED_PARTIES: Allowed `azp` origins (default: any)
        TBR_AUTH_JWKS_CACHE_TTL_SECONDS: JWKS cache lifetime (default: 3600)
    """

    model_config = SettingsConfigDict(
        env_prefix="TBR_AUTH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    issuer_url: str = Field(
        default="http://localhost:8080",
        description="Issuer claim expected on session tokens",
    )
    jwks_url: str | None = Field(
        default=None,
        description="JWKS endpoint; derived from the issuer when unset",
    )
    authorized_parties: list[str] = Field(
        default_factory=list,
        description="Allowed values of the azp claim (empty allows any)",
    )
    jwks_cache_ttl_seconds: int = Field(
        default=3600,
        description="How long fetched signing keys are reused",
        ge=0,
    )

    @property
    def effective_jwks_url(self) -> str:
        """Return the JWKS endpoint, falling back to the issuer's well-known path."""
        if self.jwks_url:
            return self.jwks_url
        return f"{self.issuer_url.rstrip('/')}/.well-known/jwks.json"


class WebhookSettings(BaseSettings):
    """Identity provider webhook settings.

    Environment variables:
        TBR_WEBHOOK_SIGNING_SECRET: Shared signing secret (whsec_...)
        TBR_WEBHOOK_TOLERANCE_SECONDS: Accepted clock skew (default: 300)
    """

    model_config = SettingsConfigDict(
        env_prefix="TBR_WEBHOOK_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    signing_secret: SecretStr = Field(
        default=SecretStr(""),
        description="Webhook signing secret issued by the identity provider",
    )
    tolerance_seconds: int = Field(
        default=300,
        description="Maximum age (and future skew) of a signed delivery",
        ge=1,
    )

    @model_validator(mode="after")
    def validate_secret_format(self) -> "WebhookSettings":
        """Reject secrets that are set but lack the provider prefix."""
        secret = self.signing_secret.get_secret_value()
        if secret and not secret.startswith("whsec_"):
            raise ValueError("signing_secret must start with 'whsec_'")
        return self


class Settings(BaseSettings):
    """Main application settings aggregating all configuration sections."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application metadata
    app_name: str = Field(default="TBR Tracker API", description="Application name")
    debug: bool = Field(default=False, description="Debug mode")
    log_format: Literal["auto", "console", "json"] = Field(
        default="auto",
        description="Log renderer; auto picks console on a TTY and JSON otherwise",
    )
    host: str = Field(default="127.0.0.1", description="Address the server binds to")
    port: int = Field(
        default=8000,
        description="Port the server listens on",
        ge=1,
        le=65535,
    )

    @property
    def database(self) -> DatabaseSettings:
        """Get database settings."""
        return get_database_settings()

    @property
    def auth(self) -> AuthSettings:
        """Get session authentication settings."""
        return get_auth_settings()

    @property
    def webhook(self) -> WebhookSettings:
        """Get webhook settings."""
        return get_webhook_settings()


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()


@lru_cache
def get_database_settings() -> DatabaseSettings:
    """Get cached database settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return DatabaseSettings()


@lru_cache
def get_auth_settings() -> AuthSettings:
    """Get cached session authentication settings."""
    return AuthSettings()


@lru_cache
def get_webhook_settings() -> WebhookSettings:
    """Get cached webhook settings."""
    return WebhookSettings()
