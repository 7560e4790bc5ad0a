"""
Application configuration.

Loads settings from environment variables and .env file.
All configuration is centralized here — no scattered magic strings.
"""

from typing import Literal, Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEVELOPMENT_ORIGINS = (
    "http://localhost:3000",
    "http://127.0.0.1:5500",
    "http://localhost:5500",
    "http://localhost:8080",
)


class Settings(BaseSettings):
    """Application settings loaded from environment.

    Attributes:
        project_name: Display name for the API.
        version: Current API version string.
        environment: Deployment mode. Gates HTTPS enforcement, stack-trace
            exposure and request body logging. Also read from NODE_ENV.
        host: Interface the server binds to.
        port: Listen port.
        https_only: Redirect plain HTTP to HTTPS (production only).
        max_body_bytes: Largest request body accepted, in bytes.
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR).
        database_url: SQLAlchemy URL of the record store.
        email_*: SMTP relay credentials and the operator's inbox.
        cors_origins: Comma-separated list of allowed browser origins.
        rate_limit_*: Limits per route class, in ``limits`` notation.
        sentry_*: Optional external error tracking.
        day_check_timezone: IANA zone for the day-check endpoint.
            Server local time when unset.
    """

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    project_name: str = "portfolio-api"
    description: str = "REST API for a personal portfolio website"
    author: str = "Portfolio Owner"
    version: str = "1.0.0"
    environment: Literal["development", "production", "test"] = Field(
        default="development",
        validation_alias=AliasChoices("environment", "node_env"),
    )
    host: str = "0.0.0.0"
    port: int = 3000
    https_only: bool = False
    max_body_bytes: int = 100 * 1024
    log_level: str = "INFO"

    database_url: str = "sqlite:///./portfolio.db"

    email_host: str = "smtp.gmail.com"
    email_port: int = 587
    email_user: Optional[str] = None
    email_password: Optional[str] = None
    email_to: Optional[str] = None
    email_use_tls: bool = True
    email_timeout_seconds: float = 10.0

    cors_origins: str = "https://example.com,https://www.example.com"

    rate_limit_enabled: bool = True
    rate_limit_storage_uri: str = "memory://"
    rate_limit_general: str = "100 per 15 minutes"
    rate_limit_read_only: str = "200 per 15 minutes"
    rate_limit_contact: str = "5 per hour"
    rate_limit_strict: str = "10 per hour"

    sentry_dsn: Optional[str] = None
    sentry_release: Optional[str] = None
    sentry_traces_sample_rate: float = 0.1

    day_check_timezone: Optional[str] = None

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    @property
    def is_test(self) -> bool:
        return self.environment == "test"

    @property
    def email_configured(self) -> bool:
        """True when the SMTP relay has credentials and a recipient."""
        return bool(self.email_user and self.email_password and self.email_to)

    @property
    def cors_origins_list(self) -> list[str]:
        """Return the effective CORS allow-list.

        Development mode additionally accepts the usual localhost origins
        so a front end served by a dev server can reach the API.
        """
        origins = [o.strip() for o in self.cors_origins.split(",") if o.strip()]
        if self.is_development:
            origins.extend(o for o in DEVELOPMENT_ORIGINS if o not in origins)
        return origins


settings = Settings()
