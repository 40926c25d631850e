"""Typed service configuration.

Values come from the environment (or a local .env file). Database, admin
console credentials and the session secret are required; the auth provider
is optional so the API can start, and report itself unconfigured, without it.
"""

from datetime import timedelta
from functools import lru_cache

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Service settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # Environment
    env_name: str = Field(default="development", alias="ENV_NAME")

    # Database
    database_url: str = Field(alias="DATABASE_URL")

    # Admin console
    session_secret_key: str = Field(alias="SESSION_SECRET_KEY")
    admin_username: str = Field(alias="ADMIN_USERNAME")
    admin_password: str = Field(alias="ADMIN_PASSWORD")

    # CORS
    cors_origins: str = Field(default="*", alias="CORS_ORIGINS")

    # Auth provider (GoTrue-compatible, e.g. Supabase Auth)
    auth_url: str | None = Field(default=None, alias="AUTH_URL")
    auth_anon_key: str | None = Field(default=None, alias="AUTH_ANON_KEY")
    auth_service_role_key: str | None = Field(
        default=None, alias="AUTH_SERVICE_ROLE_KEY"
    )
    session_expires_days: int = Field(
        default=7, alias="SESSION_EXPIRES_DAYS", ge=1, le=30
    )

    # Household provisioning
    house_code_max_attempts: int = Field(
        default=5, alias="HOUSE_CODE_MAX_ATTEMPTS", ge=1, le=20
    )
    signup_compensation: bool = Field(default=True, alias="SIGNUP_COMPENSATION")

    @computed_field
    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS_ORIGINS into a list."""
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    @computed_field
    @property
    def is_secure_cookie(self) -> bool:
        """Determine if cookies should be set with Secure flag."""
        return self.env_name.lower() not in {"dev", "development", "local", "test"}

    @computed_field
    @property
    def session_expires_in(self) -> timedelta:
        """Get session cookie lifetime as timedelta."""
        return timedelta(days=self.session_expires_days)

    @computed_field
    @property
    def auth_api_base_url(self) -> str | None:
        """Base URL of the auth provider's REST API, or None if unconfigured."""
        if not self.auth_url:
            return None
        return f"{self.auth_url.rstrip('/')}/auth/v1"


@lru_cache
def get_settings() -> Settings:
    """Settings are read once per process; tests override the dependency."""
    return Settings()
