"""Application settings loaded from environment variables.

Environment Configuration:
    WISHWALL_ENV: Deployment environment (local | test | staging | prod)
    DATABASE_URL: PostgreSQL connection string (required)

Identity Provider Configuration (required in staging/prod):
    SUPABASE_URL: Supabase project URL (e.g. https://xxx.supabase.co)
    SUPABASE_ANON_KEY: Public anon key sent as the `apikey` header

Admin Session Configuration:
    ADMIN_SESSION_SECRET: HS256 signing secret for the admin-session cookie
        (required in staging/prod, at least 32 characters)
    ADMIN_SESSION_TTL_S: Session lifetime in seconds (default 24h)
    ADMIN_LOGIN_EMAIL_DOMAIN: Domain appended to bare usernames at login

Email Configuration (optional):
    MAILTRAP_API_TOKEN: Mailtrap send API token
    EMAIL_FROM_ADDRESS / EMAIL_FROM_NAME: Sender identity
    SITE_URL: Public site URL used in notification emails

Note: When SUPABASE_URL is unset in local/test, the app falls back to the
in-memory FakeIdentityProvider, which knows no users, so nobody can log in.
"""

from enum import Enum
from functools import lru_cache
from typing import Annotated

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings

# Only used outside staging/prod. Never rely on it for real deployments.
DEV_SESSION_SECRET = "wishwall-dev-admin-session-secret-not-for-prod"
MIN_SESSION_SECRET_LENGTH = 32


class Environment(str, Enum):
    """Valid deployment environments."""

    LOCAL = "local"
    TEST = "test"
    STAGING = "staging"
    PROD = "prod"


class Settings(BaseSettings):
    """Application configuration.

    Settings are loaded from environment variables.
    Validation rules:
    - DATABASE_URL is always required
    - SUPABASE_URL, SUPABASE_ANON_KEY, ADMIN_SESSION_SECRET are required in staging and prod
    - ADMIN_SESSION_SECRET, when set, must be at least 32 characters
    """

    wishwall_env: Environment = Field(default=Environment.LOCAL, alias="WISHWALL_ENV")
    database_url: Annotated[str, Field(alias="DATABASE_URL")]

    # Supabase identity provider
    supabase_url: str | None = Field(default=None, alias="SUPABASE_URL")
    supabase_anon_key: str | None = Field(default=None, alias="SUPABASE_ANON_KEY")
    identity_timeout_s: float = Field(default=10.0, alias="IDENTITY_TIMEOUT_S")

    # Admin session cookie
    admin_session_secret: str | None = Field(default=None, alias="ADMIN_SESSION_SECRET")
    admin_session_ttl_s: int = Field(default=24 * 60 * 60, alias="ADMIN_SESSION_TTL_S")
    admin_login_email_domain: str = Field(default="admin.local", alias="ADMIN_LOGIN_EMAIL_DOMAIN")

    # Transactional email
    mailtrap_api_token: str | None = Field(default=None, alias="MAILTRAP_API_TOKEN")
    email_from_address: str = Field(default="hello@wishwall.local", alias="EMAIL_FROM_ADDRESS")
    email_from_name: str = Field(default="Wishwall", alias="EMAIL_FROM_NAME")
    site_url: str = Field(default="http://localhost:3000", alias="SITE_URL")

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    @model_validator(mode="after")
    def validate_required_settings(self) -> "Settings":
        """Ensure deployment-critical settings are present and sane."""
        if self.admin_session_secret is not None:
            if len(self.admin_session_secret) < MIN_SESSION_SECRET_LENGTH:
                raise ValueError(
                    f"ADMIN_SESSION_SECRET must be at least {MIN_SESSION_SECRET_LENGTH} characters"
                )

        if self.admin_session_ttl_s <= 0:
            raise ValueError("ADMIN_SESSION_TTL_S must be positive")

        if self.wishwall_env in (Environment.STAGING, Environment.PROD):
            missing = []
            if not self.supabase_url:
                missing.append("SUPABASE_URL")
            if not self.supabase_anon_key:
                missing.append("SUPABASE_ANON_KEY")
            if not self.admin_session_secret:
                missing.append("ADMIN_SESSION_SECRET")
            if missing:
                raise ValueError(
                    f"Missing required settings for WISHWALL_ENV={self.wishwall_env.value}: "
                    f"{', '.join(missing)}"
                )

        return self

    @property
    def secure_cookies(self) -> bool:
        """Whether session cookies carry the Secure attribute."""
        return self.wishwall_env == Environment.PROD

    @property
    def effective_session_secret(self) -> str:
        """Return the session signing secret, falling back to the dev secret."""
        return self.admin_session_secret or DEV_SESSION_SECRET

    @property
    def normalized_supabase_url(self) -> str | None:
        """Return the Supabase URL with trailing slash stripped."""
        if self.supabase_url:
            return self.supabase_url.rstrip("/")
        return None


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Returns:
        Settings instance loaded from environment.

    Raises:
        ValidationError: If required settings are missing or invalid.
    """
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache. Useful for testing."""
    get_settings.cache_clear()
