"""Tests for application configuration."""

import pytest
from pydantic import ValidationError

from wishwall.config import DEV_SESSION_SECRET, Environment, Settings

SECRET = "config-test-secret-0123456789abcdef"


def _make_settings(**overrides) -> Settings:
    """Build a Settings instance with test defaults + overrides."""
    defaults = {
        "DATABASE_URL": "postgresql+psycopg://localhost/test",
        "WISHWALL_ENV": "test",
    }
    defaults.update(overrides)
    return Settings(**defaults)


class TestDefaults:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("ADMIN_SESSION_SECRET", raising=False)

        s = _make_settings()

        assert s.wishwall_env is Environment.TEST
        assert s.admin_session_ttl_s == 86400
        assert s.admin_login_email_domain == "admin.local"
        assert s.identity_timeout_s == 10.0
        assert s.effective_session_secret == DEV_SESSION_SECRET

    def test_database_url_required(self, monkeypatch):
        monkeypatch.delenv("DATABASE_URL", raising=False)

        with pytest.raises(ValidationError):
            Settings(WISHWALL_ENV="test")


class TestSessionSettings:
    def test_short_secret_rejected(self):
        with pytest.raises(ValidationError, match="ADMIN_SESSION_SECRET"):
            _make_settings(ADMIN_SESSION_SECRET="too-short")

    def test_secret_used_when_set(self):
        assert _make_settings(ADMIN_SESSION_SECRET=SECRET).effective_session_secret == SECRET

    @pytest.mark.parametrize("ttl", [0, -1])
    def test_ttl_must_be_positive(self, ttl):
        with pytest.raises(ValidationError, match="ADMIN_SESSION_TTL_S"):
            _make_settings(ADMIN_SESSION_TTL_S=ttl)

    @pytest.mark.parametrize(
        ("env", "secure"),
        [("local", False), ("test", False), ("staging", False), ("prod", True)],
    )
    def test_secure_cookies_only_in_prod(self, env, secure):
        s = _make_settings(
            WISHWALL_ENV=env,
            SUPABASE_URL="https://project.supabase.co",
            SUPABASE_ANON_KEY="anon",
            ADMIN_SESSION_SECRET=SECRET,
        )
        assert s.secure_cookies is secure


class TestDeployedEnvironments:
    @pytest.mark.parametrize("env", ["staging", "prod"])
    def test_requires_identity_and_secret(self, env, monkeypatch):
        monkeypatch.delenv("ADMIN_SESSION_SECRET", raising=False)

        with pytest.raises(ValidationError) as exc_info:
            _make_settings(WISHWALL_ENV=env)

        message = str(exc_info.value)
        assert "SUPABASE_URL" in message
        assert "SUPABASE_ANON_KEY" in message
        assert "ADMIN_SESSION_SECRET" in message

    def test_supabase_url_normalized(self):
        s = _make_settings(SUPABASE_URL="https://project.supabase.co/")
        assert s.normalized_supabase_url == "https://project.supabase.co"
