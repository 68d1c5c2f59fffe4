"""Unit tests for service settings."""

import pytest
from pydantic import ValidationError

from gatehouse.config import Settings
from gatehouse.core.constants import DEFAULT_INSECURE_SECRET


pytestmark = pytest.mark.unit


def make_settings(**overrides) -> Settings:
    return Settings(_env_file=None, **overrides)


class TestDatabaseUrl:
    """Tests for the async driver rewrite."""

    @pytest.mark.parametrize(
        "url",
        [
            "postgresql://app:pw@db:5432/gatehouse",
            "postgres://app:pw@db:5432/gatehouse",
        ],
    )
    def test_plain_postgres_gets_asyncpg(self, url):
        settings = make_settings(database_url=url)

        assert settings.async_database_url == (
            "postgresql+asyncpg://app:pw@db:5432/gatehouse"
        )

    def test_async_urls_pass_through(self):
        settings = make_settings(database_url="sqlite+aiosqlite:///./gatehouse.db")

        assert settings.async_database_url == "sqlite+aiosqlite:///./gatehouse.db"


class TestSecretKey:
    """Tests for secret key checks."""

    def test_short_secret_rejected(self):
        with pytest.raises(ValidationError, match="SECRET_KEY must be at least"):
            make_settings(secret_key="too-short")

    def test_default_secret_allowed_outside_production(self):
        settings = make_settings(environment="development")

        assert settings.secret_key == DEFAULT_INSECURE_SECRET
        assert settings.is_production is False
        assert settings.is_development is True

    def test_default_secret_refused_in_production(self):
        settings = make_settings(environment="production")

        with pytest.raises(ValueError, match="SECRET_KEY must be set in production"):
            _ = settings.is_production

    def test_production_with_real_secret(self):
        settings = make_settings(environment="production", secret_key="x" * 40)

        assert settings.is_production is True
