import os
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from userhub.core.config import Settings, get_settings


def test_settings_defaults():
    """Test that settings load with correct defaults."""
    get_settings.cache_clear()

    settings = Settings()

    assert settings.app_name == "UserHub"
    assert settings.environment == "development"
    assert settings.debug is False
    assert settings.api_prefix == "/api/v1"
    assert settings.default_role_id == 4
    assert settings.statistics_window_days == 30
    assert settings.is_development is True
    assert settings.is_production is False


def test_settings_env_override():
    """Test that environment variables override defaults."""
    get_settings.cache_clear()

    with patch.dict(os.environ, {
        "USERHUB_ENVIRONMENT": "production",
        "USERHUB_DEFAULT_ROLE_ID": "2",
        "USERHUB_PORT": "9000",
    }):
        settings = Settings()

        assert settings.environment == "production"
        assert settings.default_role_id == 2
        assert settings.port == 9000
        assert settings.is_production is True


def test_default_role_must_be_positive():
    """Test that a non-positive default role is rejected."""
    with pytest.raises(ValidationError):
        Settings(default_role_id=0)


def test_cors_origins_parsing():
    """Test CORS origins parsing from a comma-separated string."""
    settings = Settings(cors_origins="http://example.com, http://test.com")

    assert settings.cors_origins == ["http://example.com", "http://test.com"]


def test_sqlite_rejects_multiple_workers():
    """Test that SQLite cannot be combined with several workers."""
    with pytest.raises(ValidationError, match="SQLite does not support multiple worker"):
        Settings(database_url="sqlite+aiosqlite:///./data/test.db", workers=4)


def test_postgres_allows_multiple_workers():
    settings = Settings(database_url="postgresql+asyncpg://u:p@localhost/userhub", workers=4)

    assert settings.workers == 4


def test_get_settings_is_cached():
    get_settings.cache_clear()

    assert get_settings() is get_settings()
