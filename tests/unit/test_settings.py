"""
Unit tests for backend/settings.py

Part of FL-1: Introduce settings.py with Pydantic BaseSettings
"""

import pytest
from pydantic import ValidationError

from backend.settings import Settings, get_settings


# Environment variables that CI might set which we need to clear for default tests
CI_ENV_VARS = [
    "ENVIRONMENT",
    "STORAGE_BACKEND",
    "SUPABASE_URL",
    "SUPABASE_SERVICE_ROLE_KEY",
    "CATALOG_BASE_URL",
    "DISPLAY_LANGUAGE",
    "SENTRY_DSN",
]


@pytest.fixture
def clean_env(monkeypatch):
    """Clear CI environment variables to test true defaults."""
    for var in CI_ENV_VARS:
        monkeypatch.delenv(var, raising=False)


@pytest.mark.unit
class TestSettingsDefaults:
    """Test that Settings applies correct defaults."""

    def test_environment_default(self, clean_env):
        """Default environment should be development."""
        settings = Settings(_env_file=None)
        assert settings.environment == "development"

    def test_storage_defaults(self, clean_env):
        """Storage defaults to the in-memory backend."""
        settings = Settings(_env_file=None)
        assert settings.storage_backend == "memory"
        assert settings.storage_quota_bytes == 5 * 1024 * 1024
        assert settings.exercise_cache_ttl_seconds == 86400
        assert settings.plan_retention_days == 30

    def test_supabase_fields_default_to_none(self, clean_env):
        """Supabase credentials should default to None."""
        settings = Settings(_env_file=None)
        assert settings.supabase_url is None
        assert settings.supabase_service_role_key is None
        assert settings.supabase_table == "kv_store"

    def test_catalog_defaults(self, clean_env):
        """wger catalog defaults."""
        settings = Settings(_env_file=None)
        assert settings.catalog_base_url == "https://wger.de/api/v2"
        assert settings.catalog_timeout_seconds == 5.0
        assert settings.catalog_page_size == 25
        assert settings.fallback_dataset_path is None

    def test_display_language_default(self, clean_env):
        settings = Settings(_env_file=None)
        assert settings.display_language == "en"

    def test_sentry_dsn_default_to_none(self, clean_env):
        """Sentry DSN should default to None."""
        settings = Settings(_env_file=None)
        assert settings.sentry_dsn is None


@pytest.mark.unit
class TestSettingsFromEnvironment:
    def test_values_read_from_env(self, monkeypatch):
        monkeypatch.setenv("STORAGE_BACKEND", "supabase")
        monkeypatch.setenv("CATALOG_TIMEOUT_SECONDS", "1.5")
        monkeypatch.setenv("DISPLAY_LANGUAGE", "he")

        settings = Settings(_env_file=None)

        assert settings.storage_backend == "supabase"
        assert settings.catalog_timeout_seconds == 1.5
        assert settings.display_language == "he"


@pytest.mark.unit
class TestSettingsValidation:
    """Test Settings validation behavior."""

    def test_valid_environments_accepted(self):
        """Valid environment values should be accepted."""
        for env in ["development", "staging", "production", "test"]:
            settings = Settings(environment=env, _env_file=None)
            assert settings.environment == env

    def test_environment_case_insensitive(self):
        """Environment validation should be case-insensitive."""
        settings = Settings(environment="PRODUCTION", _env_file=None)
        assert settings.environment == "production"

    def test_invalid_environment_raises_error(self):
        """Invalid environment should raise ValidationError."""
        with pytest.raises(ValidationError) as exc_info:
            Settings(environment="invalid", _env_file=None)
        assert "Invalid environment" in str(exc_info.value)

    def test_storage_backend_case_insensitive(self):
        settings = Settings(storage_backend="Supabase", _env_file=None)
        assert settings.storage_backend == "supabase"

    def test_invalid_storage_backend_raises_error(self):
        with pytest.raises(ValidationError) as exc_info:
            Settings(storage_backend="redis", _env_file=None)
        assert "Invalid storage backend" in str(exc_info.value)

    @pytest.mark.parametrize(
        "field,value",
        [
            ("catalog_timeout_seconds", 0),
            ("catalog_page_size", 0),
            ("catalog_page_size", 101),
            ("plan_retention_days", 0),
            ("exercise_cache_ttl_seconds", -1),
        ],
    )
    def test_out_of_range_values_rejected(self, field, value):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, **{field: value})


@pytest.mark.unit
class TestSettingsProperties:
    """Test Settings computed properties."""

    def test_is_production_property(self):
        """is_production should return True only in production."""
        assert Settings(environment="production", _env_file=None).is_production is True
        assert Settings(environment="development", _env_file=None).is_production is False

    def test_is_development_property(self):
        """is_development should return True only in development."""
        assert Settings(environment="development", _env_file=None).is_development is True
        assert Settings(environment="production", _env_file=None).is_development is False

    def test_is_test_property(self):
        """is_test should return True only in test environment."""
        assert Settings(environment="test", _env_file=None).is_test is True
        assert Settings(environment="development", _env_file=None).is_test is False


@pytest.mark.unit
class TestGetSettings:
    """Test get_settings() function."""

    def test_get_settings_returns_settings_instance(self):
        """get_settings() should return a Settings instance."""
        get_settings.cache_clear()
        assert isinstance(get_settings(), Settings)

    def test_get_settings_is_cached(self):
        """get_settings() should return the same cached instance."""
        get_settings.cache_clear()
        assert get_settings() is get_settings()
