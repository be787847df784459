"""
Centralized settings configuration using Pydantic BaseSettings.

Part of FL-1: Introduce settings.py with Pydantic BaseSettings

All environment variables are defined here with types, defaults, and validation.
Use get_settings() for dependency injection compatibility in FastAPI.

Usage:
    from backend.settings import get_settings, Settings

    # In FastAPI endpoints (dependency injection)
    @app.get("/")
    def read_root(settings: Settings = Depends(get_settings)):
        return {"environment": settings.environment}

    # Direct access (module-level)
    settings = get_settings()
    print(settings.catalog_base_url)
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # -------------------------------------------------------------------------
    # Core Environment
    # -------------------------------------------------------------------------
    environment: str = Field(
        default="development",
        description="Runtime environment: development, staging, production",
    )

    # -------------------------------------------------------------------------
    # Storage
    # -------------------------------------------------------------------------
    storage_backend: str = Field(
        default="memory",
        description="Key-value backend: memory or supabase",
    )
    storage_quota_bytes: int = Field(
        default=5 * 1024 * 1024,
        ge=1,
        description="Byte quota of the in-memory backend",
    )
    supabase_url: Optional[str] = Field(
        default=None,
        description="Supabase project URL",
    )
    supabase_service_role_key: Optional[str] = Field(
        default=None,
        description="Supabase service role key (full access)",
    )
    supabase_table: str = Field(
        default="kv_store",
        description="Table backing the Supabase key-value store",
    )
    exercise_cache_ttl_seconds: int = Field(
        default=24 * 60 * 60,
        ge=0,
        description="Lifetime of cached exercise pools",
    )
    plan_retention_days: int = Field(
        default=30,
        ge=1,
        description="Plans dated further back are pruned",
    )

    # -------------------------------------------------------------------------
    # External Services - wger exercise catalog
    # -------------------------------------------------------------------------
    catalog_base_url: str = Field(
        default="https://wger.de/api/v2",
        description="Base URL of the wger REST API",
    )
    catalog_timeout_seconds: float = Field(
        default=5.0,
        gt=0,
        description="Deadline for a single catalog request",
    )
    catalog_page_size: int = Field(
        default=25,
        ge=1,
        le=100,
        description="Exercises requested per category",
    )
    fallback_dataset_path: Optional[str] = Field(
        default=None,
        description="Override for the bundled fallback dataset",
    )

    # -------------------------------------------------------------------------
    # Localization
    # -------------------------------------------------------------------------
    display_language: str = Field(
        default="en",
        description="Language of exercise names and descriptions",
    )

    # -------------------------------------------------------------------------
    # Observability - Sentry
    # -------------------------------------------------------------------------
    sentry_dsn: Optional[str] = Field(
        default=None,
        description="Sentry DSN for error tracking",
    )

    # -------------------------------------------------------------------------
    # Validators
    # -------------------------------------------------------------------------
    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Ensure environment is a valid value."""
        valid_environments = {"development", "staging", "production", "test"}
        if v.lower() not in valid_environments:
            raise ValueError(
                f"Invalid environment '{v}'. Must be one of: {valid_environments}"
            )
        return v.lower()

    @field_validator("storage_backend")
    @classmethod
    def validate_storage_backend(cls, v: str) -> str:
        valid_backends = {"memory", "supabase"}
        if v.lower() not in valid_backends:
            raise ValueError(
                f"Invalid storage backend '{v}'. Must be one of: {valid_backends}"
            )
        return v.lower()

    # -------------------------------------------------------------------------
    # Helper Properties
    # -------------------------------------------------------------------------
    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == "development"

    @property
    def is_test(self) -> bool:
        """Check if running in test environment."""
        return self.environment == "test"


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    For testing, you can clear the cache with get_settings.cache_clear().

    Returns:
        Settings: Application settings instance
    """
    return Settings()
