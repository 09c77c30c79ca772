"""
Centralized settings configuration using Pydantic BaseSettings.

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
    print(settings.daily_limit)
"""

import json
from functools import lru_cache
from typing import Annotated, List, Optional, Union

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


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
    # Supabase Database
    # -------------------------------------------------------------------------
    # Missing credentials degrade to empty strings; the store client then
    # fails per call and the endpoints answer 500.
    supabase_url: str = Field(
        default="",
        description="Supabase project URL",
    )
    supabase_service_role_key: str = Field(
        default="",
        description="Supabase service role key (bypasses row level security)",
    )

    @property
    def supabase_key(self) -> str:
        """Get the Supabase key.

        Usage endpoints read and write rows for arbitrary users, so only the
        service role key is accepted.
        """
        return self.supabase_service_role_key

    # -------------------------------------------------------------------------
    # Usage Quota
    # -------------------------------------------------------------------------
    daily_limit: int = Field(
        default=10,
        ge=0,
        description="Free queries per user per UTC calendar day",
    )
    usage_atomic_increment: bool = Field(
        default=False,
        description=(
            "Use the increment_usage_tracking database function instead of "
            "select-then-write when recording a query"
        ),
    )

    # -------------------------------------------------------------------------
    # CORS
    # -------------------------------------------------------------------------
    allowed_origins: Annotated[List[str], NoDecode] = Field(
        default_factory=lambda: ["*"],
        description="Value(s) for Access-Control-Allow-Origin. Defaults to '*'.",
    )

    # -------------------------------------------------------------------------
    # Observability - Sentry
    # -------------------------------------------------------------------------
    sentry_dsn: Optional[str] = Field(
        default=None,
        description="Sentry DSN for error tracking",
    )

    # -------------------------------------------------------------------------
    # Deployment / Render
    # -------------------------------------------------------------------------
    render_git_commit: Optional[str] = Field(
        default=None,
        description="Git commit SHA provided by Render (RENDER_GIT_COMMIT)",
    )

    # -------------------------------------------------------------------------
    # Observability - OpenTelemetry
    # -------------------------------------------------------------------------
    otel_enabled: bool = Field(
        default=False,
        description="Enable OpenTelemetry tracing and metrics",
    )
    otel_service_name: str = Field(
        default="usage-api",
        description="service.name resource attribute",
    )
    otel_exporter_otlp_endpoint: Optional[str] = Field(
        default=None,
        description="OTLP collector endpoint. Console exporter when unset.",
    )
    otel_traces_sample_rate: float = Field(
        default=1.0,
        ge=0.0,
        le=1.0,
        description="Fraction of traces to sample",
    )
    otel_metrics_export_interval_ms: int = Field(
        default=60000,
        description="Interval between OTLP metric exports",
    )

    # -------------------------------------------------------------------------
    # Validators
    # -------------------------------------------------------------------------
    @field_validator("allowed_origins", mode="before")
    @classmethod
    def parse_allowed_origins(cls, v: Union[str, List[str], None]) -> List[str]:
        """Accept JSON array, comma-separated string, or list."""
        if v is None:
            return ["*"]
        if isinstance(v, list):
            return v
        v = v.strip()
        if not v:
            return ["*"]
        if v.startswith("["):
            return json.loads(v)
        return [origin.strip() for origin in v.split(",") if origin.strip()]

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

    # -------------------------------------------------------------------------
    # Helper Properties
    # -------------------------------------------------------------------------
    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

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
