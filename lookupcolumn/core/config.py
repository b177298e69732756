"""Application configuration (settings and environment).

Single source of truth for all configuration. Uses pydantic-settings
with .env support. Values are validated at load time.
"""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment and .env.

    DATABASE_URL is optional so the library can be imported and the
    cache used with any data source; the HTTP app refuses lookup
    requests until it is set.
    """

    # App
    app_name: str = "lookupcolumn"
    app_version: str = "0.1.0"
    debug: bool = False

    # Database: any SQLAlchemy URL (e.g. postgresql+psycopg://..., sqlite:///lookups.db)
    database_url: str = ""
    database_echo: bool = False
    db_pool_pre_ping: bool = True
    # Optional driver timeout in seconds (None = driver default)
    db_command_timeout: int | None = None

    # Lookups
    lookup_default_field_name: str = "name"
    # Comma-separated lookup tables loaded at startup with the default field name
    lookup_preload_tables: str = ""

    # OpenTelemetry
    telemetry_enabled: bool = False
    telemetry_exporter: str = "console"
    telemetry_otlp_endpoint: str | None = None
    telemetry_sample_rate: float = 1.0
    telemetry_environment: str = "development"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @field_validator("lookup_default_field_name")
    @classmethod
    def validate_field_name(cls, value: str) -> str:
        """Reject an empty default field name."""
        if not value.strip():
            raise ValueError("LOOKUP_DEFAULT_FIELD_NAME must not be empty")
        return value.strip()

    @field_validator("telemetry_sample_rate")
    @classmethod
    def validate_sample_rate(cls, value: float) -> float:
        """Sample rate must be within 0.0-1.0."""
        if not 0.0 <= value <= 1.0:
            raise ValueError("TELEMETRY_SAMPLE_RATE must be between 0.0 and 1.0")
        return value

    @property
    def preload_tables(self) -> list[str]:
        """Lookup tables to warm at startup, parsed from lookup_preload_tables."""
        return [t.strip() for t in self.lookup_preload_tables.split(",") if t.strip()]


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings (single instance per process).

    Validation runs on first call, not at import time. In tests, call
    get_settings.cache_clear() before overriding env vars so the next
    get_settings() uses the new values.

    Returns:
        Loaded and validated Settings instance.
    """
    return Settings()
