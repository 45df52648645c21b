from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = "Timesheet Ledger"
    app_version: str = "0.1.0"
    debug: bool = False
    environment: Literal["development", "staging", "production"] = "development"
    database_url: str = "postgresql+asyncpg://timesheet:timesheet@db:5432/timesheet"
    cors_origins: list[str] = ["http://localhost:3000"]
    log_level: str = "INFO"

    # Background sweep closing clock sessions left open past the staleness cap.
    clock_sweep_enabled: bool = True
    clock_sweep_interval_seconds: int = 1800


_settings: Settings | None = None


def get_settings() -> Settings:
    """Return cached settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
