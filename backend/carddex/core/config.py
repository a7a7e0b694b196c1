"""
Application configuration settings.

All configuration is loaded from environment variables with sensible defaults.
"""
from functools import lru_cache
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    app_name: str = "CardDex Progression"
    api_debug: bool = False

    # API Server
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    # Database
    postgres_host: str = "db"
    postgres_port: int = 5432
    postgres_user: str = "carddex"
    postgres_password: str = "carddex_password"
    postgres_db: str = "carddex"
    database_url: str | None = None

    # Progression rules
    # Grace days reset on ISO week boundaries (Monday)
    grace_days_per_week: int = 1
    streak_window_days: int = 30
    # Window used when the streak length feeds streak badge evaluation
    streak_lookback_days: int = 365
    activity_timezone: str = "UTC"

    @field_validator("streak_window_days", "streak_lookback_days")
    @classmethod
    def validate_window(cls, v: int) -> int:
        """Windows must cover at least today."""
        if v < 1:
            raise ValueError("window must be at least 1 day")
        return v

    @field_validator("grace_days_per_week")
    @classmethod
    def validate_quota(cls, v: int) -> int:
        if v < 0:
            raise ValueError("grace_days_per_week cannot be negative")
        return v

    @field_validator("activity_timezone")
    @classmethod
    def validate_timezone(cls, v: str) -> str:
        """Reject time zone names zoneinfo cannot resolve."""
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"unknown time zone: {v}") from e
        return v

    @property
    def database_url_computed(self) -> str:
        """Compute database URL from components if not explicitly set."""
        if self.database_url:
            return self.database_url
        return (
            f"postgresql+asyncpg://{self.postgres_user}:{self.postgres_password}"
            f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )

    @property
    def activity_tz(self) -> ZoneInfo:
        return ZoneInfo(self.activity_timezone)

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
