from functools import lru_cache
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "feedfinder"
    log_level: str = "INFO"
    logs_dir: Path = Path("logs")
    structured_logs_enabled: bool = True

    # HTTP client
    http_timeout_seconds: float = 10.0
    http_connect_timeout_seconds: float = 5.0
    http_user_agent: str = "feedfinder/1.0 (RSS Reader)"

    # Discovery
    itunes_lookup_url: str = "https://itunes.apple.com/lookup"
    discovery_itunes_country: str | None = None
    reddit_icon_timeout_seconds: float = 5.0

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level

    @field_validator("http_timeout_seconds", "reddit_icon_timeout_seconds")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("Timeouts must be positive")
        return v


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
