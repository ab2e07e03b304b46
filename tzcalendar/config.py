"""Configuration management using pydantic-settings."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    database_path: str = "./data/tzcalendar.db"

    # Viewer's zone; None means detect from the host (see convert.local_zone_id)
    local_timezone: str | None = None

    # Default profile created at startup when none exists
    default_timezone_name: str = "Local Time"
    default_timezone_color: str = "#007AFF"

    # Upper bound on candidates examined per recurrence walk
    max_recurrence_steps: int = 10000

    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False
    )


settings = Settings()
