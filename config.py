"""
Configuration management for DoseTrack
"""

from functools import lru_cache
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # Application
    APP_NAME: str = "DoseTrack"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    ENV: str = "development"

    # API
    API_PREFIX: str = "/api/v1"
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    # Database
    DATABASE_URL: str = "sqlite:///./dose_track.db"
    DATABASE_ECHO: bool = False

    # CORS
    CORS_ORIGINS: list[str] = ["http://localhost:3000", "http://localhost:5173"]

    # Reporting windows
    STATS_DEFAULT_DAYS: int = 30
    MAX_RANGE_DAYS: int = 366

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


class ScheduleConfig:
    """Fixed dose-window policy, identical for every medication"""

    # Minutes relative to the scheduled time of day
    DUE_WINDOW_BEFORE_MINUTES: int = 10
    LATE_AFTER_MINUTES: int = 30
    MISSED_CUTOFF_MINUTES: int = 240  # 4 hours


# Database table names
class TableNames:
    USERS = "users"
    CATEGORIES = "categories"
    MEDICATIONS = "medications"
    DOSE_LOGS = "dose_logs"
    CALENDAR_CREDENTIALS = "calendar_credentials"


settings = get_settings()
schedule_config = ScheduleConfig()
