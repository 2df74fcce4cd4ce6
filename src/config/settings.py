from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application
    APP_NAME: str = "Workout Tracker API"
    APP_VERSION: str = "0.3.0"
    APP_ENV: Literal["development", "staging", "production"] = "development"
    DEBUG: bool = True
    API_PREFIX: str = "/api"

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    # Database
    DATABASE_URL: str = "sqlite+aiosqlite:///./workout_tracker.db"
    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 5
    SEED_EXERCISES: bool = True

    # CORS
    CORS_ORIGINS: list[str] = [
        "http://localhost:3000",
        "http://localhost:8080",
    ]

    # Client data layer
    CLIENT_API_URL: str = "http://localhost:8000/api"
    CLIENT_HEALTH_PATH: str = "/health/database"
    CLIENT_STORE_DIR: str = "./.workout_tracker"
    CLIENT_TIMEOUT_SECONDS: float = 10.0

    # Import limits
    IMPORT_MAX_FILE_BYTES: int = 5 * 1024 * 1024

    # Observability (GlitchTip/Sentry)
    GLITCHTIP_DSN: str = ""
    GLITCHTIP_TRACES_SAMPLE_RATE: float = 0.2
    GLITCHTIP_PROFILES_SAMPLE_RATE: float = 0.1

    @property
    def is_production(self) -> bool:
        return self.APP_ENV == "production"

    @property
    def is_development(self) -> bool:
        return self.APP_ENV == "development"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
