"""
OrgTasks Configuration Management

Uses Pydantic Settings for type-safe configuration from environment variables.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    # =========================================================================
    # APPLICATION
    # =========================================================================
    APP_NAME: str = "OrgTasks"
    APP_ENV: str = "development"
    DEBUG: bool = True
    LOG_LEVEL: str = "info"
    VERSION: str = "0.1.0"

    # =========================================================================
    # API SERVER
    # =========================================================================
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8000
    API_WORKERS: int = 1
    CORS_ORIGINS: str = "http://localhost:4200"

    # =========================================================================
    # TASKS
    # =========================================================================
    TASK_DEFAULT_PAGE_SIZE: int = 10
    TASK_MAX_PAGE_SIZE: int = 100

    # =========================================================================
    # AUDIT TRAIL
    # =========================================================================
    AUDIT_DEFAULT_PAGE_SIZE: int = 20
    AUDIT_MAX_PAGE_SIZE: int = 100

    # =========================================================================
    # OBSERVABILITY
    # =========================================================================
    METRICS_ENABLED: bool = True

    # =========================================================================
    # DATABASE
    # =========================================================================
    # Create tables on startup in development; production runs migrations
    AUTO_CREATE_SCHEMA: bool = True

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Singleton instance for easy import
settings = get_settings()
