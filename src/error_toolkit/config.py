"""
Configuration settings for the error toolkit.

All settings are loaded from environment variables with sensible defaults.
Use .env file for local development.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Toolkit settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # === Application ===
    APP_NAME: str = "error-toolkit"
    APP_VERSION: str = "0.1.0"
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # === Retry Defaults ===
    RETRY_MAX_RETRIES: int = 3
    RETRY_BACKOFF: str = "exponential"  # exponential | linear | fixed
    RETRY_INITIAL_DELAY_MS: int = 1000
    RETRY_MAX_DELAY_MS: int = 30000
    RETRY_JITTER: bool = True

    # === Error Formatting ===
    ERROR_INCLUDE_STACK: bool = False  # Never enable in production responses
    ERROR_INCLUDE_TIMESTAMP: bool = True
    ERROR_MAX_CAUSE_DEPTH: int = 32
    ERROR_RESPONSE_FORMAT: str = "json"  # json | string

    # === Monitoring ===
    PROMETHEUS_ENABLED: bool = True


# Global settings instance
settings = Settings()
