"""
Configuration Module
Version: 1.0.0

Centralized configuration with validation.
Every value can be overridden from the environment or a .env file.
"""
import logging
from functools import lru_cache

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger("configuration")


class Settings(BaseSettings):

    # =========================================================================
    # APPLICATION
    # =========================================================================

    APP_ENV: str = Field(default="development")
    APP_NAME: str = Field(default="Booking Mock API")
    APP_VERSION: str = Field(default="1.0.0")
    LOG_LEVEL: str = Field(default="INFO")

    # =========================================================================
    # SERVER
    # =========================================================================

    HOST: str = Field(default="0.0.0.0")
    PORT: int = Field(default=7070, description="Listening port")

    # =========================================================================
    # PAGINATION
    # =========================================================================

    DEFAULT_PAGE_LIMIT: int = Field(default=20)
    MAX_PAGE_LIMIT: int = Field(default=100)

    # =========================================================================
    # SAMPLE DATA
    # =========================================================================

    SEED_SAMPLE_DATA: bool = Field(
        default=True,
        description="Load the two sample bookings on startup"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore"
    )

    # =========================================================================
    # COMPUTED PROPERTIES
    # =========================================================================

    @property
    def is_production(self) -> bool:
        return self.APP_ENV == "production"

    @property
    def DEBUG(self) -> bool:
        return self.APP_ENV == "development"

    # =========================================================================
    # VALIDATORS
    # =========================================================================

    @field_validator('DEFAULT_PAGE_LIMIT', 'MAX_PAGE_LIMIT')
    @classmethod
    def validate_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"Page limit must be at least 1: {v}")
        return v

    @field_validator('LOG_LEVEL')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown log level: {v}")
        return level

    @model_validator(mode='after')
    def validate_page_limits(self) -> 'Settings':
        if self.DEFAULT_PAGE_LIMIT > self.MAX_PAGE_LIMIT:
            raise ValueError(
                f"DEFAULT_PAGE_LIMIT ({self.DEFAULT_PAGE_LIMIT}) "
                f"exceeds MAX_PAGE_LIMIT ({self.MAX_PAGE_LIMIT})"
            )
        return self


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.
    Raises if an environment override fails validation.
    """
    try:
        return Settings()
    except Exception as e:
        logger.critical(f"FATAL CONFIG ERROR: Could not load settings: {e}")
        raise
