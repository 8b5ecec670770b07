"""Application configuration module.

This module contains settings for the URL shortener service,
loaded from environment variables with appropriate defaults.
"""

from __future__ import annotations

import logging
import string
from enum import Enum
from pathlib import Path
from typing import Any, List, Optional, Union

from pydantic import AliasChoices, Field, computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Set up basic logger for config module
logger = logging.getLogger(__name__)

# Base directory of the project
BASE_DIR = Path(__file__).resolve().parent.parent.parent


class EnvironmentType(str, Enum):
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TESTING = "testing"


class Settings(BaseSettings):
    """Service settings loaded from environment variables with defaults.

    Settings are loaded from environment variables, with fallback to
    values in .env file if present, and finally to the default values
    specified here.
    """
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Environment setting
    ENVIRONMENT: EnvironmentType = EnvironmentType.DEVELOPMENT

    # App Information
    APP_NAME: str = "URL Shortener"
    APP_VERSION: str = "0.1.0"
    APP_DESCRIPTION: str = "Short codes that redirect to long URLs, with expiry bookkeeping"

    # Server Configuration
    HOST: str = "0.0.0.0"
    PORT: int = 3000
    API_PREFIX: str = "/api"  # Only used for health endpoints
    DEBUG: bool = False

    # CORS settings
    CORS_ORIGINS: Union[List[str], str] = ["*"]

    # Short code generation
    SHORT_CODE_LENGTH: int = Field(default=7, ge=1)
    SHORT_CODE_CHARS: str = string.ascii_letters + string.digits
    SHORTEN_MAX_ATTEMPTS: int = Field(default=5, ge=1)  # Inserts tried before giving up on collisions

    # Expiry assigned to new mappings (in days)
    DEFAULT_EXPIRATION_DAYS: int = Field(default=30, ge=1)
    MAX_EXPIRATION_DAYS: int = Field(default=36500, ge=1)  # Upper bound for daysToAdd on extend

    # Full connection string, takes precedence over the POSTGRES_* components
    DATABASE_URL: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("DATABASE_URL", "DB_URL"),
    )

    # PostgreSQL settings
    POSTGRES_SERVER: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_USER: str = "postgres"
    POSTGRES_PASSWORD: str = "postgres"
    POSTGRES_DB: str = "url_shortener"

    # PostgreSQL pool settings
    POSTGRES_POOL_SIZE: int = 20
    POSTGRES_POOL_MAX_OVERFLOW: int = 10
    POSTGRES_POOL_TIMEOUT: int = 30
    POSTGRES_POOL_RECYCLE: int = 300
    DB_ECHO: bool = False
    DB_CREATE_TABLES: bool = True  # Run metadata.create_all when the store connects

    # Logging configuration
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"
    LOG_FILENAME: str = "app.log"
    LOG_FILE_ENABLED: bool = True
    LOG_ROTATION: str = "10 MB"
    LOG_RETENTION: str = "7 days"
    LOG_FORMAT: str = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level} | {message}"
    LOG_JSON: bool = True
    REQUEST_LOGGING_ENABLED: bool = True

    # Expired mapping cleanup (off by default, expiry is advisory)
    EXPIRY_CLEANUP_ENABLED: bool = False
    CLEANUP_INTERVAL_HOURS: int = 24
    CLEANUP_START_ON_STARTUP: bool = False

    # Scheduler settings
    SCHEDULER_JOB_COALESCE: bool = True  # Combine multiple pending executions of a job into a single execution
    SCHEDULER_JOB_MAX_INSTANCES: int = 1
    SCHEDULER_MISFIRE_GRACE_TIME: int = 15 * 60  # Seconds to still run misfired job after scheduled time

    # Validators
    @field_validator("SHORT_CODE_CHARS")
    def validate_code_chars(cls, v: str) -> str:
        if not v:
            raise ValueError("SHORT_CODE_CHARS must not be empty")
        return v

    @field_validator("DATABASE_URL", mode="before")
    def validate_database_url(cls, v: Any) -> Optional[str]:
        """Treat an empty connection string as unset."""
        if v is None or (isinstance(v, str) and not v.strip()):
            return None
        return v

    @field_validator("CORS_ORIGINS")
    def validate_list_or_string(cls, v: Union[List[str], str]) -> List[str]:
        """Convert comma-separated string to list if needed."""
        if isinstance(v, str):
            if not v.strip():
                return []
            if v == "*":
                return ["*"]
            return [item.strip() for item in v.split(",")]
        return v

    # Computed fields
    @computed_field
    def SQLALCHEMY_DATABASE_URI(self) -> str:
        """Use DATABASE_URL when given, otherwise build an asyncpg URI."""
        if self.DATABASE_URL:
            return self.DATABASE_URL

        return f"postgresql+asyncpg://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"


# Create a singleton instance of the settings
settings = Settings()
