"""
Configuration module for the team task tracker.

This module provides centralized configuration management using Pydantic settings.
All configuration values can be overridden via environment variables or .env file.
"""

from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings for the task tracker.

    All settings can be configured via environment variables.
    Settings are validated on instantiation to ensure correct configuration.

    Attributes:
        APP_NAME: Display name for the application
        SERVICE_NAME: Service identifier used in logs and health output
        DEBUG: Enable debug mode (shows API docs)
        HOST: Server bind address
        PORT: Server port number
        LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        LOG_JSON: Emit JSON structured logs instead of human-readable lines
        STORAGE_PATH: JSON file backing the key-value store (empty for in-memory)
        SLOW_REQUEST_THRESHOLD_MS: Requests slower than this are logged as warnings
    """

    # Application configuration
    APP_NAME: str = Field(
        default="Team Task Tracker",
        description="Display name for the application",
    )
    SERVICE_NAME: str = Field(default="teamtasker")
    DEBUG: bool = Field(
        default=False,
        description="Enable debug mode",
    )

    # Server configuration
    HOST: str = Field(
        default="127.0.0.1",
        description="Server bind address",
    )
    PORT: int = Field(
        default=8080,
        ge=1,
        le=65535,
        description="Server port number",
    )

    # Logging configuration
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )
    LOG_JSON: bool = Field(
        default=False,
        description="Use JSON structured logging",
    )

    # Storage configuration
    STORAGE_PATH: str = Field(
        default="teamtasker-data.json",
        description="Path of the JSON file holding persisted collections",
    )

    SLOW_REQUEST_THRESHOLD_MS: float = Field(
        default=1000.0,
        gt=0,
        description="Threshold in milliseconds for slow request warnings",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def normalize_log_level(cls, value: str) -> str:
        """Accept log levels in any case."""
        if isinstance(value, str):
            return value.strip().upper()
        return value

    @field_validator("STORAGE_PATH")
    @classmethod
    def validate_storage_path(cls, value: str) -> str:
        """
        Normalize the storage path.

        Args:
            value: The configured path

        Returns:
            The path without surrounding whitespace, empty for in-memory storage
        """
        return value.strip()


# Global settings instance
settings = Settings()
