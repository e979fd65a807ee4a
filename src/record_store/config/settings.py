"""
Configuration management for the record store.

This module provides environment-based configuration using Pydantic
BaseSettings. Values are read from the process environment and from an
optional ``.env`` file next to the working directory.
"""

import os
from functools import lru_cache
from pathlib import Path

import structlog
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import make_url
from sqlalchemy.exc import ArgumentError

logger = structlog.get_logger(__name__)

ENV_FILE_OVERRIDE = os.getenv("RECORD_STORE_ENV_FILE")
SETTINGS_ENV_FILE = Path(ENV_FILE_OVERRIDE).expanduser() if ENV_FILE_OVERRIDE else Path(".env")

IN_MEMORY_URL = "sqlite://"


class Settings(BaseSettings):
    """
    Record store settings read from the environment and an optional .env file.

    Uppercase fields are read without prefix:
    - DATABASE_URL: SQLAlchemy URL of the SQLite database (default in-memory)
    - LOG_LEVEL: Logging level (uppercase)
    - LOG_TO_FILE: Enable the rotating file handler
    - LOG_FILE_DIR: Directory for log files

    Lowercase fields use the RECORD_STORE_ prefix, e.g. RECORD_STORE_SQL_ECHO.
    """

    DATABASE_URL: str = Field(
        default=IN_MEMORY_URL,
        validation_alias="DATABASE_URL",
        description="SQLAlchemy database URL (SQLite only)",
    )
    LOG_LEVEL: str = Field(
        default="INFO",
        validation_alias="LOG_LEVEL",
        description="Logging level (uppercase)",
    )
    LOG_TO_FILE: bool = Field(
        default=False,
        validation_alias="LOG_TO_FILE",
        description="Also write logs to a daily rotating file",
    )
    LOG_FILE_DIR: str = Field(
        default="logs",
        validation_alias="LOG_FILE_DIR",
        description="Directory for log files",
    )

    sql_echo: bool = Field(
        default=False, description="Echo every SQL statement through SQLAlchemy"
    )

    @field_validator("DATABASE_URL")
    @classmethod
    def validate_sqlite_url(cls, value: str) -> str:
        """Reject database URLs for engines other than SQLite.

        Generated statements target SQLite syntax only, so other backends
        are refused at startup instead of failing on the first statement.

        Raises:
            ValueError: If the URL is malformed or names another backend
        """
        try:
            url = make_url(value)
        except ArgumentError as e:
            raise ValueError(f"Invalid database URL: {e}") from e

        if url.get_backend_name() != "sqlite":
            raise ValueError(
                "Record store requires a SQLite database. "
                f"Database URL must start with 'sqlite://', got: {value[:20]}..."
            )
        return value

    @field_validator("LOG_LEVEL")
    @classmethod
    def normalize_log_level(cls, value: str) -> str:
        return value.upper()

    model_config = SettingsConfigDict(
        env_prefix="RECORD_STORE_",
        env_file=str(SETTINGS_ENV_FILE),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Settings loaded once per process; call ``get_settings.cache_clear()`` to reload.

    Returns:
        The shared Settings instance
    """
    settings = Settings()
    logger.debug(
        "configuration.loaded",
        backend=make_url(settings.DATABASE_URL).get_backend_name(),
        log_level=settings.LOG_LEVEL,
    )
    return settings
