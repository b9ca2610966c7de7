#!/usr/bin/env python3
"""
Centralized Configuration Module using Pydantic Settings

This module provides type-safe, environment-based configuration for the
session/completion protocol server. All tunables (session TTL, stream pacing,
chunking threshold, logging) live here so the rest of the code never reads
environment variables directly.

Architectural Decision: Pydantic Settings for type safety and validation
- Environment variable loading with .env support
- Type validation at startup (fail fast on misconfiguration)
- Grouped read-only views (app, logging, session, streaming)
"""

from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class SessionSettings(BaseSettings):
    """
    Session lifecycle configuration.

    STAGE-S: Session store tuning
    """

    SESSION_TTL_SECONDS: int = Field(default=1800, gt=0, description="Session time-to-live (30 minutes)")
    SESSION_LOCK_STRIPES: int = Field(default=16, ge=1, description="Number of lock stripes in the session store")

    model_config = SettingsConfigDict(env_prefix="", case_sensitive=True)


class StreamingSettings(BaseSettings):
    """
    Streaming pipeline configuration.

    STAGE-C: Chunking and delivery pacing
    """

    STREAM_CHUNK_DELAY_SECONDS: float = Field(default=0.1, ge=0, description="Delay between delivered chunks")
    STREAM_MAX_DURATION_SECONDS: float = Field(default=300.0, gt=0, description="Upper bound on one stream's lifetime")
    CHUNK_CHAR_THRESHOLD: int = Field(default=10, ge=1, description="Chunk closes once longer than this")
    DEFAULT_MAX_TOKENS: int = Field(default=100, ge=1, description="max_tokens used when the caller omits it")

    model_config = SettingsConfigDict(env_prefix="", case_sensitive=True)


class LoggingSettings(BaseSettings):
    """
    Logging configuration for structured logging.

    STAGE-L: Logging configuration
    """

    LOG_LEVEL: str = Field(default="INFO", description="Logging level")
    LOG_FORMAT: Literal["json", "console"] = Field(default="json", description="Log output format")

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"LOG_LEVEL must be one of {valid_levels}")
        return v.upper()

    model_config = SettingsConfigDict(env_prefix="", case_sensitive=True)


class ApplicationSettings(BaseSettings):
    """
    General application settings.

    STAGE-0: Application initialization
    """

    ENVIRONMENT: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Application environment"
    )
    DEBUG: bool = Field(default=False, description="Debug mode")
    APP_NAME: str = Field(default="Protocol Server", description="Application name")
    APP_VERSION: str = Field(default="1.0.0", description="Application version")
    API_HOST: str = Field(default="0.0.0.0", description="API host")
    API_PORT: int = Field(default=8000, description="API port")
    CORS_ORIGINS: list[str] = Field(default=["*"], description="Allowed CORS origins")
    INCLUDE_TRACEBACK: bool = Field(
        default=False, description="Attach tracebacks to 500 responses (development only)"
    )

    model_config = SettingsConfigDict(env_prefix="", case_sensitive=True)


class Settings(BaseSettings):
    """
    Main settings class that aggregates all configuration sections.

    Usage:
        from protocol_server.core.config.settings import get_settings

        settings = get_settings()
        ttl = settings.session.SESSION_TTL_SECONDS
        delay = settings.streaming.STREAM_CHUNK_DELAY_SECONDS
    """

    # Session settings
    SESSION_TTL_SECONDS: int = Field(default=1800, gt=0, description="Session time-to-live (30 minutes)")
    SESSION_LOCK_STRIPES: int = Field(default=16, ge=1, description="Number of lock stripes in the session store")

    # Streaming settings
    STREAM_CHUNK_DELAY_SECONDS: float = Field(default=0.1, ge=0, description="Delay between delivered chunks")
    STREAM_MAX_DURATION_SECONDS: float = Field(default=300.0, gt=0, description="Upper bound on one stream's lifetime")
    CHUNK_CHAR_THRESHOLD: int = Field(default=10, ge=1, description="Chunk closes once longer than this")
    DEFAULT_MAX_TOKENS: int = Field(default=100, ge=1, description="max_tokens used when the caller omits it")

    # Logging settings
    LOG_LEVEL: str = Field(default="INFO", description="Logging level")
    LOG_FORMAT: Literal["json", "console"] = Field(default="json", description="Log output format")

    # Application settings
    ENVIRONMENT: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Application environment"
    )
    DEBUG: bool = Field(default=False, description="Debug mode")
    APP_NAME: str = Field(default="Protocol Server", description="Application name")
    APP_VERSION: str = Field(default="1.0.0", description="Application version")
    API_HOST: str = Field(default="0.0.0.0", description="API host")
    API_PORT: int = Field(default=8000, description="API port")
    CORS_ORIGINS: list[str] = Field(default=["*"], description="Allowed CORS origins")
    INCLUDE_TRACEBACK: bool = Field(
        default=False, description="Attach tracebacks to 500 responses (development only)"
    )

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"LOG_LEVEL must be one of {valid_levels}")
        return v.upper()

    @property
    def session(self) -> 'SessionSettings':
        """Get session settings."""
        return SessionSettings(
            SESSION_TTL_SECONDS=self.SESSION_TTL_SECONDS,
            SESSION_LOCK_STRIPES=self.SESSION_LOCK_STRIPES,
        )

    @property
    def streaming(self) -> 'StreamingSettings':
        """Get streaming settings."""
        return StreamingSettings(
            STREAM_CHUNK_DELAY_SECONDS=self.STREAM_CHUNK_DELAY_SECONDS,
            STREAM_MAX_DURATION_SECONDS=self.STREAM_MAX_DURATION_SECONDS,
            CHUNK_CHAR_THRESHOLD=self.CHUNK_CHAR_THRESHOLD,
            DEFAULT_MAX_TOKENS=self.DEFAULT_MAX_TOKENS,
        )

    @property
    def logging(self) -> 'LoggingSettings':
        """Get logging settings."""
        return LoggingSettings(
            LOG_LEVEL=self.LOG_LEVEL,
            LOG_FORMAT=self.LOG_FORMAT,
        )

    @property
    def app(self) -> 'ApplicationSettings':
        """Get application settings."""
        return ApplicationSettings(
            ENVIRONMENT=self.ENVIRONMENT,
            DEBUG=self.DEBUG,
            APP_NAME=self.APP_NAME,
            APP_VERSION=self.APP_VERSION,
            API_HOST=self.API_HOST,
            API_PORT=self.API_PORT,
            CORS_ORIGINS=self.CORS_ORIGINS,
            INCLUDE_TRACEBACK=self.INCLUDE_TRACEBACK,
        )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore"  # Ignore extra environment variables
    )


# Global settings instance (singleton pattern)
_settings: Settings | None = None


def get_settings() -> Settings:
    """
    Get the global settings instance (singleton).

    STAGE-0.3: Settings initialization

    Returns:
        Settings: Global settings instance
    """
    global _settings

    if _settings is None:
        _settings = Settings()

    return _settings


def reload_settings() -> Settings:
    """
    Reload settings (useful for testing).

    Returns:
        Settings: New settings instance
    """
    global _settings
    _settings = Settings()
    return _settings
