#!/usr/bin/env python3
"""
Centralized Configuration Module using Pydantic Settings

This module provides type-safe, environment-based configuration for the
completion relay. All configuration is centralized here to ensure
consistency across modules.

Architectural Decision: Pydantic Settings for type safety and validation
- Environment variable loading with .env support
- Type validation at startup (fail fast on misconfiguration)
- Section views (settings.streaming, settings.providers, ...) for readability
- Easy testing with reload_settings()
"""

from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StreamingSettings(BaseSettings):
    """
    SSE session configuration.

    SSE_HEARTBEAT_INTERVAL keeps proxies from idling out long generations.
    SSE_DISCONNECT_POLL_INTERVAL controls how often the inbound request is
    checked for a client disconnect.
    """

    SSE_HEARTBEAT_INTERVAL: float = Field(default=15.0, gt=0, description="Heartbeat period (seconds)")
    SSE_DISCONNECT_POLL_INTERVAL: float = Field(
        default=1.0, gt=0, description="Client disconnect poll period (seconds)"
    )
    COMPLETION_EXECUTOR: Literal["llm", "fake"] = Field(
        default="llm", description="Completion executor backend"
    )

    model_config = SettingsConfigDict(env_prefix="", case_sensitive=True)


class ProviderSettings(BaseSettings):
    """
    LLM provider endpoints.

    Both providers are reached through their OpenAI-compatible APIs.
    """

    GEMINI_API_KEY: str | None = Field(default=None, description="Google Gemini API key")
    GEMINI_BASE_URL: str = Field(
        default="https://generativelanguage.googleapis.com/v1beta/openai/",
        description="Gemini OpenAI-compatible base URL",
    )
    OPENROUTER_API_KEY: str | None = Field(default=None, description="OpenRouter API key")
    OPENROUTER_BASE_URL: str = Field(
        default="https://openrouter.ai/api/v1", description="OpenRouter base URL"
    )
    PROVIDER_TIMEOUT: float = Field(default=120.0, description="Upstream request timeout (seconds)")

    model_config = SettingsConfigDict(env_prefix="", case_sensitive=True)


class RateLimitSettings(BaseSettings):
    """
    Rate limiting configuration.

    Architectural Decision: slowapi with in-memory storage by default
    - Per-user (X-User-ID) and per-IP limits
    - Point RATE_LIMIT_STORAGE_URI at redis:// for multi-instance deployments
    """

    RATE_LIMIT_ENABLED: bool = Field(default=True, description="Enable rate limiting")
    RATE_LIMIT_COMPLETION: str = Field(default="60/minute", description="Completion endpoint limit")
    RATE_LIMIT_STORAGE_URI: str = Field(default="memory://", description="limits storage URI")

    model_config = SettingsConfigDict(env_prefix="", case_sensitive=True)


class LoggingSettings(BaseSettings):
    """
    Logging configuration for structured logging.

    Architectural Decision: structlog for production-grade logging
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
    """

    ENVIRONMENT: Literal["development", "staging", "production"] = Field(
        default="development", description="Application environment"
    )
    APP_NAME: str = Field(default="Completion Relay", description="Application name")
    APP_VERSION: str = Field(default="1.0.0", description="Application version")
    API_HOST: str = Field(default="0.0.0.0", description="API host")
    API_PORT: int = Field(default=8000, description="API port")
    API_BASE_PATH: str = Field(default="/api", description="Prefix for all API routes")
    CORS_ORIGINS: list[str] = Field(default=["*"], description="Allowed CORS origins")

    model_config = SettingsConfigDict(env_prefix="", case_sensitive=True)


class Settings(BaseSettings):
    """
    Main settings class that aggregates all configuration sections.

    Usage:
        from completion_relay.core.config.settings import get_settings

        settings = get_settings()
        interval = settings.streaming.SSE_HEARTBEAT_INTERVAL
        gemini_key = settings.providers.GEMINI_API_KEY
    """

    # Application settings
    ENVIRONMENT: Literal["development", "staging", "production"] = Field(
        default="development", description="Application environment"
    )
    APP_NAME: str = Field(default="Completion Relay", description="Application name")
    APP_VERSION: str = Field(default="1.0.0", description="Application version")
    API_HOST: str = Field(default="0.0.0.0", description="API host")
    API_PORT: int = Field(default=8000, description="API port")
    API_BASE_PATH: str = Field(default="/api", description="Prefix for all API routes")
    CORS_ORIGINS: list[str] = Field(default=["*"], description="Allowed CORS origins")

    # Streaming settings
    SSE_HEARTBEAT_INTERVAL: float = Field(default=15.0, gt=0, description="Heartbeat period (seconds)")
    SSE_DISCONNECT_POLL_INTERVAL: float = Field(
        default=1.0, gt=0, description="Client disconnect poll period (seconds)"
    )
    COMPLETION_EXECUTOR: Literal["llm", "fake"] = Field(
        default="llm", description="Completion executor backend"
    )

    # Provider settings
    GEMINI_API_KEY: str | None = Field(default=None, description="Google Gemini API key")
    GEMINI_BASE_URL: str = Field(
        default="https://generativelanguage.googleapis.com/v1beta/openai/",
        description="Gemini OpenAI-compatible base URL",
    )
    OPENROUTER_API_KEY: str | None = Field(default=None, description="OpenRouter API key")
    OPENROUTER_BASE_URL: str = Field(
        default="https://openrouter.ai/api/v1", description="OpenRouter base URL"
    )
    PROVIDER_TIMEOUT: float = Field(default=120.0, description="Upstream request timeout (seconds)")

    # Rate limiting settings
    RATE_LIMIT_ENABLED: bool = Field(default=True, description="Enable rate limiting")
    RATE_LIMIT_COMPLETION: str = Field(default="60/minute", description="Completion endpoint limit")
    RATE_LIMIT_STORAGE_URI: str = Field(default="memory://", description="limits storage URI")

    # Logging settings
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

    @field_validator("API_BASE_PATH")
    @classmethod
    def normalize_base_path(cls, v: str) -> str:
        """Strip the trailing slash so routers can be mounted with include_router."""
        v = v.strip()
        if v and not v.startswith("/"):
            v = "/" + v
        return v.rstrip("/")

    @property
    def app(self) -> ApplicationSettings:
        """Get application settings."""
        return ApplicationSettings(
            ENVIRONMENT=self.ENVIRONMENT,
            APP_NAME=self.APP_NAME,
            APP_VERSION=self.APP_VERSION,
            API_HOST=self.API_HOST,
            API_PORT=self.API_PORT,
            API_BASE_PATH=self.API_BASE_PATH,
            CORS_ORIGINS=self.CORS_ORIGINS,
        )

    @property
    def streaming(self) -> StreamingSettings:
        """Get SSE session settings."""
        return StreamingSettings(
            SSE_HEARTBEAT_INTERVAL=self.SSE_HEARTBEAT_INTERVAL,
            SSE_DISCONNECT_POLL_INTERVAL=self.SSE_DISCONNECT_POLL_INTERVAL,
            COMPLETION_EXECUTOR=self.COMPLETION_EXECUTOR,
        )

    @property
    def providers(self) -> ProviderSettings:
        """Get LLM provider settings."""
        return ProviderSettings(
            GEMINI_API_KEY=self.GEMINI_API_KEY,
            GEMINI_BASE_URL=self.GEMINI_BASE_URL,
            OPENROUTER_API_KEY=self.OPENROUTER_API_KEY,
            OPENROUTER_BASE_URL=self.OPENROUTER_BASE_URL,
            PROVIDER_TIMEOUT=self.PROVIDER_TIMEOUT,
        )

    @property
    def rate_limit(self) -> RateLimitSettings:
        """Get rate limit settings."""
        return RateLimitSettings(
            RATE_LIMIT_ENABLED=self.RATE_LIMIT_ENABLED,
            RATE_LIMIT_COMPLETION=self.RATE_LIMIT_COMPLETION,
            RATE_LIMIT_STORAGE_URI=self.RATE_LIMIT_STORAGE_URI,
        )

    @property
    def logging(self) -> LoggingSettings:
        """Get logging settings."""
        return LoggingSettings(LOG_LEVEL=self.LOG_LEVEL, LOG_FORMAT=self.LOG_FORMAT)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",  # Ignore extra environment variables
    )


# Global settings instance (singleton pattern)
_settings: Settings | None = None


def get_settings() -> Settings:
    """
    Get the global settings instance (singleton).

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
