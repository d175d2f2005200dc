"""
Application Configuration Module

Centralizes all application settings using Pydantic Settings.
Environment variables are loaded from .env file automatically.

Usage:
    from config.settings import settings

    print(settings.LLM_PROVIDER)
    print(settings.DEBUG)
"""

from pydantic_settings import BaseSettings
from pydantic import Field, ConfigDict
from typing import Optional
from functools import lru_cache


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be overridden via environment variables or .env file.
    Variable names are case-insensitive.
    """

    # ==========================================================================
    # LLM Provider Keys
    # ==========================================================================
    OPENAI_API_KEY: Optional[str] = Field(
        default=None,
        description="OpenAI API key"
    )
    ANTHROPIC_API_KEY: Optional[str] = Field(
        default=None,
        description="Anthropic API key"
    )
    TOGETHER_API_KEY: Optional[str] = Field(
        default=None,
        description="Together.ai API key"
    )
    LLM_PROVIDER: str = Field(
        default="auto",
        description="Preferred LLM provider: openai, anthropic, together or auto"
    )
    LLM_MODEL: str = Field(
        default="auto",
        description="Model override; 'auto' picks the provider default"
    )
    LLM_TIMEOUT_SECONDS: float = Field(
        default=30.0,
        description="Timeout for a single gateway call"
    )

    # ==========================================================================
    # Speech-to-Text Configuration
    # ==========================================================================
    SPEECH_PROVIDER: str = Field(
        default="elevenlabs",
        description="Speech-to-text provider: elevenlabs, together or openai"
    )
    MAX_AUDIO_BYTES: int = Field(
        default=25 * 1024 * 1024,
        description="Maximum accepted audio upload size"
    )

    # ==========================================================================
    # Input Limits
    # ==========================================================================
    MAX_TEXT_INPUT_LENGTH: int = Field(
        default=10000,
        description="Maximum transcript length accepted by the API"
    )
    MAX_PROMPT_TRANSCRIPT_LENGTH: int = Field(
        default=5000,
        description="Maximum transcript length embedded into a prompt"
    )
    FORM_FETCH_TIMEOUT_SECONDS: float = Field(
        default=15.0,
        description="Timeout when fetching a form page for detection"
    )

    # ==========================================================================
    # Rate Limiting
    # ==========================================================================
    PARSE_RATE_LIMIT: int = Field(
        default=20,
        description="Speech parsing requests per window per client"
    )
    SPEECH_RATE_LIMIT: int = Field(
        default=10,
        description="Speech-to-text requests per window per client"
    )
    RATE_LIMIT_WINDOW_SECONDS: int = Field(
        default=60,
        description="Fixed rate limit window length"
    )

    # ==========================================================================
    # CORS Configuration
    # ==========================================================================
    CORS_ORIGINS: str = Field(
        default="http://localhost:5173,http://localhost:3000",
        description="Allowed CORS origins (comma-separated)"
    )

    @property
    def cors_origins_list(self) -> list:
        """Get CORS origins as a list."""
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    # ==========================================================================
    # Application Settings
    # ==========================================================================
    DEBUG: bool = Field(
        default=False,
        description="Enable debug mode with verbose logging"
    )
    LOG_JSON: bool = Field(
        default=False,
        description="Emit one JSON object per log line instead of colored text"
    )
    APP_NAME: str = Field(
        default="Voice Form Kit",
        description="Application name for OpenAPI docs"
    )
    APP_VERSION: str = Field(
        default="1.0.0",
        description="Application version"
    )

    model_config = ConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore extra env vars
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses LRU cache to ensure settings are only loaded once.

    Returns:
        Settings: Application settings instance
    """
    return Settings()


# Singleton instance for easy import
settings = get_settings()
