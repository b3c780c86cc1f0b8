"""Configuration Management."""

import os
from functools import lru_cache
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


class Settings(BaseSettings):
    """Application settings from environment."""

    model_config = SettingsConfigDict(
        env_prefix="UI_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore extra environment variables
    )

    # Model
    gemini_api_key: str = Field(
        default_factory=lambda: os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY", ""),
        description="Gemini API key",
    )
    gemini_model: str = Field(default="gemini-2.0-flash", description="Gemini model name")

    # Per-step generation parameters
    plan_max_tokens: int = Field(default=500, gt=0, description="Plan step output budget")
    plan_temperature: float = Field(default=0.0, ge=0.0, le=2.0)
    generate_max_tokens: int = Field(default=2000, gt=0, description="Generate step output budget")
    generate_temperature: float = Field(default=0.0, ge=0.0, le=2.0)
    explain_max_tokens: int = Field(default=100, gt=0, description="Explain step output budget")
    explain_temperature: float = Field(default=0.3, ge=0.0, le=2.0)

    # Pipeline
    min_markup_length: int = Field(default=30, ge=0, description="Sanity gate minimum length")
    fallback_on_generation_error: bool = Field(
        default=True, description="Substitute a template when the generate call fails"
    )

    # Logging
    log_level: str = Field(default="INFO", description="Log level")
    json_logs: bool = Field(default=False, description="Use JSON log format")

    # Metrics
    metrics_enabled: bool = Field(default=True, description="Record Prometheus metrics")

    # Validation
    max_prompt_length: int = Field(default=1000, gt=0, description="Prompt truncation length")
    history_window: int = Field(default=5, ge=0, le=50, description="Conversation turns kept")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
