"""
Model configuration with strong typing.
Centralized settings for the Gemini API.
"""

from enum import Enum
import os

from pydantic import BaseModel, ConfigDict, Field


class GeminiModelName(str, Enum):
    """Available Gemini model variants."""

    FLASH = "gemini-2.0-flash"  # Default: fast, cheap, good at short markup
    FLASH_LITE = "gemini-2.0-flash-lite"
    FLASH_15 = "gemini-1.5-flash"
    PRO_15 = "gemini-1.5-pro"


class GeminiConfig(BaseModel):
    """Type-safe Gemini API configuration."""

    model_config = ConfigDict(frozen=True, use_enum_values=True)

    model_name: str = Field(default=GeminiModelName.FLASH.value)
    api_key: str | None = Field(default=None)

    # Defaults; each call may override max_tokens and temperature
    temperature: float = Field(default=0.0, ge=0.0, le=2.0)
    max_tokens: int = Field(default=2000, ge=1, le=8192)
    top_p: float = Field(default=0.95, ge=0.0, le=1.0)

    def __init__(self, **data):
        """Initialize config with API key from environment if not provided."""
        if not data.get("api_key"):
            data["api_key"] = os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY")
        super().__init__(**data)

    @property
    def has_credentials(self) -> bool:
        return bool(self.api_key)
