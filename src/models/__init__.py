"""
Models package - text-completion service integration.
"""

from .config import GeminiConfig, GeminiModelName
from .loader import ModelLoader, GeminiModel, ModelLoadError, TextCompleter

__all__ = [
    "GeminiConfig",
    "GeminiModelName",
    "GeminiModel",
    "ModelLoader",
    "ModelLoadError",
    "TextCompleter",
]
