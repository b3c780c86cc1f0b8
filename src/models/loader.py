"""Model Loader - Gemini text completion."""

from typing import Optional, Protocol, runtime_checkable
import google.generativeai as genai

from core import get_logger, wrap_upstream_error
from .config import GeminiConfig


logger = get_logger(__name__)


class ModelLoadError(Exception):
    """Model loading failed."""
    pass


@runtime_checkable
class TextCompleter(Protocol):
    """The one call the pipeline makes to a text-generation service."""

    def complete(self, system: str, user: str, *, max_tokens: int, temperature: float) -> str:
        """Return the completion text; raise on any service failure."""
        ...


class GeminiModel:
    """Gemini API wrapper implementing :class:`TextCompleter`."""

    def __init__(self, config: GeminiConfig):
        self.config = config
        genai.configure(api_key=config.api_key)
        logger.info("model_loaded", model=config.model_name)

    def complete(
        self,
        system: str,
        user: str,
        *,
        max_tokens: int | None = None,
        temperature: float | None = None,
    ) -> str:
        """Single non-streaming completion with a system instruction."""
        generation_config = genai.GenerationConfig(
            temperature=self.config.temperature if temperature is None else temperature,
            max_output_tokens=self.config.max_tokens if max_tokens is None else max_tokens,
            top_p=self.config.top_p,
        )
        try:
            model = genai.GenerativeModel(
                model_name=self.config.model_name,
                system_instruction=system,
                generation_config=generation_config,
            )
            response = model.generate_content(user)
            return response.text or ""
        except Exception as e:
            logger.error("complete_error", model=self.config.model_name, error=str(e))
            raise wrap_upstream_error(e) from e


class ModelLoader:
    """Model lifecycle manager."""

    _instance: Optional[GeminiModel] = None

    @classmethod
    def load(cls, config: GeminiConfig) -> GeminiModel:
        """Load model with config."""
        logger.info("loading", model=config.model_name)
        try:
            model = GeminiModel(config)
            cls._instance = model
            return model
        except Exception as e:
            logger.error("load_failed", error=str(e))
            raise ModelLoadError(f"Failed to load {config.model_name}") from e

    @classmethod
    def unload(cls) -> None:
        """Unload model."""
        if cls._instance:
            logger.info("unloading")
            cls._instance = None
