"""Dependency Injection Container."""

from typing import Optional

from injector import Injector, Module, provider, singleton

from models.loader import ModelLoader, TextCompleter
from models.config import GeminiConfig
from agents.ui_generator import UIGenerator
from handlers.ui import UIHandler
from .config import Settings, get_settings


class CoreModule(Module):
    """Core dependencies."""

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self.settings = settings

    @singleton
    @provider
    def provide_settings(self) -> Settings:
        """Provide settings singleton."""
        return self.settings or get_settings()

    @singleton
    @provider
    def provide_text_completer(self, settings: Settings) -> TextCompleter:
        """Provide Gemini model for all three pipeline calls."""
        config = GeminiConfig(
            model_name=settings.gemini_model,
            api_key=settings.gemini_api_key,
            temperature=settings.generate_temperature,
            max_tokens=settings.generate_max_tokens,
        )
        return ModelLoader.load(config)

    @singleton
    @provider
    def provide_ui_generator(self, model: TextCompleter, settings: Settings) -> UIGenerator:
        """Provide UI generator with all dependencies."""
        return UIGenerator(model=model, settings=settings)

    @singleton
    @provider
    def provide_ui_handler(self, ui_generator: UIGenerator, settings: Settings) -> UIHandler:
        """Provide request handler."""
        return UIHandler(ui_generator, settings)


def create_container(settings: Optional[Settings] = None) -> Injector:
    """Create configured injector."""
    return Injector([CoreModule(settings)])
