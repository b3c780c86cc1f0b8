"""Pytest configuration and fixtures."""

import os
from typing import Callable, Union

import pytest

from core import Settings
from agents import UIGenerator
from agents.prompt import get_explain_prompt, get_plan_prompt
from handlers import UIHandler
from monitoring import MetricsCollector


# ============================================================================
# Pytest Hooks
# ============================================================================

def pytest_configure(config):
    """Configure pytest with environment variables."""
    os.environ.setdefault("GEMINI_API_KEY", "test-api-key")
    os.environ["UI_LOG_LEVEL"] = "DEBUG"


# ============================================================================
# Fake text-completion service
# ============================================================================

Reply = Union[str, Exception, Callable[[str], str]]


class FakeCompleter:
    """
    Scripted stand-in for the text-completion service.

    Each step (plan, generate, explain) gets a fixed reply: a string, an
    exception to raise, or a callable receiving the user content.
    """

    def __init__(self, plan: Reply = "{}", generate: Reply = "", explain: Reply = "A simple UI.") -> None:
        self.replies = {"plan": plan, "generate": generate, "explain": explain}
        self.calls: list[dict] = []

    @staticmethod
    def step_for(system: str) -> str:
        if system == get_plan_prompt():
            return "plan"
        if system == get_explain_prompt():
            return "explain"
        return "generate"

    def complete(self, system: str, user: str, *, max_tokens: int, temperature: float) -> str:
        step = self.step_for(system)
        self.calls.append({
            "step": step,
            "system": system,
            "user": user,
            "max_tokens": max_tokens,
            "temperature": temperature,
        })
        reply = self.replies[step]
        if isinstance(reply, Exception):
            raise reply
        if callable(reply):
            return reply(user)
        return reply

    def calls_for(self, step: str) -> list[dict]:
        return [call for call in self.calls if call["step"] == step]


LOGIN_PLAN = (
    '{"layout": "flex-col", "structure": [{"component": "Card", "children": '
    '[{"component": "Input"}, {"component": "Input"}, {"component": "Button"}]}], '
    '"styleHints": ["centered"], "reasoning": "simple login form"}'
)

LOGIN_MARKUP = """<Card className="w-full max-w-md mx-auto p-6">
  <h2 className="text-2xl font-bold mb-6">Login</h2>
  <div className="space-y-4">
    <Input type="email" placeholder="Email" />
    <Input type="password" placeholder="Password" />
    <Button onClick={() => console.log('login')}>Login</Button>
  </div>
</Card>"""


# ============================================================================
# Core Fixtures
# ============================================================================

@pytest.fixture
def settings():
    """Test settings."""
    return Settings(gemini_api_key="test-api-key", metrics_enabled=False)


@pytest.fixture
def metrics():
    """Isolated metrics collector."""
    return MetricsCollector()


@pytest.fixture
def fake_completer():
    """Completer that returns a valid login plan and markup."""
    return FakeCompleter(plan=LOGIN_PLAN, generate=LOGIN_MARKUP, explain="A login form with two fields.")


# ============================================================================
# Pipeline Fixtures
# ============================================================================

@pytest.fixture
def make_generator(settings, metrics):
    """Factory building a generator around a scripted completer."""

    def build(completer: FakeCompleter, **overrides) -> UIGenerator:
        overrides.setdefault("metrics", metrics)
        return UIGenerator(model=completer, settings=overrides.pop("settings", settings), **overrides)

    return build


@pytest.fixture
def ui_generator(make_generator, fake_completer):
    """UI generator with a scripted completer."""
    return make_generator(fake_completer)


@pytest.fixture
def ui_handler(ui_generator, settings, metrics):
    """Request handler around the scripted generator."""
    return UIHandler(ui_generator, settings, metrics=metrics)
