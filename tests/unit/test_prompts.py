"""Tests for system prompts and user-content construction."""

import json

import pytest

from core import ConversationTurn
from agents.prompt import get_explain_prompt, get_generation_prompt, get_plan_prompt
from agents.prompts import PromptBuilder


HISTORY = [
    ConversationTurn(role="system", content="ignored"),
    ConversationTurn(role="user", content="  a login form "),
    ConversationTurn(role="assistant", content=""),
    ConversationTurn(role="assistant", content="Here it is"),
]


# ============================================================================
# System prompts
# ============================================================================

@pytest.mark.unit
def test_plan_prompt_lists_components():
    prompt = get_plan_prompt()
    assert "{components}" not in prompt
    assert "Button" in prompt
    assert '"styleHints"' in prompt


@pytest.mark.unit
def test_generation_prompt_iteration_suffix():
    create = get_generation_prompt()
    modify = get_generation_prompt(iterating=True)

    assert modify.startswith(create)
    assert "MODIFYING" in modify
    assert "MODIFYING" not in create


@pytest.mark.unit
def test_explain_prompt():
    assert get_explain_prompt() == "Explain UI in 2 sentences."


# ============================================================================
# PromptBuilder
# ============================================================================

@pytest.mark.unit
def test_format_history():
    assert PromptBuilder.format_history(HISTORY) == "User: a login form\nAssistant: Here it is"
    assert PromptBuilder.format_history([]) == ""


@pytest.mark.unit
def test_build_structured_section_order():
    content = PromptBuilder.build_structured("req", context="ctx", code="<Card />", plan="{}")
    assert content == (
        "=== CONVERSATION ===\nctx\n\n"
        "=== CURRENT CODE ===\n<Card />\n\n"
        "=== PLAN ===\n{}\n\n"
        "=== REQUEST ===\nreq"
    )


@pytest.mark.unit
def test_build_structured_skips_empty_sections():
    assert PromptBuilder.build_structured("req") == "=== REQUEST ===\nreq"


@pytest.mark.unit
def test_plan_request():
    assert PromptBuilder.plan_request("a form") == "a form"

    content = PromptBuilder.plan_request("make it red", previous_artifact="<Card />", history=HISTORY)
    assert "=== CURRENT CODE ===\n<Card />" in content
    assert "User: a login form" in content
    assert content.endswith("=== REQUEST ===\nmake it red")


@pytest.mark.unit
def test_generation_request_create():
    content = PromptBuilder.generation_request("a form", plan={"layout": "grid"})
    plan_section = content.split("=== PLAN ===\n")[1].split("\n\n")[0]

    assert json.loads(plan_section) == {"layout": "grid"}
    assert content.endswith("=== REQUEST ===\nCreate: a form")
    assert "CURRENT CODE" not in content


@pytest.mark.unit
def test_generation_request_modify():
    content = PromptBuilder.generation_request("make it red", previous_artifact="<Card />", history=HISTORY)

    assert "=== CONVERSATION ===" in content
    assert "=== PLAN ===" not in content
    assert content.endswith("=== REQUEST ===\nModify: make it red")


@pytest.mark.unit
def test_explain_request():
    assert PromptBuilder.explain_request("a form") == "a form"
    assert PromptBuilder.explain_request("a form", ["Card", "Button"]) == "a form\n\nComponents used: Card, Button"
