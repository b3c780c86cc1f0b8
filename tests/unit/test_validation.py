"""Validation tests."""

import pytest
from hypothesis import given, strategies as st

from core import (
    ConversationTurn,
    InputValidationError,
    UIGenerationRequest,
    ValidationError,
    clean_prompt,
    parse_request,
)


@pytest.mark.unit
def test_ui_generation_request_valid():
    """Test valid UI generation request."""
    req = parse_request({"prompt": "Create a calculator"})
    assert req.prompt == "Create a calculator"
    assert req.previous_artifact == ""
    assert req.conversation_history == []


@pytest.mark.unit
@pytest.mark.parametrize("prompt", ["", "   ", "<script>alert(1)</script>", "javascript:"])
def test_empty_prompt_rejected(prompt):
    """Prompts that clean down to nothing are invalid."""
    with pytest.raises(ValidationError) as exc_info:
        parse_request({"prompt": prompt})
    assert "Prompt cannot be empty" in str(exc_info.value)


@pytest.mark.unit
def test_validation_error_alias():
    assert InputValidationError is ValidationError
    assert ValidationError("x").category.value == "invalid_input"


@pytest.mark.unit
def test_non_object_payload():
    with pytest.raises(ValidationError, match="must be an object"):
        parse_request(["prompt"])


@pytest.mark.unit
def test_unknown_field_rejected():
    with pytest.raises(ValidationError):
        parse_request({"prompt": "hi", "temperature": 2})


@pytest.mark.unit
def test_camel_case_aliases():
    req = parse_request({
        "prompt": "make it blue",
        "previousCode": "<Card>x</Card>",
        "conversationHistory": [{"role": "assistant", "content": "done"}],
    })
    assert req.previous_artifact == "<Card>x</Card>"
    assert req.conversation_history == [ConversationTurn(role="assistant", content="done")]


@pytest.mark.unit
def test_null_fields_default():
    req = parse_request({"prompt": "hi", "previous_artifact": None, "conversation_history": None})
    assert req.previous_artifact == ""
    assert req.conversation_history == []


@pytest.mark.unit
def test_history_trimmed_to_window():
    turns = [{"role": "user", "content": f"turn {i}"} for i in range(8)]
    req = parse_request({"prompt": "hi", "conversation_history": turns})
    assert [t.content for t in req.conversation_history] == [f"turn {i}" for i in range(3, 8)]


@pytest.mark.unit
def test_custom_limits():
    turns = [{"role": "user", "content": "a"}, {"role": "user", "content": "b"}]
    req = parse_request({"prompt": "abcdef", "conversation_history": turns}, max_prompt_length=3, history_window=0)
    assert req.prompt == "abc"
    assert req.conversation_history == []


@pytest.mark.unit
def test_invalid_role_rejected():
    with pytest.raises(ValidationError):
        parse_request({"prompt": "hi", "conversation_history": [{"role": "robot", "content": "x"}]})


@pytest.mark.unit
def test_request_is_immutable():
    req = parse_request({"prompt": "hi"})
    with pytest.raises(Exception):
        req.prompt = "changed"


@pytest.mark.unit
def test_clean_prompt():
    assert clean_prompt("  a <script>x</script>form  ") == "a form"
    assert clean_prompt("go to javascript:alert(1)") == "go to alert(1)"
    assert clean_prompt("x" * 2000) == "x" * 1000


@pytest.mark.unit
def test_model_validate_direct():
    req = UIGenerationRequest.model_validate({"prompt": " spaced "})
    assert req.prompt == "spaced"


@pytest.mark.unit
@given(st.text(max_size=3000))
def test_clean_prompt_bounded(text):
    cleaned = clean_prompt(text)
    assert len(cleaned) <= 1000
    assert cleaned == cleaned.strip() or len(cleaned) == 1000
