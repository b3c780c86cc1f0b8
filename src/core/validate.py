"""Input validation with strong typing."""

import re
from typing import Any, Literal

import pydantic
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from .errors import ErrorCategory, UISynthesisError


# Validation limits
MAX_PROMPT_LENGTH = 1000
HISTORY_WINDOW = 5

_SCRIPT_BLOCK = re.compile(r"<script\b[^<]*(?:(?!</script>)<[^<]*)*</script>", re.IGNORECASE)
_JS_URI = re.compile(r"javascript:", re.IGNORECASE)


class ValidationError(UISynthesisError):
    """Validation failed."""

    category = ErrorCategory.INVALID_INPUT


InputValidationError = ValidationError


class RequestValidator(BaseModel):
    """Base validator with strict configuration."""

    model_config = ConfigDict(
        validate_assignment=True, extra="forbid", frozen=True  # Immutable by default
    )


class ConversationTurn(BaseModel):
    """One prior turn supplied by the caller."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    role: Literal["user", "assistant", "system"] = "user"
    content: str = ""


def clean_prompt(text: str, max_length: int = MAX_PROMPT_LENGTH) -> str:
    """Strip script blocks and script URIs, trim, truncate."""
    text = _SCRIPT_BLOCK.sub("", text)
    text = _JS_URI.sub("", text)
    return text.strip()[:max_length]


class UIGenerationRequest(RequestValidator):
    """Validated UI generation request.

    Accepts both snake_case keys and the camelCase keys sent by browser
    clients (``previousCode``, ``conversationHistory``).
    """

    prompt: str
    previous_artifact: str = Field(
        default="",
        validation_alias=AliasChoices("previous_artifact", "previousArtifact", "previousCode"),
    )
    conversation_history: list[ConversationTurn] = Field(
        default_factory=list,
        validation_alias=AliasChoices("conversation_history", "conversationHistory", "history"),
    )

    @field_validator("prompt")
    @classmethod
    def validate_prompt(cls, v: str, info: ValidationInfo) -> str:
        """Ensure prompt is non-empty after cleaning."""
        max_length = (info.context or {}).get("max_prompt_length", MAX_PROMPT_LENGTH)
        cleaned = clean_prompt(v, max_length)
        if not cleaned:
            raise ValueError("Prompt cannot be empty")
        return cleaned

    @field_validator("previous_artifact", mode="before")
    @classmethod
    def validate_previous(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("conversation_history", mode="before")
    @classmethod
    def validate_history(cls, v: Any) -> Any:
        return [] if v is None else v

    @field_validator("conversation_history")
    @classmethod
    def trim_history(cls, v: list[ConversationTurn], info: ValidationInfo) -> list[ConversationTurn]:
        """Keep only the most recent turns."""
        window = (info.context or {}).get("history_window", HISTORY_WINDOW)
        if window <= 0:
            return []
        return v[-window:]


def parse_request(
    payload: dict[str, Any],
    max_prompt_length: int = MAX_PROMPT_LENGTH,
    history_window: int = HISTORY_WINDOW,
) -> UIGenerationRequest:
    """
    Validate a raw request payload.

    Args:
        payload: Request body as a mapping
        max_prompt_length: Prompt truncation length
        history_window: Number of trailing turns kept

    Returns:
        Validated request

    Raises:
        ValidationError: If the payload is malformed or the prompt is empty
    """
    if not isinstance(payload, dict):
        raise ValidationError(f"Request body must be an object, got {type(payload).__name__}")

    try:
        return UIGenerationRequest.model_validate(
            payload,
            context={"max_prompt_length": max_prompt_length, "history_window": history_window},
        )
    except pydantic.ValidationError as e:
        first = e.errors()[0] if e.errors() else {}
        field = ".".join(str(part) for part in first.get("loc", ()))
        message = first.get("msg", str(e))
        raise ValidationError(f"{field}: {message}" if field else message) from e
