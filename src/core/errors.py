"""Error taxonomy for the synthesis pipeline.

Only input validation, the safety scanner and the vocabulary closure check
raise user-visible errors. Upstream (text-completion) failures are wrapped in
:class:`UpstreamError` subclasses, chosen by inspecting the error text.
"""

from enum import Enum
from typing import Iterable, Sequence


class ErrorCategory(str, Enum):
    """Failure categories reported at the response boundary."""

    CONFIGURATION = "configuration_error"
    INVALID_INPUT = "invalid_input"
    SAFETY = "safety_violation"
    VOCABULARY = "vocabulary_violation"
    RATE_LIMITED = "rate_limited"
    UPSTREAM_AUTH = "upstream_auth"
    MODEL_UNAVAILABLE = "model_unavailable"
    GENERATION_FAILED = "generation_failed"


class UISynthesisError(Exception):
    """Base error carrying a response category."""

    category: ErrorCategory = ErrorCategory.GENERATION_FAILED

    def __init__(self, message: str, details: str | None = None) -> None:
        super().__init__(message)
        self.details = details or message


class ConfigurationError(UISynthesisError):
    """Service credentials or settings are missing."""

    category = ErrorCategory.CONFIGURATION


class SafetyViolationError(UISynthesisError):
    """Generated markup matched the deny-list."""

    category = ErrorCategory.SAFETY

    def __init__(self, violations: Sequence[str]) -> None:
        self.violations = tuple(violations)
        super().__init__(
            "Generated markup failed safety validation",
            details=", ".join(self.violations),
        )


class VocabularyViolationError(UISynthesisError):
    """Markup still references components outside the vocabulary."""

    category = ErrorCategory.VOCABULARY

    def __init__(self, unknown: Iterable[str], allowed: Iterable[str]) -> None:
        self.unknown = tuple(unknown)
        self.allowed = tuple(allowed)
        super().__init__(
            "Generated markup uses unknown components",
            details=", ".join(self.unknown),
        )


class UpstreamError(UISynthesisError):
    """Text-completion service failure."""

    category = ErrorCategory.GENERATION_FAILED

    def __init__(self, message: str, original: Exception | None = None) -> None:
        super().__init__(message)
        self.original = original


class RateLimitError(UpstreamError):
    category = ErrorCategory.RATE_LIMITED


class UpstreamAuthError(UpstreamError):
    category = ErrorCategory.UPSTREAM_AUTH


class ModelUnavailableError(UpstreamError):
    category = ErrorCategory.MODEL_UNAVAILABLE


# Checked in order; first match wins
_UPSTREAM_SIGNATURES: tuple[tuple[type[UpstreamError], tuple[str, ...]], ...] = (
    (RateLimitError, ("429", "rate limit", "rate_limit", "quota", "resource exhausted", "resource_exhausted", "too many requests")),
    (UpstreamAuthError, ("401", "403", "api key", "api_key", "unauthenticated", "unauthorized", "permission denied", "permission_denied")),
    (ModelUnavailableError, ("404", "503", "not found", "unavailable", "overloaded", "decommissioned", "does not exist")),
)


def classify_upstream_error(error: Exception) -> ErrorCategory:
    """Pick a response category from an upstream error's text."""
    if isinstance(error, UISynthesisError):
        return error.category

    text = f"{type(error).__name__} {error}".lower()
    for error_type, needles in _UPSTREAM_SIGNATURES:
        if any(needle in text for needle in needles):
            return error_type.category
    return ErrorCategory.GENERATION_FAILED


def wrap_upstream_error(error: Exception) -> UpstreamError:
    """Wrap a raw client exception in the matching UpstreamError subclass."""
    if isinstance(error, UpstreamError):
        return error

    category = classify_upstream_error(error)
    for error_type, _ in _UPSTREAM_SIGNATURES:
        if error_type.category == category:
            return error_type(str(error), original=error)
    return UpstreamError(str(error), original=error)
