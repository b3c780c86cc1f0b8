"""Core utilities and infrastructure."""

from .config import Settings, get_settings
from .errors import (
    ErrorCategory,
    UISynthesisError,
    ConfigurationError,
    SafetyViolationError,
    VocabularyViolationError,
    UpstreamError,
    RateLimitError,
    UpstreamAuthError,
    ModelUnavailableError,
    classify_upstream_error,
    wrap_upstream_error,
)
from .validate import (
    ValidationError,
    InputValidationError,
    ConversationTurn,
    UIGenerationRequest,
    clean_prompt,
    parse_request,
)
from .logging_config import configure_logging, get_logger, LogContext
from .tracing import trace_operation
from .json import (
    extract_json,
    safe_json_dumps,
    JSONParseError,
    validate_json_depth,
)
from .id import is_version_id, new_request_id, new_version_id


def create_container(settings: Settings | None = None):
    """Create dependency injection container (lazy import to avoid circular deps)."""
    from .container import create_container as _create_container

    return _create_container(settings)


__all__ = [
    # Config
    "Settings",
    "get_settings",
    # Errors
    "ErrorCategory",
    "UISynthesisError",
    "ConfigurationError",
    "SafetyViolationError",
    "VocabularyViolationError",
    "UpstreamError",
    "RateLimitError",
    "UpstreamAuthError",
    "ModelUnavailableError",
    "classify_upstream_error",
    "wrap_upstream_error",
    # Validation
    "ValidationError",
    "InputValidationError",
    "ConversationTurn",
    "UIGenerationRequest",
    "clean_prompt",
    "parse_request",
    # Logging
    "configure_logging",
    "get_logger",
    "LogContext",
    "trace_operation",
    # JSON
    "extract_json",
    "safe_json_dumps",
    "JSONParseError",
    "validate_json_depth",
    # IDs
    "is_version_id",
    "new_request_id",
    "new_version_id",
    # DI
    "create_container",
]
