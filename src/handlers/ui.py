"""UI Handler."""

import time
from typing import Any, Optional

from core import (
    ConfigurationError,
    LogContext,
    Settings,
    UISynthesisError,
    VocabularyViolationError,
    get_logger,
    get_settings,
    new_request_id,
    parse_request,
    safe_json_dumps,
    trace_operation,
    wrap_upstream_error,
)
from agents.models import GenerationResult
from agents.ui_generator import UIGenerator
from monitoring import MetricsCollector, metrics_collector


logger = get_logger(__name__)


def error_response(error: UISynthesisError) -> dict[str, Any]:
    """Failure payload for a categorized error."""
    body: dict[str, Any] = {
        "error": error.category.value,
        "details": error.details,
        "success": False,
    }
    if isinstance(error, VocabularyViolationError):
        body["allowed"] = list(error.allowed)
    return body


def success_response(result: GenerationResult) -> dict[str, Any]:
    return {
        "code": result.code,
        "explanation": result.explanation,
        "plan": result.plan.summary(),
        "components": list(result.components),
        "isIteration": result.is_iteration,
        "shouldReset": result.should_reset,
        "timestamp": result.timestamp,
        "success": True,
    }


class UIHandler:
    """Handles UI generation requests."""

    def __init__(
        self,
        ui_generator: UIGenerator,
        settings: Optional[Settings] = None,
        metrics: Optional[MetricsCollector] = None,
    ) -> None:
        self.ui_generator = ui_generator
        self.settings = settings or get_settings()
        if metrics is None and self.settings.metrics_enabled:
            metrics = metrics_collector
        self.metrics = metrics

    def generate(self, payload: Any) -> dict[str, Any]:
        """
        Validate a request body, run the pipeline and build the response.

        Never raises; every failure becomes ``{error, details, success: False}``.
        """
        start_time = time.time()
        request_id = new_request_id()

        with LogContext(request_id=request_id):
            try:
                body = self._generate(payload)
                status = "success"
            except UISynthesisError as e:
                body = error_response(e)
                status = e.category.value
                logger.warning("request_failed", error=status, details=e.details)
            except Exception as e:
                wrapped = wrap_upstream_error(e)
                body = error_response(wrapped)
                status = wrapped.category.value
                logger.error("request_error", error=status, details=str(e))

            if self.metrics:
                self.metrics.record_ui_request(status, time.time() - start_time)
                if status != "success":
                    self.metrics.record_error(status, "ui_handler")

            return body

    def generate_json(self, payload: Any) -> str:
        """Same as :meth:`generate`, serialized."""
        return safe_json_dumps(self.generate(payload))

    def _generate(self, payload: Any) -> dict[str, Any]:
        if not self.settings.gemini_api_key:
            raise ConfigurationError(
                "Text-completion service is not configured",
                details="Set GEMINI_API_KEY or UI_GEMINI_API_KEY",
            )

        request = parse_request(
            payload,
            max_prompt_length=self.settings.max_prompt_length,
            history_window=self.settings.history_window,
        )
        logger.info(
            "ui_generate",
            prompt=request.prompt[:50],
            has_previous=bool(request.previous_artifact),
            turns=len(request.conversation_history),
        )

        with trace_operation("ui_request"):
            result = self.ui_generator.generate(
                request.prompt,
                previous_artifact=request.previous_artifact,
                history=request.conversation_history,
            )
        return success_response(result)

