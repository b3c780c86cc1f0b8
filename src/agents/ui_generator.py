"""UI Generator - plan, generate, repair, enforce and scan markup."""

import re
import time
from datetime import datetime, timezone
from enum import Enum
from typing import Mapping, Optional, Sequence

from returns.result import Failure

from core import (
    ConversationTurn,
    SafetyViolationError,
    Settings,
    VocabularyViolationError,
    extract_json,
    get_logger,
    get_settings,
    trace_operation,
    validate_json_depth,
    wrap_upstream_error,
)
from markup import (
    COMPONENT_LIBRARY,
    GENERIC_CONTAINER,
    PRIMITIVE_ELEMENTS,
    SAFETY_RULES,
    ComponentSpec,
    Reconstructor,
    SafetyRule,
    enforce_vocabulary,
    extract_components,
    find_unknown_components,
    scan_tags,
    validate_safety,
)
from models import TextCompleter
from monitoring import MetricsCollector, metrics_collector
from .intent import IntentClassifier, IntentDecision
from .models import GenerationResult, Plan
from .prompt import get_explain_prompt, get_generation_prompt, get_plan_prompt
from .prompts import PromptBuilder
from .templates import FallbackTemplate, TemplateLibrary


logger = get_logger(__name__)

DEFAULT_EXPLANATION = "UI generated successfully"

# Empty braces left where a model dropped an attribute value; an arrow
# function body ("=> {}}>") is not one
_BROKEN_EXPRESSION = re.compile(r"=\s*\{\s*\}|(?<!=>)(?<!=> )\{\}\}?>")
_TAG_OPENER = re.compile(r"</?[A-Za-z]")


class GenerationStage(str, Enum):
    """Pipeline stages, in execution order."""

    PLANNING = "planning"
    GENERATING = "generating"
    RECONSTRUCTING = "reconstructing"
    ENFORCING = "enforcing"
    SCANNING = "scanning"
    FALLBACK = "fallback"
    EXPLAINING = "explaining"
    DONE = "done"
    ERROR = "error"


def has_unlexed_tags(code: str) -> bool:
    """Whether some ``<Name`` or ``</Name`` is not the start of a complete tag."""
    tags = list(scan_tags(code))
    starts = {tag.start for tag in tags}
    for match in _TAG_OPENER.finditer(code):
        pos = match.start()
        if pos in starts:
            continue
        # markup held inside another tag's attribute value
        if any(tag.start < pos < tag.end for tag in tags):
            continue
        return True
    return False


def passes_sanity_gate(code: str, min_length: int = 30) -> bool:
    """Whether repaired markup is plausible enough to return."""
    if len(code.strip()) < min_length:
        return False
    if code.count("<") < 2:
        return False
    if has_unlexed_tags(code):
        return False
    return _BROKEN_EXPRESSION.search(code) is None


class UIGenerator:
    """
    Turns a natural-language request into vocabulary-safe markup.

    Holds no per-request state; prior artifacts and conversation turns are
    passed in by the caller on every call.
    """

    def __init__(
        self,
        model: TextCompleter,
        settings: Optional[Settings] = None,
        components: Mapping[str, ComponentSpec] = COMPONENT_LIBRARY,
        templates: type[TemplateLibrary] = TemplateLibrary,
        classifier: Optional[IntentClassifier] = None,
        reconstructor: Optional[Reconstructor] = None,
        safety_rules: Sequence[SafetyRule] = SAFETY_RULES,
        metrics: Optional[MetricsCollector] = None,
    ) -> None:
        self.model = model
        self.settings = settings or get_settings()
        self.components = components
        self.templates = templates
        self.classifier = classifier or IntentClassifier()
        self.reconstructor = reconstructor or Reconstructor()
        self.safety_rules = tuple(safety_rules)
        if metrics is None and self.settings.metrics_enabled:
            metrics = metrics_collector
        self.metrics = metrics

        logger.info(
            "initialized",
            components=len(self.components),
            safety_rules=len(self.safety_rules),
        )

    def generate(
        self,
        prompt: str,
        previous_artifact: str = "",
        history: Sequence[ConversationTurn] = (),
    ) -> GenerationResult:
        """
        Run the full pipeline for one request.

        Args:
            prompt: Cleaned user request
            previous_artifact: Markup currently shown, "" if none
            history: Recent conversation turns, oldest first

        Returns:
            GenerationResult with final markup and metadata

        Raises:
            SafetyViolationError: Markup matched the deny-list
            VocabularyViolationError: Unknown components survived enforcement
            UpstreamError: Generate call failed and fallback is disabled
        """
        decision = self.classifier.classify(prompt, bool(previous_artifact.strip()), history)
        if decision.should_reset:
            previous_artifact, history = "", ()

        logger.info(
            "generate_start",
            prompt=prompt[:50],
            is_iteration=decision.is_iteration,
            should_reset=decision.should_reset,
        )

        try:
            with trace_operation("ui_generation", is_iteration=decision.is_iteration) as span:
                result = self._run(prompt, previous_artifact, tuple(history), decision)
                span["used_fallback"] = result.used_fallback
                span["components"] = len(result.components)
        except Exception as e:
            self._stage(GenerationStage.ERROR, error=type(e).__name__)
            raise

        self._stage(GenerationStage.DONE, used_fallback=result.used_fallback)
        return result

    def _run(
        self,
        prompt: str,
        previous_artifact: str,
        history: tuple[ConversationTurn, ...],
        decision: IntentDecision,
    ) -> GenerationResult:
        self._stage(GenerationStage.PLANNING)
        plan = self._plan(prompt, previous_artifact, history)

        self._stage(GenerationStage.GENERATING)
        raw = self._generate(prompt, plan, previous_artifact, history)

        fallback: FallbackTemplate | None = None
        if raw is None:
            fallback = self._fallback(prompt, reason="generation_error")
            code = fallback.code
        else:
            code = self._repair(raw)
            if not passes_sanity_gate(code, self.settings.min_markup_length):
                fallback = self._fallback(prompt, reason="sanity_gate", length=len(code))
                code = fallback.code

        components = extract_components(code, self.components)

        self._stage(GenerationStage.EXPLAINING)
        explanation = self._explain(prompt, components)

        return GenerationResult(
            code=code,
            explanation=explanation,
            plan=plan,
            components=components,
            is_iteration=decision.is_iteration,
            should_reset=decision.should_reset,
            used_fallback=fallback is not None,
            fallback_category=fallback.category.value if fallback else None,
            timestamp=datetime.now(timezone.utc).isoformat(),
        )

    # ------------------------------------------------------------------
    # Service calls
    # ------------------------------------------------------------------

    def _complete(self, step: str, system: str, user: str, max_tokens: int, temperature: float) -> str:
        """One text-completion call with tracing and metrics."""
        start = time.perf_counter()
        status = "error"
        try:
            with trace_operation("llm_call", step=step) as span:
                text = self.model.complete(system, user, max_tokens=max_tokens, temperature=temperature)
                span["chars"] = len(text or "")
            status = "success"
            return text or ""
        finally:
            if self.metrics:
                self.metrics.record_llm_call(step, status, time.perf_counter() - start)

    def _plan(self, prompt: str, previous_artifact: str, history: tuple[ConversationTurn, ...]) -> Plan:
        """Layout plan; the default plan when the call or parse fails."""
        try:
            raw = self._complete(
                "plan",
                get_plan_prompt(),
                PromptBuilder.plan_request(prompt, previous_artifact, history),
                self.settings.plan_max_tokens,
                self.settings.plan_temperature,
            )
            data = extract_json(raw)
            validate_json_depth(data)
            plan = Plan.model_validate(data)
        except Exception as e:
            logger.warning("plan_fallback", error=str(e))
            plan = Plan.fallback()

        return plan.restricted_to(self._is_allowed, GENERIC_CONTAINER)

    def _generate(
        self,
        prompt: str,
        plan: Plan,
        previous_artifact: str,
        history: tuple[ConversationTurn, ...],
    ) -> str | None:
        """Raw markup, or None when the call failed and a template should be used."""
        iterating = bool(previous_artifact)
        try:
            return self._complete(
                "generate",
                get_generation_prompt(iterating),
                PromptBuilder.generation_request(
                    prompt,
                    plan=plan.model_dump(),
                    previous_artifact=previous_artifact,
                    history=history,
                ),
                self.settings.generate_max_tokens,
                self.settings.generate_temperature,
            )
        except Exception as e:
            if not self.settings.fallback_on_generation_error:
                raise wrap_upstream_error(e) from e
            logger.warning("generate_failed", error=str(e))
            return None

    def _explain(self, prompt: str, components: list[str]) -> str:
        try:
            text = self._complete(
                "explain",
                get_explain_prompt(),
                PromptBuilder.explain_request(prompt, components),
                self.settings.explain_max_tokens,
                self.settings.explain_temperature,
            )
        except Exception as e:
            logger.warning("explain_failed", error=str(e))
            return DEFAULT_EXPLANATION
        return text.strip() or DEFAULT_EXPLANATION

    # ------------------------------------------------------------------
    # Deterministic stages
    # ------------------------------------------------------------------

    def _repair(self, raw: str) -> str:
        """Reconstruct, enforce the vocabulary and scan for unsafe constructs."""
        self._stage(GenerationStage.RECONSTRUCTING, chars=len(raw))
        code = self.reconstructor.reconstruct(raw)

        self._stage(GenerationStage.ENFORCING)
        enforced = enforce_vocabulary(code, self.components)
        if enforced.replaced and self.metrics:
            self.metrics.record_vocabulary_replacements(len(enforced.replaced))

        unknown = find_unknown_components(enforced.code, self.components)
        if unknown:
            raise VocabularyViolationError(unknown, self.components.keys())

        self._stage(GenerationStage.SCANNING)
        result = validate_safety(enforced.code, self.safety_rules)
        if isinstance(result, Failure):
            report = result.failure()
            logger.warning("safety_violation", rules=list(report.violations))
            if self.metrics:
                self.metrics.record_safety_violations(list(report.violations))
            raise SafetyViolationError(report.violations)

        return enforced.code

    def _fallback(self, prompt: str, reason: str, **kwargs) -> FallbackTemplate:
        template = self.templates.for_prompt(prompt)
        self._stage(GenerationStage.FALLBACK, reason=reason, category=template.category.value, **kwargs)
        if self.metrics:
            self.metrics.record_fallback(template.category.value)
        return template

    def _is_allowed(self, name: str) -> bool:
        return name in self.components or name in PRIMITIVE_ELEMENTS

    @staticmethod
    def _stage(stage: GenerationStage, **kwargs) -> None:
        logger.info("stage", stage=stage.value, **kwargs)
