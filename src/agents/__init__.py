"""Generation pipeline orchestration."""

from .history import ArtifactVersion, find_version, record_version
from .intent import IntentClassifier, IntentDecision, classify
from .models import GenerationResult, Plan, PlanNode
from .prompts import PromptBuilder
from .templates import FallbackTemplate, TemplateCategory, TemplateLibrary
from .ui_generator import GenerationStage, UIGenerator, passes_sanity_gate

__all__ = [
    "ArtifactVersion",
    "find_version",
    "record_version",
    "IntentClassifier",
    "IntentDecision",
    "classify",
    "GenerationResult",
    "Plan",
    "PlanNode",
    "PromptBuilder",
    "FallbackTemplate",
    "TemplateCategory",
    "TemplateLibrary",
    "GenerationStage",
    "UIGenerator",
    "passes_sanity_gate",
]
