"""Deterministic markup stages: repair, vocabulary enforcement, safety scan."""

from .vocabulary import (
    COMPONENT_LIBRARY,
    PRIMITIVE_ELEMENTS,
    GENERIC_CONTAINER,
    ComponentSpec,
    component_names,
    is_allowed,
    is_component,
)
from .tags import Tag, TagKind, scan_tags
from .reconstruct import DEFAULT_RULES as REWRITE_RULES, Reconstructor, RewriteRule, reconstruct
from .enforce import EnforcementResult, enforce_vocabulary, extract_components, find_unknown_components
from .safety import DEFAULT_RULES as SAFETY_RULES, SafetyRule, ScanReport, scan, validate_safety

__all__ = [
    # Vocabulary
    "COMPONENT_LIBRARY",
    "PRIMITIVE_ELEMENTS",
    "GENERIC_CONTAINER",
    "ComponentSpec",
    "component_names",
    "is_allowed",
    "is_component",
    # Lexer
    "Tag",
    "TagKind",
    "scan_tags",
    # Reconstruction
    "REWRITE_RULES",
    "Reconstructor",
    "RewriteRule",
    "reconstruct",
    # Enforcement
    "EnforcementResult",
    "enforce_vocabulary",
    "extract_components",
    "find_unknown_components",
    # Safety
    "SAFETY_RULES",
    "SafetyRule",
    "ScanReport",
    "scan",
    "validate_safety",
]
