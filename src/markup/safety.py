"""
Safety Scanner
Deny-list matching for generated markup. Reports, never rewrites.
"""

import re
from dataclasses import dataclass
from typing import Sequence

from returns.result import Failure, Result, Success


@dataclass(frozen=True)
class SafetyRule:
    """A named deny-list pattern."""

    name: str
    pattern: re.Pattern[str]
    description: str

    def matches(self, code: str) -> bool:
        return self.pattern.search(code) is not None


_INSTRUCTION_OVERRIDE = (
    r"(?:ignore|disregard|override|forget|bypass)\s+(?:all\s+|any\s+|the\s+|your\s+)?"
    r"(?:previous|prior|above|earlier|system|safety|original)?\s*"
    r"(?:instructions?|prompts?|rules?|guidelines?|polic(?:y|ies))"
)

DEFAULT_RULES: tuple[SafetyRule, ...] = (
    SafetyRule(
        "script_tag",
        re.compile(r"<\s*script\b", re.IGNORECASE),
        "Embedded script element",
    ),
    SafetyRule(
        "javascript_uri",
        re.compile(r"javascript\s*:", re.IGNORECASE),
        "javascript: URI",
    ),
    SafetyRule(
        "dynamic_eval",
        re.compile(
            r"\beval\s*\(|\bnew\s+Function\s*\(|\bset(?:Timeout|Interval)\s*\(\s*[\"'`]"
            r"|dangerouslySetInnerHTML",
        ),
        "Dynamic code evaluation",
    ),
    SafetyRule(
        "global_access",
        re.compile(r"\b(?:window|document|globalThis)\.(?=[A-Za-z_$])"),
        "Direct global or DOM object access",
    ),
    SafetyRule(
        "client_storage",
        re.compile(r"\b(?:localStorage|sessionStorage|indexedDB)\b|\bdocument\.cookie\b"),
        "Persistent client storage access",
    ),
    SafetyRule(
        "network_call",
        re.compile(
            r"\bfetch\s*\(|\bXMLHttpRequest\b|\bnavigator\.sendBeacon\b|\bnew\s+WebSocket\s*\(|\baxios\s*[.(]",
        ),
        "Raw network call",
    ),
    SafetyRule(
        "prompt_injection",
        re.compile(
            r"(?:\{\s*/\*|<!--|//)[^\n]*?" + _INSTRUCTION_OVERRIDE
            + r"|/\*(?:(?!\*/).)*?" + _INSTRUCTION_OVERRIDE,
            re.IGNORECASE | re.DOTALL,
        ),
        "Commentary attempting to override instructions",
    ),
)


@dataclass(frozen=True)
class ScanReport:
    """Every rule the markup violated."""

    violations: tuple[str, ...] = ()

    @property
    def safe(self) -> bool:
        return not self.violations


def scan(code: str, rules: Sequence[SafetyRule] = DEFAULT_RULES) -> ScanReport:
    """Match ``code`` against every rule and report all violations."""
    return ScanReport(tuple(rule.name for rule in rules if rule.matches(code)))


def validate_safety(code: str, rules: Sequence[SafetyRule] = DEFAULT_RULES) -> Result[str, ScanReport]:
    """
    Validate markup against the deny-list (Result pattern version).

    Args:
        code: Final markup
        rules: Deny-list to apply

    Returns:
        Success with the unchanged markup, or Failure with the scan report
    """
    report = scan(code, rules)
    if report.safe:
        return Success(code)
    return Failure(report)
