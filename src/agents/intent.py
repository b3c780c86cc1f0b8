"""Intent Classifier - start a new artifact or modify the current one.

An ordered list of rules; the first rule that returns a decision wins.
Rules are plain callables so they can be reordered, replaced or extended
without touching the orchestrator. Everything here is pure.
"""

import re
from dataclasses import dataclass, field
from typing import Callable, Mapping, Optional, Sequence

from core import ConversationTurn


@dataclass(frozen=True)
class IntentDecision:
    """Whether to discard prior context."""

    should_reset: bool
    is_iteration: bool


@dataclass(frozen=True)
class IntentContext:
    """Inputs visible to intent rules."""

    prompt: str
    has_previous_artifact: bool
    recent_turns: tuple[ConversationTurn, ...] = field(default_factory=tuple)

    @property
    def text(self) -> str:
        return self.prompt.lower()

    @property
    def previous_prompt(self) -> str | None:
        """Most recent user turn before this one."""
        for turn in reversed(self.recent_turns):
            if turn.role == "user" and turn.content.strip():
                return turn.content
        return None


IntentRule = Callable[[IntentContext], Optional[IntentDecision]]

RESET = IntentDecision(should_reset=True, is_iteration=False)
ITERATE = IntentDecision(should_reset=False, is_iteration=True)

RESET_CUES = ("start over", "start fresh", "from scratch", "reset", "new ui", "clear everything")
MODIFICATION_CUES = ("change", "modify", "update", "edit", "add", "remove", "fix", "improve", "make it", "replace")

_CREATION_VERB = re.compile(r"^\s*(?:please\s+)?(?:create|build|make|generate|design)\s", re.IGNORECASE)

TOPIC_BUCKETS: Mapping[str, tuple[str, ...]] = {
    "modal": ("modal", "dialog", "popup", "pop-up"),
    "form": ("form", "login", "sign in", "sign up", "signup", "register", "password"),
    "game": ("game", "tic tac toe", "tic-tac-toe", "snake", "puzzle", "quiz"),
    "card": ("card", "product", "profile"),
    "dashboard": ("dashboard", "analytics", "metrics", "chart", "stats"),
    "table": ("table", "spreadsheet", "data grid"),
    "navbar": ("navbar", "navigation", "nav bar", "menu bar", "header"),
    "sidebar": ("sidebar", "side bar", "drawer"),
    "button": ("button",),
}


def _contains_cue(text: str, cues: Sequence[str]) -> bool:
    return any(re.search(rf"\b{re.escape(cue)}(?:s|d|ed|es|ing)?\b", text) for cue in cues)


def topic_buckets(text: str) -> frozenset[str]:
    """Topic buckets whose keywords appear in ``text``."""
    lowered = text.lower()
    return frozenset(
        bucket for bucket, keywords in TOPIC_BUCKETS.items()
        if any(keyword in lowered for keyword in keywords)
    )


# ============================================================================
# Rules, in priority order
# ============================================================================


def no_previous_artifact(ctx: IntentContext) -> IntentDecision | None:
    return RESET if not ctx.has_previous_artifact else None


def explicit_reset_cue(ctx: IntentContext) -> IntentDecision | None:
    return RESET if _contains_cue(ctx.text, RESET_CUES) else None


def creation_verb(ctx: IntentContext) -> IntentDecision | None:
    return RESET if _CREATION_VERB.match(ctx.prompt) else None


def topic_shift(ctx: IntentContext) -> IntentDecision | None:
    """The request dropped a topic the previous turn was about.

    Prompts phrased as edits ("change the button color") stay on the
    current artifact even when they name a different topic.
    """
    previous = ctx.previous_prompt
    if previous is None or _contains_cue(ctx.text, MODIFICATION_CUES):
        return None
    if topic_buckets(previous) - topic_buckets(ctx.prompt):
        return RESET
    return None


def modification_cue(ctx: IntentContext) -> IntentDecision | None:
    return ITERATE if _contains_cue(ctx.text, MODIFICATION_CUES) else None


def default_decision(ctx: IntentContext) -> IntentDecision:
    return IntentDecision(should_reset=False, is_iteration=ctx.has_previous_artifact)


DEFAULT_RULES: tuple[IntentRule, ...] = (
    no_previous_artifact,
    explicit_reset_cue,
    creation_verb,
    topic_shift,
    modification_cue,
    default_decision,
)


class IntentClassifier:
    """Runs intent rules in order."""

    def __init__(self, rules: Sequence[IntentRule] = DEFAULT_RULES) -> None:
        self.rules = tuple(rules)

    def classify(
        self,
        prompt: str,
        has_previous_artifact: bool,
        recent_turns: Sequence[ConversationTurn] = (),
    ) -> IntentDecision:
        ctx = IntentContext(prompt, has_previous_artifact, tuple(recent_turns))
        for rule in self.rules:
            decision = rule(ctx)
            if decision is not None:
                return decision
        return default_decision(ctx)


_default = IntentClassifier()


def classify(
    prompt: str,
    has_previous_artifact: bool,
    recent_turns: Sequence[ConversationTurn] = (),
) -> IntentDecision:
    """Classify with the default rule list."""
    return _default.classify(prompt, has_previous_artifact, recent_turns)
