"""Pipeline Data Models."""

from typing import Any, Callable
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


DEFAULT_LAYOUT = "flex-col"


class PlanNode(BaseModel):
    """One planned component and its children."""

    model_config = ConfigDict(extra="ignore")

    component: str = Field(default="div", validation_alias=AliasChoices("component", "type", "name"))
    props: dict[str, Any] = Field(default_factory=dict)
    children: list["PlanNode"] = Field(default_factory=list)

    @field_validator("children", mode="before")
    @classmethod
    def coerce_children(cls, v: Any) -> Any:
        return _coerce_nodes(v)

    @field_validator("props", mode="before")
    @classmethod
    def coerce_props(cls, v: Any) -> Any:
        return v if isinstance(v, dict) else {}

    def walk(self):
        yield self
        for child in self.children:
            yield from child.walk()


def _coerce_nodes(v: Any) -> Any:
    """Models sometimes list bare component names instead of objects."""
    if v is None:
        return []
    if not isinstance(v, list):
        return [v] if isinstance(v, dict) else []
    return [{"component": item} if isinstance(item, str) else item for item in v if isinstance(item, (str, dict))]


class Plan(BaseModel):
    """Layout plan produced by the plan step."""

    model_config = ConfigDict(extra="ignore")

    layout: str = Field(default=DEFAULT_LAYOUT)
    structure: list[PlanNode] = Field(default_factory=list)
    style_hints: list[str] = Field(
        default_factory=list, validation_alias=AliasChoices("style_hints", "styleHints")
    )
    reasoning: str = Field(default="")

    @field_validator("layout", mode="before")
    @classmethod
    def coerce_layout(cls, v: Any) -> Any:
        return v.strip().lower() if isinstance(v, str) and v.strip() else DEFAULT_LAYOUT

    @field_validator("structure", mode="before")
    @classmethod
    def coerce_structure(cls, v: Any) -> Any:
        return _coerce_nodes(v)

    @field_validator("style_hints", mode="before")
    @classmethod
    def coerce_style_hints(cls, v: Any) -> Any:
        if isinstance(v, str):
            return [v]
        if isinstance(v, list):
            return [str(h) for h in v]
        return []

    @field_validator("reasoning", mode="before")
    @classmethod
    def coerce_reasoning(cls, v: Any) -> Any:
        return "" if v is None else str(v)

    @classmethod
    def fallback(cls) -> "Plan":
        """Plan used when the plan step fails."""
        return cls(layout=DEFAULT_LAYOUT, structure=[], reasoning="fallback")

    def components(self) -> list[str]:
        """Planned component names in depth-first order, de-duplicated."""
        seen: dict[str, None] = {}
        for root in self.structure:
            for node in root.walk():
                seen.setdefault(node.component)
        return list(seen)

    def restricted_to(self, is_allowed: Callable[[str], bool], replacement: str = "div") -> "Plan":
        """Copy with every disallowed component renamed to ``replacement``."""

        def fix(node: PlanNode) -> PlanNode:
            return node.model_copy(update={
                "component": node.component if is_allowed(node.component) else replacement,
                "children": [fix(child) for child in node.children],
            })

        return self.model_copy(update={"structure": [fix(node) for node in self.structure]})

    def summary(self) -> dict[str, Any]:
        """Fields returned to callers."""
        return {"layout": self.layout, "reasoning": self.reasoning, "styleHints": list(self.style_hints)}


PlanNode.model_rebuild()


class GenerationResult(BaseModel):
    """Output of one pipeline run."""

    code: str
    explanation: str
    plan: Plan
    components: list[str] = Field(default_factory=list)
    is_iteration: bool
    should_reset: bool
    used_fallback: bool = False
    fallback_category: str | None = None
    timestamp: str
