"""
Component Vocabulary Registry
The closed set of components generated markup may use.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, Mapping

GENERIC_CONTAINER = "div"


@dataclass(frozen=True)
class ComponentSpec:
    """Allowed props (and enumerated values) for one component."""

    name: str
    props: frozenset[str]
    variants: frozenset[str] | None = None
    sizes: frozenset[str] | None = None

    def accepts_variant(self, value: str) -> bool:
        return self.variants is None or value in self.variants

    def accepts_size(self, value: str) -> bool:
        return self.sizes is None or value in self.sizes


def _spec(
    name: str,
    props: Iterable[str],
    variants: Iterable[str] | None = None,
    sizes: Iterable[str] | None = None,
) -> ComponentSpec:
    return ComponentSpec(
        name=name,
        props=frozenset(props),
        variants=frozenset(variants) if variants is not None else None,
        sizes=frozenset(sizes) if sizes is not None else None,
    )


COMPONENT_LIBRARY: Mapping[str, ComponentSpec] = MappingProxyType({
    spec.name: spec
    for spec in (
        _spec(
            "Button",
            ["className", "onClick", "disabled", "variant", "size", "type", "children"],
            variants=["default", "outline", "ghost", "destructive", "secondary", "link"],
            sizes=["sm", "default", "lg", "icon"],
        ),
        _spec("Card", ["className", "children"]),
        _spec("Input", ["className", "type", "placeholder", "onChange", "value", "name", "id", "disabled"]),
        _spec("Textarea", ["className", "placeholder", "onChange", "value", "rows"]),
        _spec(
            "Badge",
            ["className", "variant", "children"],
            variants=["default", "secondary", "outline", "destructive"],
        ),
        _spec("Dialog", ["open", "onOpenChange", "children"]),
        _spec("Table", ["className", "children"]),
        _spec("Sidebar", ["className", "children"]),
        _spec("Navbar", ["className", "children"]),
        _spec("Chart", ["className", "type", "data"]),
    )
})

PRIMITIVE_ELEMENTS: frozenset[str] = frozenset({
    "div", "span", "p",
    "h1", "h2", "h3", "h4", "h5", "h6",
    "ul", "ol", "li",
    "table", "thead", "tbody", "tfoot", "tr", "td", "th",
    "a", "img", "form", "label",
    "nav", "header", "footer", "section", "main", "article", "aside",
})


def component_names() -> tuple[str, ...]:
    """Registry component names in declaration order."""
    return tuple(COMPONENT_LIBRARY)


def get(name: str) -> ComponentSpec | None:
    return COMPONENT_LIBRARY.get(name)


def is_component(name: str) -> bool:
    return name in COMPONENT_LIBRARY


def is_allowed(name: str) -> bool:
    """Registry member or always-allowed primitive."""
    return name in COMPONENT_LIBRARY or name in PRIMITIVE_ELEMENTS


def describe() -> str:
    """Vocabulary summary for the generation prompt."""
    lines = []
    for spec in COMPONENT_LIBRARY.values():
        line = f"- {spec.name}: props {', '.join(sorted(spec.props))}"
        if spec.variants:
            line += f"; variant one of {', '.join(sorted(spec.variants))}"
        if spec.sizes:
            line += f"; size one of {', '.join(sorted(spec.sizes))}"
        lines.append(line)
    lines.append(f"- HTML elements: {', '.join(sorted(PRIMITIVE_ELEMENTS))}")
    return "\n".join(lines)
