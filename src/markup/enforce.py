"""Vocabulary Enforcer - rewrites out-of-vocabulary components."""

import re
from dataclasses import dataclass
from typing import Mapping

from core import get_logger
from .tags import Attribute, AttributeToken, Tag, TagKind, parse_attributes, render_attributes, render_tag, rewrite_tags
from .vocabulary import COMPONENT_LIBRARY, GENERIC_CONTAINER, ComponentSpec


logger = get_logger(__name__)

# Any capitalized element name, including unterminated and closing forms
_COMPONENT_REF = re.compile(r"(</?)([A-Z][\w.\-]*)")


@dataclass(frozen=True)
class EnforcementResult:
    """Rewritten markup, the names that were replaced and the values dropped."""

    code: str
    replaced: tuple[str, ...] = ()
    dropped: tuple[str, ...] = ()

    @property
    def changed(self) -> bool:
        return bool(self.replaced or self.dropped)


def find_unknown_components(
    code: str, components: Mapping[str, ComponentSpec] = COMPONENT_LIBRARY
) -> list[str]:
    """Capitalized element names not in the registry, in first-seen order."""
    seen: dict[str, None] = {}
    for match in _COMPONENT_REF.finditer(code):
        name = match.group(2)
        if name not in components:
            seen.setdefault(name)
    return list(seen)


def extract_components(
    code: str, components: Mapping[str, ComponentSpec] = COMPONENT_LIBRARY
) -> list[str]:
    """Registry components used by ``code``, in first-seen order."""
    seen: dict[str, None] = {}
    for match in _COMPONENT_REF.finditer(code):
        name = match.group(2)
        if name in components:
            seen.setdefault(name)
    return list(seen)


_ENUMERATED_PROPS = ("variant", "size")


def _accepts(spec: ComponentSpec, attr: Attribute) -> bool:
    value = attr.literal
    if value is None or attr.name not in _ENUMERATED_PROPS:
        return True
    if attr.name not in spec.props:
        return False
    return spec.accepts_variant(value) if attr.name == "variant" else spec.accepts_size(value)


def drop_unsupported_values(
    code: str, components: Mapping[str, ComponentSpec] = COMPONENT_LIBRARY
) -> tuple[str, list[str]]:
    """
    Remove quoted ``variant``/``size`` values a component does not offer,
    including on components that take no such prop at all.

    Expression values (``variant={kind}``) are kept since they cannot be
    checked. Returns the markup and ``Name.attr=value`` for each drop.
    """
    dropped: list[str] = []

    def rewrite(tag: Tag) -> str | None:
        spec = components.get(tag.name)
        if spec is None or tag.kind is TagKind.CLOSE:
            return None
        kept: list[AttributeToken] = []
        for token in parse_attributes(tag.attrs):
            if isinstance(token, Attribute) and not _accepts(spec, token):
                dropped.append(f"{tag.name}.{token.name}={token.literal}")
                if kept and isinstance(kept[-1], str) and kept[-1].isspace():
                    kept.pop()
                continue
            kept.append(token)
        attrs = render_attributes(kept)
        return None if attrs == tag.attrs else render_tag(tag, attrs=attrs)

    return rewrite_tags(code, rewrite), dropped


def enforce_vocabulary(
    code: str, components: Mapping[str, ComponentSpec] = COMPONENT_LIBRARY
) -> EnforcementResult:
    """
    Rename every unknown component to the generic container.

    Opening, closing and self-closing forms are renamed together, so pairs
    stay matched; attributes and children are left as they are. Known
    components then lose any ``variant``/``size`` value they do not offer.

    Args:
        code: Reconstructed markup
        components: Vocabulary to enforce

    Returns:
        EnforcementResult with the rewritten markup
    """
    unknown = find_unknown_components(code, components)
    if unknown:
        def rename(match: re.Match[str]) -> str:
            if match.group(2) in components:
                return match.group(0)
            return f"{match.group(1)}{GENERIC_CONTAINER}"

        code = _COMPONENT_REF.sub(rename, code)
        logger.info("components_replaced", replaced=unknown)

    code, dropped = drop_unsupported_values(code, components)
    if dropped:
        logger.info("values_dropped", dropped=dropped)
    return EnforcementResult(code, tuple(unknown), tuple(dropped))
