"""Markup Reconstructor - deterministic repair of model-written markup.

An ordered list of rewrite rules followed by a tag-stack balancing pass.
Every rule is a total ``str -> str`` function; a rule that fails is logged
and skipped, so reconstruction never raises. The whole chain is repeated
until the text stops changing (bounded), which makes ``reconstruct``
idempotent: feeding its output back in returns the same text.
"""

import re
from dataclasses import dataclass
from typing import Callable, Sequence

from core import get_logger
from .tags import Attribute, Tag, TagKind, map_attributes, render_tag, rewrite_tags, scan_tags


logger = get_logger(__name__)


@dataclass(frozen=True)
class RewriteRule:
    """A named text-to-text repair step."""

    name: str
    apply: Callable[[str], str]

    def __call__(self, text: str) -> str:
        return self.apply(text)


# ============================================================================
# 1. Code fences and leading narrative
# ============================================================================

_FENCE = re.compile(r"```[A-Za-z0-9_+-]*[ \t]*\n?")
_NARRATIVE_START = re.compile(
    r"^\s*(?:here(?:'s|’s| is| are)?|sure|certainly|okay|ok|below|the following|this)\b",
    re.IGNORECASE,
)
_CODE_HINT = re.compile(r"[=;{}()]|\b(?:import|export|function|const|return)\b")


def strip_fences(text: str) -> str:
    """Remove code fences and a narrative sentence before the first element."""
    text = _FENCE.sub("", text)
    first = text.find("<")
    if first <= 0:
        return text.strip()

    prefix = text[:first].strip()
    if not prefix:
        return text.strip()
    if _NARRATIVE_START.match(prefix) or (prefix.endswith(":") and not _CODE_HINT.search(prefix)):
        return text[first:].strip()
    return text.strip()


# ============================================================================
# 2. import/export preamble and component wrappers
# ============================================================================

_IMPORT_LINE = re.compile(r"^[ \t]*(?:import\b[^\n]*|['\"]use (?:client|strict)['\"];?)[ \t]*$\n?", re.MULTILINE)
_EXPORT_LINE = re.compile(r"^[ \t]*export\b[^\n]*$\n?", re.MULTILINE)
_WRAPPER = re.compile(
    r"(?:export\s+(?:default\s+)?)?"
    r"(?:function\s*[\w$]*\s*\([^)]*\)\s*(?::\s*[^{]+)?\{"
    r"|(?:const|let|var)\s+[\w$]+\s*(?::\s*[^=]+)?=\s*(?:\([^)]*\)|[\w$]+)\s*=>\s*[({]?)"
)
_RETURN = re.compile(r"\breturn\b\s*\(?")


def strip_preamble(text: str) -> str:
    """Drop import/export lines and unwrap a component function's return."""
    wrapper = _WRAPPER.search(text)
    first = text.find("<")
    if wrapper and (first == -1 or wrapper.start() < first):
        ret = _RETURN.search(text, wrapper.end())
        body_start = ret.end() if ret else wrapper.end()
        start = text.find("<", body_start)
        end = text.rfind(">")
        if start != -1 and end > start:
            return text[start:end + 1].strip()

    text = _IMPORT_LINE.sub("", text)
    return _EXPORT_LINE.sub("", text).strip()


# ============================================================================
# 3. Unterminated attribute values
# ============================================================================

_ELEMENT_START = re.compile(r"<[A-Za-z][\w.\-]*")
_TAG_BOUNDARY = re.compile(r"<[A-Za-z/]")


def _close_quote(text: str, opened: int, stop: int, quote: str) -> tuple[int, str] | None:
    """Close a quoted value that runs to ``stop`` before the tag's own ``>``."""
    if text[opened - 1] != "=":
        return None
    end = text.find(">", opened + 1, stop)
    while end != -1 and text[end - 1] == "=":
        end = text.find(">", end + 1, stop)
    if end == -1:
        return None
    if text[end - 1] == "/":
        end -= 1
    value = text[opened + 1:end].rstrip()
    return opened + 1 + len(value), quote


def _attribute_repair(text: str, pos: int) -> tuple[int, str] | None:
    """
    Where the attribute region starting at ``pos`` is missing a ``}`` or quote.

    A ``{`` still open when the next tag begins (or the text ends) is closed
    just before the last ``>`` on the tag's first line that is not an arrow.
    Values holding markup of their own (``icon={<Icon />}``) are left alone.
    A quoted value still open at the end of its line is closed before the
    first ``>`` (or ``/>``) on that line.

    Returns ``(index, text to insert)`` or ``None``.
    """
    quote = ""
    opened = -1
    depth = 0
    candidate, candidate_depth = -1, 0
    nested = False
    line_end = text.find("\n", pos)
    if line_end == -1:
        line_end = len(text)
    i = pos
    while i < len(text):
        ch = text[i]
        if quote:
            if ch == quote:
                quote = ""
            elif ch == "\n" and quote != "`":
                break
        elif ch in "\"'`":
            quote, opened = ch, i
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth = max(depth - 1, 0)
            if depth < candidate_depth:
                candidate, candidate_depth = -1, 0
        elif ch == ">":
            if depth == 0:
                return None
            if text[i - 1] != "=" and not nested and i < line_end:
                candidate, candidate_depth = i, depth
        elif ch == "<":
            if depth == 0:
                return None
            if _TAG_BOUNDARY.match(text, i):
                if candidate != -1:
                    break
                nested = True
        i += 1

    if candidate != -1:
        return candidate, "}" * candidate_depth
    if quote and depth == 0:
        return _close_quote(text, opened, i, quote)
    return None


def close_open_attributes(text: str) -> str:
    """Insert the ``}`` or closing quote an attribute value is missing."""
    parts: list[str] = []
    last = 0
    pos = 0
    while True:
        match = _ELEMENT_START.search(text, pos)
        if match is None:
            break
        repair = _attribute_repair(text, match.end())
        if repair is None:
            pos = match.end()
            continue
        at, insert = repair
        logger.debug("closed_attribute_value", tag=match.group()[1:], inserted=insert)
        parts.append(text[last:at])
        parts.append(insert)
        last = pos = at
    parts.append(text[last:])
    return "".join(parts)


# ============================================================================
# 4-6. Attribute normalization
# ============================================================================

ATTRIBUTE_RENAMES: dict[str, str] = {
    "class": "className",
    "for": "htmlFor",
    "onclick": "onClick",
    "onchange": "onChange",
    "onfocus": "onFocus",
    "onblur": "onBlur",
    "onsubmit": "onSubmit",
    "oninput": "onInput",
    "tabindex": "tabIndex",
    "readonly": "readOnly",
    "maxlength": "maxLength",
    "autofocus": "autoFocus",
}


def _rewrite_element_attributes(text: str, fn: Callable[[Attribute], Attribute]) -> str:
    def rewrite(tag: Tag) -> str | None:
        if tag.kind is TagKind.CLOSE or not tag.attrs.strip():
            return None
        attrs = map_attributes(tag.attrs, fn)
        return None if attrs == tag.attrs else render_tag(tag, attrs=attrs)

    return rewrite_tags(text, rewrite)


def _rename_attribute(attr: Attribute) -> Attribute:
    renamed = ATTRIBUTE_RENAMES.get(attr.name.lower())
    if renamed and renamed != attr.name:
        return Attribute(renamed, attr.value)
    return attr


def normalize_attribute_names(text: str) -> str:
    """HTML spellings (class, onclick, for, ...) to JSX spellings."""
    return _rewrite_element_attributes(text, _rename_attribute)


_SHORTHAND = re.compile(r"^(variant|size)-([\w]+)$")


def _expand_shorthand(attr: Attribute) -> Attribute:
    if attr.value is not None:
        return attr
    match = _SHORTHAND.match(attr.name)
    if not match:
        return attr
    return Attribute(match.group(1), f'"{match.group(2)}"')


def normalize_shorthands(text: str) -> str:
    """``variant-outline`` to ``variant="outline"`` (attribute position only)."""
    return _rewrite_element_attributes(text, _expand_shorthand)


EVENT_HANDLERS = frozenset({
    "onClick", "onChange", "onInput", "onSubmit", "onFocus", "onBlur", "onOpenChange",
    "onKeyDown", "onKeyUp", "onMouseEnter", "onMouseLeave",
})
# Handlers that receive the event object
EVENT_PARAM_HANDLERS = frozenset({"onChange", "onInput", "onSubmit"})

_NOOP = "{() => {}}"
_NOTHING = frozenset({"", "null", "undefined", "nothing", "none", "noop"})
_BARE_CALL = re.compile(r"^\s*[A-Za-z_$][\w$.]*\s*\(.*\)\s*;?\s*$", re.DOTALL)
_IDENTIFIER = re.compile(r"^\s*[A-Za-z_$][\w$.]*\s*$")
_ZERO_ARG_ARROW = re.compile(r"^\s*\(\s*\)\s*=>")


def _closure(event: str, body: str) -> str:
    body = body.strip().rstrip(";").strip()
    params = "(e)" if event in EVENT_PARAM_HANDLERS else "()"
    return "{" + f"{params} => {body}" + "}"


def _normalize_handler(attr: Attribute) -> Attribute:
    if attr.name not in EVENT_HANDLERS or attr.value is None:
        return attr

    literal = attr.literal
    if literal is not None:
        if literal.strip().lower() in _NOTHING:
            return Attribute(attr.name, _NOOP)
        body = literal.strip()
        if _IDENTIFIER.match(body):
            body = f"{body}()"
        return Attribute(attr.name, _closure(attr.name, body))

    expression = attr.expression
    if expression is None:
        return attr
    if expression.strip().lower() in _NOTHING:
        return Attribute(attr.name, _NOOP)
    if "=>" not in expression and not expression.lstrip().startswith("function") and _BARE_CALL.match(expression):
        return Attribute(attr.name, _closure(attr.name, expression))
    if attr.name in EVENT_PARAM_HANDLERS and _ZERO_ARG_ARROW.match(expression):
        return Attribute(attr.name, "{" + _ZERO_ARG_ARROW.sub("(e) =>", expression, count=1) + "}")
    return attr


def normalize_handlers(text: str) -> str:
    """Bare calls and string handlers to closures; null markers to no-ops."""
    return _rewrite_element_attributes(text, _normalize_handler)


# ============================================================================
# 7-8. Bracket repair
# ============================================================================

_ATTR_LIST = r"(?:\s+[A-Za-z][\w:\-]*(?:=(?:\"[^\"\n]*\"|'[^'\n]*'|\{[^\n]*?\}))?)*"
_MISSING_BRACKET = re.compile(rf"^([ \t]*)([A-Z][\w.]*)({_ATTR_LIST}\s*/?>)", re.MULTILINE)
_BROKEN_CLOSE = re.compile(r"(?:^|(?<=[\s>]))/([A-Za-z][\w.]*)>", re.MULTILINE)


def insert_missing_brackets(text: str) -> str:
    """``Button className="x">`` at line start gains its ``<``."""
    return _MISSING_BRACKET.sub(r"\1<\2\3", text)


def repair_closing_tags(text: str) -> str:
    """``/Card>`` not preceded by ``<`` becomes ``</Card>``."""
    return _BROKEN_CLOSE.sub(r"</\1>", text)


# ============================================================================
# 9. Bare text
# ============================================================================

TEXT_ELEMENTS = frozenset({
    "h1", "h2", "h3", "h4", "h5", "h6", "p", "span", "label", "a", "li", "td", "th",
    "Button", "Badge",
})
ACTION_LABELS = frozenset({
    "login", "log in", "sign in", "sign up", "register", "submit", "save", "cancel",
    "confirm", "ok", "close", "send", "continue", "next", "back", "delete", "add to cart",
})
_PLAIN_TEXT = re.compile(r"^[A-Za-z0-9][A-Za-z0-9 ,.!?'’:$%#&/\-]*$")
_JS_WORDS = frozenset({"return", "else", "default", "break", "null", "undefined", "true", "false"})


def _is_plain_text(s: str) -> bool:
    s = s.strip()
    return bool(_PLAIN_TEXT.match(s)) and s.lower() not in _JS_WORDS


def _wrap_text(s: str) -> str:
    s = s.strip()
    tag = "Button" if s.lower().rstrip(".!") in ACTION_LABELS else "span"
    return f"<{tag}>{s}</{tag}>"


def _close_open_text_element(line: str) -> str:
    stripped = line.lstrip()
    if not stripped.startswith("<"):
        return line
    indent = line[:len(line) - len(stripped)]
    tags = list(scan_tags(stripped))
    if len(tags) != 1:
        return line
    tag = tags[0]
    if tag.start != 0 or tag.kind is not TagKind.OPEN or tag.name not in TEXT_ELEMENTS:
        return line
    content = stripped[tag.end:].rstrip()
    if not content.strip() or "<" in content or "{" in content:
        return line
    return f"{indent}{stripped[:tag.end]}{content}</{tag.name}>"


def wrap_bare_text(text: str) -> str:
    """Wrap plain text that sits directly before an element.

    Lines are visited bottom-up so a freshly wrapped line counts as an
    element for the line above it.
    """
    out: list[str] = []
    nxt = ""
    for line in reversed(text.split("\n")):
        stripped = line.strip()
        indent = line[:len(line) - len(line.lstrip())]

        if stripped.startswith("<"):
            line = _close_open_text_element(line)
        else:
            # Same line: "Email <Input ... />"
            lt = stripped.find("<")
            if lt > 0 and _is_plain_text(stripped[:lt]) and not stripped[lt:].startswith("</"):
                line = f"{indent}{_wrap_text(stripped[:lt])} {stripped[lt:]}"
            # Next line opens an element
            elif stripped and _is_plain_text(stripped) and nxt.startswith("<") and not nxt.startswith("</"):
                line = f"{indent}{_wrap_text(stripped)}"

        out.append(line)
        if line.strip():
            nxt = line.strip()
    return "\n".join(reversed(out))


# ============================================================================
# 10. Tag balance
# ============================================================================

VOID_ELEMENTS = frozenset({
    "area", "base", "br", "col", "embed", "hr", "img", "input", "link", "meta",
    "param", "source", "track", "wbr",
})


def balance_tags(text: str) -> str:
    """Stack pass: close what was left open, drop closings that match nothing.

    A closing tag pops up to its most recent matching opening tag, closing
    anything opened after it. Void HTML elements are written self-closing.
    Whatever is still open at the end is closed innermost-first.
    """
    stack: list[str] = []
    parts: list[str] = []
    last = 0

    for tag in scan_tags(text):
        parts.append(text[last:tag.start])
        last = tag.end
        source = text[tag.start:tag.end]

        if tag.kind is TagKind.SELF_CLOSING:
            parts.append(source)
        elif tag.kind is TagKind.OPEN:
            if tag.name.lower() in VOID_ELEMENTS:
                parts.append(render_tag(Tag(TagKind.SELF_CLOSING, tag.name, tag.attrs, tag.start, tag.end)))
            else:
                stack.append(tag.name)
                parts.append(source)
        elif tag.name in stack:
            index = len(stack) - 1 - stack[::-1].index(tag.name)
            while len(stack) > index + 1:
                parts.append(f"</{stack.pop()}>")
            stack.pop()
            parts.append(source)
        else:
            logger.debug("stray_closing_tag", tag=tag.name)

    parts.append(text[last:])
    if not stack:
        return "".join(parts)

    balanced = "".join(parts).rstrip()
    while stack:
        depth = len(stack) - 1
        balanced += "\n" + "  " * depth + f"</{stack.pop()}>"
    return balanced


# ============================================================================
# 11. Cleanup
# ============================================================================

_PLACEHOLDER_LINE = re.compile(r"^[ \t]*(?:\{\}+\}*>?|\}+;?|\)\s*;|;)[ \t]*$\n?", re.MULTILINE)
_DOUBLE_BRACKET = re.compile(r"<{2,}(?=[A-Za-z/])")
_BLANK_RUN = re.compile(r"\n[ \t]*\n(?:[ \t]*\n)+")
_TRAILING_SPACE = re.compile(r"[ \t]+$", re.MULTILINE)


def cleanup(text: str) -> str:
    """Drop wrapper leftovers and collapse doubled brackets."""
    text = _PLACEHOLDER_LINE.sub("", text)
    text = _DOUBLE_BRACKET.sub("<", text)
    text = _TRAILING_SPACE.sub("", text)
    text = _BLANK_RUN.sub("\n\n", text)
    return text.strip()


DEFAULT_RULES: tuple[RewriteRule, ...] = (
    RewriteRule("strip_fences", strip_fences),
    RewriteRule("strip_preamble", strip_preamble),
    RewriteRule("close_open_attributes", close_open_attributes),
    RewriteRule("normalize_attribute_names", normalize_attribute_names),
    RewriteRule("normalize_shorthands", normalize_shorthands),
    RewriteRule("normalize_handlers", normalize_handlers),
    RewriteRule("insert_missing_brackets", insert_missing_brackets),
    RewriteRule("repair_closing_tags", repair_closing_tags),
    RewriteRule("wrap_bare_text", wrap_bare_text),
    RewriteRule("balance_tags", balance_tags),
    RewriteRule("cleanup", cleanup),
)


class Reconstructor:
    """Applies the rule chain until the markup is stable."""

    def __init__(self, rules: Sequence[RewriteRule] = DEFAULT_RULES, max_passes: int = 3) -> None:
        self.rules = tuple(rules)
        self.max_passes = max(1, max_passes)

    def run_once(self, text: str) -> str:
        for rule in self.rules:
            try:
                text = rule(text)
            except Exception as e:
                logger.warning("rewrite_rule_failed", rule=rule.name, error=str(e))
        return text

    def reconstruct(self, text: str) -> str:
        """Repair ``text``; never raises."""
        current = text or ""
        for _ in range(self.max_passes):
            repaired = self.run_once(current)
            if repaired == current:
                break
            current = repaired
        return current


_default = Reconstructor()


def reconstruct(text: str) -> str:
    """Repair model output with the default rule chain."""
    return _default.reconstruct(text)
