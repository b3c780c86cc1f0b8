"""Tag lexer for generated JSX-like markup.

Finds opening, closing and self-closing tags without building a tree.
Attribute regions are scanned with quote and brace-depth tracking, so
``onClick={() => go()}`` does not end a tag at the arrow's ``>``.
Anything that does not lex as a complete tag is left as text.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterator


class TagKind(str, Enum):
    OPEN = "open"
    CLOSE = "close"
    SELF_CLOSING = "self_closing"


@dataclass(frozen=True)
class Tag:
    """A lexed tag and its span in the source text."""

    kind: TagKind
    name: str
    attrs: str
    start: int
    end: int

    @property
    def is_component(self) -> bool:
        """Capitalized names are components, lowercase are primitives."""
        return self.name[:1].isupper()


_NAME = re.compile(r"[A-Za-z][\w.\-]*")
_CLOSE = re.compile(r"</\s*([A-Za-z][\w.\-]*)\s*>")


def _scan_attrs(text: str, pos: int) -> int:
    """Return the index of the tag-ending ``>``, or -1 if unterminated."""
    quote = ""
    depth = 0
    i = pos
    length = len(text)
    while i < length:
        ch = text[i]
        if quote:
            if ch == quote:
                quote = ""
        elif ch in "\"'`":
            quote = ch
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth = max(depth - 1, 0)
        elif depth == 0:
            if ch == ">":
                return i
            if ch == "<":
                return -1
        i += 1
    return -1


def scan_tags(text: str) -> Iterator[Tag]:
    """Yield every complete tag in ``text`` in source order."""
    i = 0
    length = len(text)
    while i < length:
        lt = text.find("<", i)
        if lt == -1 or lt + 1 >= length:
            return

        close = _CLOSE.match(text, lt)
        if close:
            yield Tag(TagKind.CLOSE, close.group(1), "", lt, close.end())
            i = close.end()
            continue

        name = _NAME.match(text, lt + 1)
        if not name:
            i = lt + 1
            continue

        gt = _scan_attrs(text, name.end())
        if gt == -1:
            i = lt + 1
            continue

        attrs = text[name.end():gt]
        if attrs.rstrip().endswith("/"):
            kind = TagKind.SELF_CLOSING
            attrs = attrs.rstrip()[:-1]
        else:
            kind = TagKind.OPEN
        yield Tag(kind, name.group(0), attrs, lt, gt + 1)
        i = gt + 1


def render_tag(tag: Tag, name: str | None = None, attrs: str | None = None) -> str:
    """Render a tag back to text, optionally with a new name or attributes."""
    name = tag.name if name is None else name
    attrs = tag.attrs if attrs is None else attrs
    if tag.kind is TagKind.CLOSE:
        return f"</{name}>"
    if tag.kind is TagKind.SELF_CLOSING:
        body = attrs.rstrip()
        return f"<{name}{body} />" if body else f"<{name} />"
    return f"<{name}{attrs}>"


def rewrite_tags(text: str, fn: Callable[[Tag], str | None]) -> str:
    """Replace each tag with ``fn(tag)``; ``None`` keeps the original text."""
    parts: list[str] = []
    last = 0
    for tag in scan_tags(text):
        replacement = fn(tag)
        if replacement is None:
            continue
        parts.append(text[last:tag.start])
        parts.append(replacement)
        last = tag.end
    if not parts:
        return text
    parts.append(text[last:])
    return "".join(parts)


# ============================================================================
# Attributes
# ============================================================================


@dataclass(frozen=True)
class Attribute:
    """One attribute token; ``value`` keeps its delimiters (quotes/braces)."""

    name: str
    value: str | None = None

    @property
    def expression(self) -> str | None:
        """Inner text of a ``{...}`` value."""
        if self.value and self.value.startswith("{") and self.value.endswith("}"):
            return self.value[1:-1]
        return None

    @property
    def literal(self) -> str | None:
        """Inner text of a quoted value."""
        if self.value and len(self.value) >= 2 and self.value[0] in "\"'" and self.value[-1] == self.value[0]:
            return self.value[1:-1]
        return None

    def render(self) -> str:
        return self.name if self.value is None else f"{self.name}={self.value}"


# Raw text (whitespace, stray characters) is kept as str between attributes
AttributeToken = Attribute | str

_ATTR_NAME = re.compile(r"[A-Za-z_:@][\w:.\-]*")


def _read_value(attrs: str, pos: int) -> int:
    """Return the end index (exclusive) of the attribute value at ``pos``."""
    ch = attrs[pos]
    if ch in "\"'":
        end = attrs.find(ch, pos + 1)
        return len(attrs) if end == -1 else end + 1
    if ch == "{":
        depth = 0
        quote = ""
        for i in range(pos, len(attrs)):
            c = attrs[i]
            if quote:
                if c == quote:
                    quote = ""
            elif c in "\"'`":
                quote = c
            elif c == "{":
                depth += 1
            elif c == "}":
                depth -= 1
                if depth == 0:
                    return i + 1
        return len(attrs)
    end = pos
    while end < len(attrs) and not attrs[end].isspace():
        end += 1
    return end


def parse_attributes(attrs: str) -> list[AttributeToken]:
    """Split an attribute region into tokens; ``render_attributes`` inverts it."""
    tokens: list[AttributeToken] = []
    i = 0
    length = len(attrs)
    while i < length:
        match = _ATTR_NAME.match(attrs, i)
        if not match:
            j = i + 1
            while j < length and not _ATTR_NAME.match(attrs, j):
                j += 1
            tokens.append(attrs[i:j])
            i = j
            continue

        name = match.group(0)
        j = match.end()
        if j < length and attrs[j] == "=" and j + 1 < length:
            end = _read_value(attrs, j + 1)
            tokens.append(Attribute(name, attrs[j + 1:end]))
            i = end
        else:
            tokens.append(Attribute(name))
            i = j
    return tokens


def render_attributes(tokens: list[AttributeToken]) -> str:
    return "".join(t if isinstance(t, str) else t.render() for t in tokens)


def map_attributes(attrs: str, fn: Callable[[Attribute], Attribute]) -> str:
    """Apply ``fn`` to every attribute in a region, keeping layout intact."""
    tokens = parse_attributes(attrs)
    return render_attributes([t if isinstance(t, str) else fn(t) for t in tokens])
