"""Tests for deterministic markup repair."""

import re
from collections import Counter

import pytest
from hypothesis import given, settings, strategies as st

from conftest import LOGIN_MARKUP
from agents.templates import TemplateLibrary
from markup.reconstruct import (
    DEFAULT_RULES,
    Reconstructor,
    RewriteRule,
    balance_tags,
    cleanup,
    close_open_attributes,
    insert_missing_brackets,
    normalize_attribute_names,
    normalize_handlers,
    normalize_shorthands,
    reconstruct,
    repair_closing_tags,
    strip_fences,
    strip_preamble,
    wrap_bare_text,
)
from markup.tags import TagKind, scan_tags


def unbalanced(text: str) -> list[str]:
    """Problems found by a strict stack walk over the lexed tags."""
    stack: list[str] = []
    problems = []
    for tag in scan_tags(text):
        if tag.kind is TagKind.OPEN:
            stack.append(tag.name)
        elif tag.kind is TagKind.CLOSE:
            if not stack or stack[-1] != tag.name:
                problems.append(f"unexpected </{tag.name}>")
            else:
                stack.pop()
    problems.extend(f"unclosed <{name}>" for name in stack)
    return problems


_RAW_OPEN = re.compile(r"<([A-Za-z][\w.\-]*)(?=[\s/>])")
_RAW_CLOSE = re.compile(r"</([A-Za-z][\w.\-]*)\s*>")
_SELF_CLOSING = re.compile(
    r"<([A-Za-z][\w.\-]*)"
    r"(?:\s+[\w:.\-]+(?:=(?:\"[^\"\n]*\"|'[^'\n]*'|\{(?:[^{}]|\{[^{}]*\})*\}))?)*"
    r"\s*/>"
)


def count_mismatches(text: str) -> dict[str, tuple[int, int]]:
    """Names whose ``<Name`` count differs from closings plus self-closings.

    Counts raw text with regexes only, so a tag the lexer cannot read still
    shows up here.
    """
    opens = Counter(_RAW_OPEN.findall(text))
    ends = Counter(_RAW_CLOSE.findall(text)) + Counter(_SELF_CLOSING.findall(text))
    return {name: (opens[name], ends[name]) for name in opens | ends if opens[name] != ends[name]}


# ============================================================================
# Individual rules
# ============================================================================

@pytest.mark.unit
def test_strip_fences_and_narrative():
    raw = "Here is your login form:\n```jsx\n<Card>\n  <p>Hi</p>\n</Card>\n```"
    assert strip_fences(raw) == "<Card>\n  <p>Hi</p>\n</Card>"


@pytest.mark.unit
def test_strip_fences_keeps_code_prefix():
    raw = "const x = 1;\n<Card></Card>"
    assert strip_fences(raw).startswith("const x")


@pytest.mark.unit
def test_strip_preamble_unwraps_component_function():
    raw = (
        "import { Button } from '@/components/ui/button'\n\n"
        "export default function LoginForm() {\n"
        "  return (\n"
        "    <Card>\n"
        "      <Button>Login</Button>\n"
        "    </Card>\n"
        "  );\n"
        "}"
    )
    assert strip_preamble(raw) == "<Card>\n      <Button>Login</Button>\n    </Card>"


@pytest.mark.unit
def test_strip_preamble_unwraps_arrow_component():
    raw = "const App = () => (\n  <div>Hi</div>\n);"
    assert strip_preamble(raw) == "<div>Hi</div>"


@pytest.mark.unit
def test_strip_preamble_ignores_inline_function_in_attribute():
    raw = "<Button onClick={function() { go() }}>Go</Button>"
    assert strip_preamble(raw) == raw


@pytest.mark.unit
@pytest.mark.parametrize(
    "raw, expected",
    [
        (
            "<Button onClick={() => console.log('a')>Save</Button>",
            "<Button onClick={() => console.log('a')}>Save</Button>",
        ),
        ("<Button onClick={() => { go() >Save</Button>", "<Button onClick={() => { go() }}>Save</Button>"),
        ("<Button onClick={submit>Don't save", "<Button onClick={submit}>Don't save"),
        ('<Input placeholder="Email />', '<Input placeholder="Email" />'),
        ('<Label htmlFor="email>Email</Label>\n<Input />', '<Label htmlFor="email">Email</Label>\n<Input />'),
    ],
)
def test_close_open_attributes(raw, expected):
    assert close_open_attributes(raw) == expected


@pytest.mark.unit
@pytest.mark.parametrize(
    "raw",
    [
        "<Button onClick={() => x > 1 && go()}>Go</Button>",
        "<Dialog onOpenChange={() => {}}>x</Dialog>",
        "<Button icon={<span>+</span>}>Add</Button>",
        "<p>Don't stop</p>",
        'a<b title="x',
    ],
)
def test_close_open_attributes_leaves_complete_tags(raw):
    assert close_open_attributes(raw) == raw


@pytest.mark.unit
@pytest.mark.parametrize("code", [LOGIN_MARKUP, *(t.code for t in TemplateLibrary.list_all())])
def test_well_formed_markup_is_a_fixpoint(code):
    assert close_open_attributes(code) == code
    assert reconstruct(code) == code


@pytest.mark.unit
def test_unclosed_brace_is_balanced_after_repair():
    raw = "<Card>\n  <Button onClick={() => console.log('a')>Save</Button>\n</Card>"
    fixed = reconstruct(raw)

    assert fixed == "<Card>\n  <Button onClick={() => console.log('a')}>Save</Button>\n</Card>"
    assert unbalanced(fixed) == []
    assert count_mismatches(fixed) == {}


@pytest.mark.unit
def test_normalize_attribute_names():
    raw = '<div class="p-4"><label for="email" onclick={go}>Email</label></div>'
    fixed = normalize_attribute_names(raw)
    assert 'className="p-4"' in fixed
    assert 'htmlFor="email"' in fixed
    assert "onClick={go}" in fixed
    assert "class=" not in fixed


@pytest.mark.unit
def test_class_inside_text_is_untouched():
    raw = "<p>class=hello</p>"
    assert normalize_attribute_names(raw) == raw


@pytest.mark.unit
def test_normalize_shorthands():
    assert normalize_shorthands("<Button variant-outline size-sm>Go</Button>") == (
        '<Button variant="outline" size="sm">Go</Button>'
    )


@pytest.mark.unit
@pytest.mark.parametrize(
    "raw, expected",
    [
        ("<Button onClick={handleClick()}>Go</Button>", "<Button onClick={() => handleClick()}>Go</Button>"),
        ('<Button onClick="save">Go</Button>', "<Button onClick={() => save()}>Go</Button>"),
        ("<Button onClick={null}>Go</Button>", "<Button onClick={() => {}}>Go</Button>"),
        ("<Input onChange={() => setValue(1)} />", "<Input onChange={(e) => setValue(1)} />"),
        ("<Button onClick={() => go()}>Go</Button>", "<Button onClick={() => go()}>Go</Button>"),
    ],
)
def test_normalize_handlers(raw, expected):
    assert normalize_handlers(raw) == expected


@pytest.mark.unit
def test_insert_missing_brackets():
    raw = '<Card>\n  Button className="w-full">Login</Button>\n</Card>'
    assert '  <Button className="w-full">Login</Button>' in insert_missing_brackets(raw)


@pytest.mark.unit
def test_repair_closing_tags():
    raw = "<Card>\n  <p>Hi</p>\n/Card>"
    assert repair_closing_tags(raw) == "<Card>\n  <p>Hi</p>\n</Card>"


@pytest.mark.unit
def test_wrap_bare_text_action_label_becomes_button():
    raw = "<Card>\n  Login\n  <Input />\n</Card>"
    assert "  <Button>Login</Button>" in wrap_bare_text(raw)


@pytest.mark.unit
def test_wrap_bare_text_label_becomes_span():
    raw = "<div>\n  Email <Input type=\"email\" />\n</div>"
    assert '<span>Email</span> <Input type="email" />' in wrap_bare_text(raw)


@pytest.mark.unit
def test_wrap_bare_text_run_of_lines_in_one_pass():
    raw = "Alpha\nBeta\nGamma\nDelta\n<div />"
    assert wrap_bare_text(raw) == (
        "<span>Alpha</span>\n<span>Beta</span>\n<span>Gamma</span>\n<span>Delta</span>\n<div />"
    )


@pytest.mark.unit
def test_wrap_bare_text_closes_open_text_element():
    assert wrap_bare_text("<h2>Title") == "<h2>Title</h2>"


@pytest.mark.unit
def test_balance_closes_open_elements_innermost_first():
    fixed = balance_tags("<Card>\n  <div>\n    <p>Hi</p>")
    assert fixed.endswith("</div>\n</Card>")
    assert unbalanced(fixed) == []


@pytest.mark.unit
def test_balance_drops_stray_closing_tags():
    assert balance_tags("<p>Hi</p></Card>") == "<p>Hi</p>"


@pytest.mark.unit
def test_balance_closes_crossed_tags():
    fixed = balance_tags("<Card><p>Hi</Card>")
    assert fixed == "<Card><p>Hi</p></Card>"


@pytest.mark.unit
def test_balance_writes_void_elements_self_closing():
    assert balance_tags('<div><input type="text"><br></div>') == '<div><input type="text" /><br /></div>'


@pytest.mark.unit
def test_cleanup_removes_placeholder_lines():
    raw = "<div>\n  {}\n  <p>Hi</p>\n}\n</div>\n\n\n\n<<span>x</span>"
    assert cleanup(raw) == "<div>\n  <p>Hi</p>\n</div>\n\n<span>x</span>"


# ============================================================================
# Full chain
# ============================================================================

@pytest.mark.unit
def test_reconstruct_messy_login_output():
    raw = (
        "Sure! Here's the login form:\n"
        "```jsx\n"
        "export default function Login() {\n"
        "  return (\n"
        '    <Card class="p-6">\n'
        "      Email\n"
        '      <Input type="email" />\n'
        "      <Button onClick={login()} variant-outline>Login\n"
        "  );\n"
        "}\n"
        "```"
    )
    fixed = reconstruct(raw)

    assert fixed.startswith('<Card className="p-6">')
    assert "<span>Email</span>" in fixed
    assert '<Button onClick={() => login()} variant="outline">Login</Button>' in fixed
    assert fixed.rstrip().endswith("</Card>")
    assert "```" not in fixed
    assert "export" not in fixed
    assert unbalanced(fixed) == []


@pytest.mark.unit
def test_reconstruct_empty_input():
    assert reconstruct("") == ""


@pytest.mark.unit
def test_failing_rule_is_skipped():
    def explode(text: str) -> str:
        raise RuntimeError("boom")

    reconstructor = Reconstructor((RewriteRule("explode", explode), *DEFAULT_RULES))
    assert reconstructor.reconstruct("<p>hi") == "<p>hi</p>"


@pytest.mark.unit
def test_default_rule_order():
    assert [rule.name for rule in DEFAULT_RULES] == [
        "strip_fences",
        "strip_preamble",
        "close_open_attributes",
        "normalize_attribute_names",
        "normalize_shorthands",
        "normalize_handlers",
        "insert_missing_brackets",
        "repair_closing_tags",
        "wrap_bare_text",
        "balance_tags",
        "cleanup",
    ]


# ============================================================================
# Property tests
# ============================================================================

FRAGMENTS = [
    '<Card className="p-4">',
    "</Card>",
    "<div>",
    "</div>",
    '<Input placeholder="Email" />',
    "<Button onClick={submit()}>Save</Button>",
    "<h2>Title",
    "Password",
    'Email <Input type="email" />',
    '<input type="text">',
    "<br>",
    "/Card>",
    '<p class="note">Hi</p>',
    "<Badge variant-outline>New</Badge>",
    "<Button onClick={() => go()>Go</Button>",
    '<Input placeholder="Email />',
    '<Label htmlFor="email>Email</Label>',
    "<Button onClick={() => { reset() >Reset",
    "",
]

markup_lines = st.lists(st.sampled_from(FRAGMENTS), max_size=14).map("\n".join)


@pytest.mark.unit
@settings(max_examples=200, deadline=None)
@given(markup_lines)
def test_reconstruct_output_is_balanced(raw):
    """Property: every opening tag is closed in nested order."""
    fixed = reconstruct(raw)
    assert unbalanced(fixed) == []
    assert count_mismatches(fixed) == {}


@pytest.mark.unit
@settings(max_examples=200, deadline=None)
@given(markup_lines)
def test_reconstruct_is_idempotent(raw):
    """Property: repairing repaired markup changes nothing."""
    once = reconstruct(raw)
    assert reconstruct(once) == once
