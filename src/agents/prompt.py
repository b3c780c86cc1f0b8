"""
System prompts for the plan, generate and explain steps.
"""

from functools import lru_cache

from markup import vocabulary


PLAN_PROMPT = """Plan UI structure. Output JSON only, no prose:
{"layout": "flex-col", "structure": [{"component": "Card", "props": {}, "children": []}], "styleHints": [], "reasoning": "text"}

layout is one of: flex-col, flex-row, grid, stack.
Only use components from this list:
{components}"""


GENERATE_PROMPT = """Generate PERFECT JSX code. Follow these examples EXACTLY:

LOGIN FORM:
<Card className="w-full max-w-md mx-auto p-6">
  <h2 className="text-2xl font-bold mb-6">Login</h2>
  <div className="space-y-4">
    <Input type="email" placeholder="Email" className="w-full" />
    <Input type="password" placeholder="Password" className="w-full" />
    <Button onClick={() => console.log('login')} className="w-full">Login</Button>
  </div>
</Card>

MODAL:
<Dialog open={true} onOpenChange={() => {}}>
  <Card className="p-6 max-w-md">
    <h2 className="text-2xl font-bold mb-2">Title</h2>
    <p className="mb-4">Description</p>
    <Button onClick={() => console.log('ok')}>OK</Button>
  </Card>
</Dialog>

AVAILABLE COMPONENTS:
{components}

RULES:
- Use ONLY the components listed above
- Use className NOT class
- Use onClick NOT onclick
- Every tag starts with <
- Arrow functions for events
- No imports, exports or function wrappers
- No script tags, window/document access, storage or network calls
- NO {}> or malformed syntax

Output ONLY JSX code."""


ITERATE_SUFFIX = """

You are MODIFYING the existing UI given under CURRENT CODE.
Keep everything the user did not ask to change. Output the complete updated JSX."""


EXPLAIN_PROMPT = "Explain UI in 2 sentences."


@lru_cache
def get_plan_prompt() -> str:
    return PLAN_PROMPT.replace("{components}", ", ".join(vocabulary.component_names()))


@lru_cache
def get_generation_prompt(iterating: bool = False) -> str:
    """Generation system prompt listing the component vocabulary."""
    prompt = GENERATE_PROMPT.replace("{components}", vocabulary.describe())
    return prompt + ITERATE_SUFFIX if iterating else prompt


def get_explain_prompt() -> str:
    return EXPLAIN_PROMPT
