"""
Prompt Builder
User-content construction for the plan, generate and explain steps.
"""

from typing import Sequence

from core import ConversationTurn, safe_json_dumps


class PromptBuilder:
    """Builds the user side of each service call."""

    @staticmethod
    def format_history(turns: Sequence[ConversationTurn]) -> str:
        """Render prior turns as ``User:`` / ``Assistant:`` lines."""
        lines = []
        for turn in turns:
            if turn.role == "system" or not turn.content.strip():
                continue
            label = "User" if turn.role == "user" else "Assistant"
            lines.append(f"{label}: {turn.content.strip()}")
        return "\n".join(lines)

    @staticmethod
    def build_structured(request: str, context: str = "", code: str = "", plan: str = "") -> str:
        """
        Build structured user content.

        Args:
            request: User request
            context: Conversation context
            code: Current markup (iterations only)
            plan: Serialized plan

        Returns:
            Complete user content
        """
        parts = []

        if context:
            parts.append(f"=== CONVERSATION ===\n{context}")

        if code:
            parts.append(f"=== CURRENT CODE ===\n{code}")

        if plan:
            parts.append(f"=== PLAN ===\n{plan}")

        parts.append(f"=== REQUEST ===\n{request}")

        return "\n\n".join(parts)

    @classmethod
    def plan_request(
        cls, prompt: str, previous_artifact: str = "", history: Sequence[ConversationTurn] = ()
    ) -> str:
        """Plan step content; prior context only when iterating."""
        if not previous_artifact and not history:
            return prompt
        return cls.build_structured(prompt, context=cls.format_history(history), code=previous_artifact)

    @classmethod
    def generation_request(
        cls,
        prompt: str,
        plan: dict | None = None,
        previous_artifact: str = "",
        history: Sequence[ConversationTurn] = (),
    ) -> str:
        """Generate step content."""
        plan_json = safe_json_dumps(plan) if plan else ""
        if not previous_artifact:
            return cls.build_structured(f"Create: {prompt}", plan=plan_json)
        return cls.build_structured(
            f"Modify: {prompt}",
            context=cls.format_history(history),
            code=previous_artifact,
            plan=plan_json,
        )

    @staticmethod
    def explain_request(prompt: str, components: Sequence[str] = ()) -> str:
        """Explain step content."""
        if not components:
            return prompt
        return f"{prompt}\n\nComponents used: {', '.join(components)}"
