"""Prompt construction utilities."""

from __future__ import annotations

from textwrap import dedent
from typing import Iterable

from ..browser.base import PageSnapshot
from ..models import ActionDescriptor, BrowserActionType, MemoryEntry

SYSTEM_PROMPT = (
    "You are an automation agent that controls a web browser. "
    "Always respond with a strict JSON object describing the next actions to take."
)


class PromptBuilder:
    """Build prompts for the LLM based on the current page state."""

    def __init__(self, max_actions: int = 3) -> None:
        self._max_actions = max_actions

    def build(
        self,
        instruction: str,
        snapshot: PageSnapshot,
        elements: str,
        memory: Iterable[MemoryEntry],
    ) -> str:
        memory_section = "\n".join(f"- {entry.content}" for entry in memory)
        if not memory_section:
            memory_section = "(nothing done yet)"
        state_lines = [
            f"Current URL: {snapshot.url or 'unknown'}",
            f"Page title: {snapshot.title or 'unknown'}",
        ]
        state_section = "\n".join(state_lines)
        # Sections are joined after dedent so multi-line values keep their indentation.
        template = dedent(
            """
            You are operating a web browser to carry out the following instruction:
            "{instruction}"

            Previous steps:
            {memory}

            Browser state:
            {state}

            Interactive elements:
            {elements}

            Respond with a JSON object containing the keys: actions, done, message.
            "actions" is a list of at most {max_actions} items, each matching this schema:
            {schema}

            Allowed action types: {types}.
            Use the element "selector" values above as targets; "back" and "wait" take an empty "target".
            Set "done" to true once the instruction is fully satisfied.
            Provide only valid JSON with double quotes.
            """
        ).strip()
        return template.format(
            instruction=instruction,
            memory=memory_section,
            state=state_section,
            elements=elements,
            max_actions=self._max_actions,
            schema=self._actions_schema(),
            types=", ".join(item.value for item in BrowserActionType),
        )

    @staticmethod
    def _actions_schema() -> str:
        examples = [
            ActionDescriptor(type=BrowserActionType.NAVIGATE.value, target="https://example.com"),
            ActionDescriptor(type=BrowserActionType.CLICK.value, target="#submit"),
            ActionDescriptor(
                type=BrowserActionType.TYPE.value,
                target="input[name=email]",
                value="user@example.com",
            ),
            ActionDescriptor(type=BrowserActionType.PRESS.value, target="#search", value="Enter"),
        ]
        return "\n".join(action.model_dump_json(exclude_none=True) for action in examples)
