"""Render agent results as colourised report lines."""

from __future__ import annotations

from rich.text import Text

from ..models import ActionDescriptor, ActionResult, AgentRunResult

SUCCESS_GLYPH = "✓"
FAILURE_GLYPH = "✗"


def format_action(action: ActionDescriptor) -> Text:
    """Render ``type "target"`` with an optional ``= "value"`` suffix."""

    text = Text()
    text.append(action.type, style="bold")
    text.append(" ")
    text.append(f'"{action.target}"', style="cyan")
    if action.value:
        text.append(" = ")
        text.append(f'"{action.value}"', style="yellow")
    return text


def format_action_result(result: ActionResult) -> Text:
    text = Text("  ")
    if result.success:
        text.append(SUCCESS_GLYPH, style="green")
    else:
        text.append(FAILURE_GLYPH, style="red")
    text.append(" ")
    text.append_text(format_action(result.action))
    if not result.success and result.error:
        text.append(f" ({result.error})", style="red")
    return text


def format_result(result: AgentRunResult) -> list[Text]:
    """Return the report lines for ``result``; the goal summary is always last."""

    lines: list[Text] = []
    if result.steps:
        show_headers = len(result.steps) > 1
        for step in result.steps:
            if show_headers:
                lines.append(Text(f"  Step {step.step}:", style="dim"))
            for action_result in step.actions:
                lines.append(format_action_result(action_result))
    elif result.actions:
        for action in result.actions:
            line = Text("  ")
            line.append(SUCCESS_GLYPH, style="green")
            line.append(" ")
            line.append_text(format_action(action))
            lines.append(line)

    if not lines:
        lines.append(Text("  No actions were executed", style="dim"))

    if result.goal_achieved:
        lines.append(Text(f"  Goal achieved in {result.total_steps} step(s)", style="green"))
    else:
        lines.append(
            Text(f"  Goal not confirmed ({result.total_steps} step(s) used)", style="yellow")
        )
    return lines


def render_result(result: AgentRunResult) -> Text:
    return Text("\n").join(format_result(result))
