from browser_agent_repl.models import ActionDescriptor, ActionResult, AgentRunResult, StepResult
from browser_agent_repl.repl.formatting import (
    format_action,
    format_action_result,
    format_result,
    render_result,
)

CLICK = ActionDescriptor(type="click", target="#submit")
TYPE = ActionDescriptor(type="type", target="#input", value="hello")


def _plain(lines):
    return [line.plain for line in lines]


def test_format_action_without_value():
    assert format_action(CLICK).plain == 'click "#submit"'


def test_format_action_with_value():
    assert format_action(TYPE).plain == 'type "#input" = "hello"'


def test_format_action_result_includes_error_only_on_failure():
    failed = ActionResult(action=CLICK, success=False, error="element not found")
    succeeded = ActionResult(action=CLICK, success=True)

    assert format_action_result(failed).plain == '  ✗ click "#submit" (element not found)'
    assert format_action_result(succeeded).plain == '  ✓ click "#submit"'


def test_failed_action_without_error_has_no_suffix():
    failed = ActionResult(action=CLICK, success=False)
    assert format_action_result(failed).plain == '  ✗ click "#submit"'


def test_single_step_has_no_header():
    result = AgentRunResult(
        steps=[StepResult(step=1, actions=[ActionResult(action=CLICK, success=True)], done=True)],
        goal_achieved=True,
        total_steps=1,
    )

    assert _plain(format_result(result)) == [
        '  ✓ click "#submit"',
        "  Goal achieved in 1 step(s)",
    ]


def test_multiple_steps_have_headers_in_order():
    result = AgentRunResult(
        steps=[
            StepResult(step=1, actions=[ActionResult(action=TYPE, success=True)]),
            StepResult(
                step=2,
                actions=[ActionResult(action=CLICK, success=False, error="timeout")],
                done=False,
            ),
        ],
        goal_achieved=False,
        total_steps=2,
    )

    assert _plain(format_result(result)) == [
        "  Step 1:",
        '  ✓ type "#input" = "hello"',
        "  Step 2:",
        '  ✗ click "#submit" (timeout)',
        "  Goal not confirmed (2 step(s) used)",
    ]


def test_legacy_actions_render_as_successful():
    result = AgentRunResult(actions=[CLICK, TYPE], goal_achieved=True, total_steps=1)

    assert _plain(format_result(result)) == [
        '  ✓ click "#submit"',
        '  ✓ type "#input" = "hello"',
        "  Goal achieved in 1 step(s)",
    ]


def test_empty_result():
    result = AgentRunResult(steps=[], actions=[], goal_achieved=False, total_steps=0)

    assert _plain(format_result(result)) == [
        "  No actions were executed",
        "  Goal not confirmed (0 step(s) used)",
    ]


def test_steps_without_actions_report_nothing_executed():
    result = AgentRunResult(steps=[StepResult(step=1, actions=[])], total_steps=1)

    assert _plain(format_result(result)) == [
        "  No actions were executed",
        "  Goal not confirmed (1 step(s) used)",
    ]


def test_markup_in_targets_is_not_interpreted():
    action = ActionDescriptor(type="click", target="[bold]odd[/bold]")
    assert format_action(action).plain == 'click "[bold]odd[/bold]"'


def test_render_result_joins_lines():
    result = AgentRunResult.model_validate(
        {"actions": [{"type": "click", "target": "#submit"}], "goalAchieved": True, "totalSteps": 1}
    )
    assert render_result(result).plain == '  ✓ click "#submit"\n  Goal achieved in 1 step(s)'
