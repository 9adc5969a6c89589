from __future__ import annotations

import pytest
from typer.testing import CliRunner

from browser_agent_repl.cli import app, build_banner, serve
from browser_agent_repl.config import AgentConfig, ReplConfig


def _capture_serve(state: dict[str, object], code: int):
    async def fake_serve(config: ReplConfig) -> int:
        state["config"] = config
        state["calls"] = int(state.get("calls", 0)) + 1
        return code

    return fake_serve


def test_agent_command_passes_options_through(monkeypatch, tmp_path):
    runner = CliRunner()
    state: dict[str, object] = {}
    monkeypatch.setattr("browser_agent_repl.cli.serve", _capture_serve(state, 0))

    result = runner.invoke(
        app,
        [
            "agent",
            "firefox",
            "--provider",
            "anthropic",
            "-m",
            "claude-test",
            "--token",
            "secret",
            "--provider-url",
            "https://llm.internal",
            "--max-steps",
            "4",
            "--max-actions",
            "2",
            "--timeout",
            "5000",
            "--toon-format",
            "tabular",
            "--context-window",
            "6",
            "--headless",
            "--url",
            "https://example.com",
            "--env-file",
            str(tmp_path / "none.env"),
        ],
    )

    assert result.exit_code == 0, result.output
    assert state["calls"] == 1
    config = state["config"]
    assert isinstance(config, ReplConfig)
    assert config.agent.model_dump() == {
        "provider": "anthropic",
        "model": "claude-test",
        "token": "secret",
        "provider_url": "https://llm.internal",
        "max_steps": 4,
        "max_actions": 2,
        "timeout": 5000,
        "toon_format": "tabular",
        "context_window": 6,
    }
    assert config.browser.browser == "firefox"
    assert config.browser.headless is True
    assert config.browser.start_url == "https://example.com"


def test_agent_command_exit_code_follows_session(monkeypatch, tmp_path):
    runner = CliRunner()
    state: dict[str, object] = {}
    monkeypatch.setattr("browser_agent_repl.cli.serve", _capture_serve(state, 1))

    result = runner.invoke(app, ["agent", "--env-file", str(tmp_path / "none.env")])

    assert result.exit_code == 1
    assert state["calls"] == 1


def test_invalid_option_values_are_usage_errors(monkeypatch, tmp_path):
    runner = CliRunner()
    state: dict[str, object] = {}
    monkeypatch.setattr("browser_agent_repl.cli.serve", _capture_serve(state, 0))

    result = runner.invoke(
        app,
        ["agent", "--toon-format", "xml", "--env-file", str(tmp_path / "none.env")],
    )

    assert result.exit_code == 2
    assert "calls" not in state


def test_version_command():
    result = CliRunner().invoke(app, ["version"])
    assert result.exit_code == 0
    assert result.stdout.strip()


def test_banner_lists_provider_model_and_limits():
    lines = [line.plain for line in build_banner(AgentConfig(provider="openai", max_steps=3))]

    assert "  Provider: openai" in lines
    assert "  Model:    gpt-4o-mini" in lines
    assert "  Steps:    3  Actions: 3" in lines
    assert "  Commands:  :js <code>  :url  :screenshot <path>  .exit" in lines


class StoppableBrowser:
    def __init__(self) -> None:
        self.started = False
        self.stop_calls = 0

    async def start(self) -> None:
        self.started = True

    async def stop(self) -> None:
        self.stop_calls += 1


@pytest.mark.asyncio
async def test_serve_stops_browser_when_agent_cannot_be_built(monkeypatch, capsys):
    browser = StoppableBrowser()

    def broken_build_agent(config, session):
        raise ValueError("Unknown element encoding 'xml'")

    monkeypatch.setattr("browser_agent_repl.cli.build_browser", lambda config: browser)
    monkeypatch.setattr("browser_agent_repl.cli.build_agent", broken_build_agent)

    code = await serve(ReplConfig())

    assert code == 1
    assert browser.started is True
    assert browser.stop_calls == 1
    assert "Failed to initialize agent service: Unknown element encoding 'xml'" in capsys.readouterr().err
