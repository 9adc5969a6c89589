from pathlib import Path

import pytest
from pydantic import ValidationError

from browser_agent_repl.config import load_config


def test_defaults_match_cli_defaults(tmp_path: Path) -> None:
    config = load_config(env_file=tmp_path / "missing.env")

    assert config.agent.provider == "ollama"
    assert config.agent.max_steps == 1
    assert config.agent.max_actions == 3
    assert config.agent.timeout == 30000
    assert config.agent.toon_format == "yaml-like"
    assert config.agent.context_window == 3
    assert config.browser.browser == "chromium"


def test_load_config_reads_env_file(tmp_path: Path) -> None:
    env_path = tmp_path / ".env"
    env_path.write_text(
        "\n".join(
            [
                "BROWSER_AGENT_REPL_AGENT__PROVIDER=anthropic",
                "BROWSER_AGENT_REPL_AGENT__MAX_STEPS=5",
                "BROWSER_AGENT_REPL_BROWSER__HEADLESS=true",
            ]
        )
    )

    config = load_config(env_file=env_path)

    assert config.agent.provider == "anthropic"
    assert config.agent.max_steps == 5
    assert config.browser.headless is True


def test_load_config_prioritises_overrides(tmp_path: Path) -> None:
    env_path = tmp_path / ".env"
    env_path.write_text(
        "\n".join(
            [
                "BROWSER_AGENT_REPL_AGENT__PROVIDER=openai",
                "BROWSER_AGENT_REPL_AGENT__MODEL=env-model",
            ]
        )
    )

    config_path = tmp_path / "agent.yaml"
    config_path.write_text(
        "\n".join(
            [
                "agent:",
                "  model: file-model",
                "  context_window: 7",
                "browser:",
                "  browser: firefox",
            ]
        )
    )

    config = load_config(config_path, env_file=env_path, agent={"model": "cli-model"})

    assert config.agent.provider == "openai"
    assert config.agent.model == "cli-model"
    assert config.agent.context_window == 7
    assert config.browser.browser == "firefox"


def test_invalid_values_are_rejected(tmp_path: Path) -> None:
    with pytest.raises(ValidationError):
        load_config(env_file=tmp_path / "missing.env", agent={"toon_format": "xml"})
    with pytest.raises(ValidationError):
        load_config(env_file=tmp_path / "missing.env", agent={"max_steps": 0})
