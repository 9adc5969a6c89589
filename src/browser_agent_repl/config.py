"""Configuration models for the browser agent REPL."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any, Literal, Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

ToonFormat = Literal["yaml-like", "tabular"]


class AgentConfig(BaseModel):
    """Settings passed through unchanged to the agent executor."""

    provider: str = Field(default="ollama")
    model: Optional[str] = None
    token: Optional[str] = None
    provider_url: Optional[str] = None
    max_steps: int = Field(default=1, ge=1, description="Max agentic loop steps (1 = single-pass).")
    max_actions: int = Field(default=3, ge=1, description="Max actions per LLM response.")
    timeout: int = Field(default=30000, gt=0, description="LLM request timeout in milliseconds.")
    toon_format: ToonFormat = Field(default="yaml-like")
    context_window: int = Field(default=3, ge=0, description="Sliding window size for memory.")


class BrowserConfig(BaseModel):
    """Settings for the browser backend."""

    browser: str = Field(default="chromium")
    headless: bool = False
    viewport_width: int = 1280
    viewport_height: int = 720
    start_url: Optional[str] = None


class ReplConfig(BaseSettings):
    """Top-level configuration for an interactive agent session."""

    model_config = SettingsConfigDict(
        env_prefix="BROWSER_AGENT_REPL_",
        env_file=(".env",),
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
    )

    agent: AgentConfig = Field(default_factory=AgentConfig)
    browser: BrowserConfig = Field(default_factory=BrowserConfig)


def load_config(
    path: Path | None = None,
    *,
    env_file: Path | None = None,
    **overrides: object,
) -> ReplConfig:
    """Load configuration from an optional file, the environment and overrides."""

    data: dict[str, Any] = {}
    if path:
        import yaml

        data = yaml.safe_load(path.read_text()) or {}
    if overrides:
        _deep_update(data, overrides)
    settings_kwargs: dict[str, object] = {}
    if env_file is not None:
        settings_kwargs["_env_file"] = env_file
    config = ReplConfig(**data, **settings_kwargs)
    if not data:
        return config

    merged = config.model_dump(mode="python")
    _deep_update(merged, data)
    return ReplConfig.model_validate(merged)


def _deep_update(target: dict[str, Any], updates: Mapping[str, Any]) -> None:
    """Recursively merge ``updates`` into ``target`` in-place."""

    for key, value in updates.items():
        if (
            isinstance(value, Mapping)
            and isinstance(existing := target.get(key), Mapping)
        ):
            nested: dict[str, Any]
            if isinstance(existing, dict):
                nested = existing
            else:
                nested = dict(existing)
            _deep_update(nested, value)
            target[key] = nested
        else:
            target[key] = value
