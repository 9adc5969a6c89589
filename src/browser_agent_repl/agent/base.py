"""Interfaces shared by agent executors."""

from __future__ import annotations

from typing import Protocol

from ..models import AgentRunResult


class AgentConfigurationError(RuntimeError):
    """Raised when the agent cannot be initialised from its configuration."""


class AgentExecutor(Protocol):
    """Executor turning natural-language instructions into browser actions."""

    async def initialize(self) -> None:
        """Prepare the executor; may fail, e.g. on missing credentials."""

    async def run(self, instruction: str) -> AgentRunResult:
        """Carry out ``instruction`` and report what was executed."""
