"""LLM-backed agent that plans and executes browser actions."""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, Optional

from ..browser.base import BrowserSession
from ..config import AgentConfig
from ..llm.base import LLMClient
from ..llm.json_parser import parse_plan
from ..memory.base import MemoryStore, SlidingWindowMemory
from ..models import ActionResult, AgentPlan, AgentRunResult, MemoryEntry, StepResult
from .base import AgentConfigurationError
from .encoding import get_encoder
from .prompt_builder import SYSTEM_PROMPT, PromptBuilder

LOGGER = logging.getLogger(__name__)


class BrowserAgent:
    """Coordinates LLM planning with browser execution for one instruction at a time."""

    def __init__(
        self,
        config: AgentConfig,
        browser: BrowserSession,
        *,
        llm_factory: Callable[[AgentConfig], LLMClient],
        memory: Optional[MemoryStore] = None,
        prompt_builder: Optional[PromptBuilder] = None,
    ) -> None:
        self._config = config
        self._browser = browser
        self._llm_factory = llm_factory
        self._memory = memory or SlidingWindowMemory(window=config.context_window)
        self._prompt_builder = prompt_builder or PromptBuilder(max_actions=config.max_actions)
        self._encode = get_encoder(config.toon_format)
        self._llm: Optional[LLMClient] = None

    async def initialize(self) -> None:
        self._llm = self._llm_factory(self._config)
        LOGGER.debug("Agent initialised with provider %s", self._config.provider)

    async def aclose(self) -> None:
        if self._llm is not None:
            await self._llm.aclose()
            self._llm = None

    async def run(self, instruction: str) -> AgentRunResult:
        """Run up to ``max_steps`` plan/execute iterations for ``instruction``."""

        if self._llm is None:
            raise AgentConfigurationError("Agent is not initialised")
        self._memory.clear()
        steps: list[StepResult] = []
        for number in range(1, self._config.max_steps + 1):
            plan = await self._plan(instruction)
            results = await self._execute(plan)
            step = StepResult(step=number, actions=results, done=plan.done)
            steps.append(step)
            self._remember(step, plan)
            LOGGER.debug("Step %s finished with %s action(s), done=%s", number, len(results), plan.done)
            if plan.done:
                break
        return AgentRunResult(
            steps=steps,
            goal_achieved=bool(steps) and steps[-1].done,
            total_steps=len(steps),
        )

    async def _plan(self, instruction: str) -> AgentPlan:
        snapshot = await self._browser.snapshot()
        prompt = self._prompt_builder.build(
            instruction,
            snapshot,
            self._encode(snapshot.elements),
            self._memory.get(),
        )
        timeout = self._config.timeout / 1000
        try:
            reply = await asyncio.wait_for(self._llm.complete(SYSTEM_PROMPT, prompt), timeout)
        except asyncio.TimeoutError:
            raise TimeoutError(
                f"LLM request timed out after {self._config.timeout}ms"
            ) from None
        return parse_plan(reply)

    async def _execute(self, plan: AgentPlan) -> list[ActionResult]:
        results: list[ActionResult] = []
        for action in plan.actions[: self._config.max_actions]:
            try:
                await self._browser.execute(action)
            except Exception as exc:
                LOGGER.debug("Action %s failed: %s", action, exc)
                results.append(
                    ActionResult(action=action, success=False, error=str(exc) or type(exc).__name__)
                )
                # remaining actions of the step are skipped
                break
            results.append(ActionResult(action=action, success=True))
        return results

    def _remember(self, step: StepResult, plan: AgentPlan) -> None:
        outcomes = ", ".join(
            f"{result.action.type} {result.action.target}: {'ok' if result.success else result.error}"
            for result in step.actions
        )
        summary = f"Step {step.step}: {outcomes or 'no actions'}"
        if plan.message:
            summary = f"{summary} ({plan.message})"
        self._memory.add(MemoryEntry(content=summary))
