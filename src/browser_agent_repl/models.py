"""Shared models used across the browser agent REPL."""

from __future__ import annotations

import enum
from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class BrowserActionType(str, enum.Enum):
    """Enumerated browser commands that the bundled session can execute."""

    NAVIGATE = "navigate"
    CLICK = "click"
    TYPE = "type"
    PRESS = "press"
    SELECT = "select"
    SCROLL = "scroll"
    WAIT = "wait"
    BACK = "back"


class ActionDescriptor(BaseModel):
    """One automation action requested by the agent."""

    model_config = ConfigDict(frozen=True)

    type: str
    target: str
    value: Optional[str] = None


class ActionResult(BaseModel):
    """Outcome of attempting a single action."""

    action: ActionDescriptor
    success: bool
    error: Optional[str] = None

    @model_validator(mode="after")
    def _drop_error_on_success(self) -> "ActionResult":
        if self.success and self.error is not None:
            self.error = None
        return self


class StepResult(BaseModel):
    """One agentic iteration and the actions it executed."""

    step: int = Field(ge=1)
    actions: list[ActionResult] = Field(default_factory=list)
    done: bool = False


class AgentRunResult(BaseModel):
    """Structured result returned by an agent executor for one instruction."""

    model_config = ConfigDict(populate_by_name=True)

    actions: list[ActionDescriptor] = Field(default_factory=list)
    steps: list[StepResult] = Field(default_factory=list)
    goal_achieved: bool = Field(default=False, alias="goalAchieved")
    total_steps: int = Field(default=0, ge=0, alias="totalSteps")


class AgentPlan(BaseModel):
    """Structured reply expected from the LLM on every step."""

    actions: list[ActionDescriptor] = Field(default_factory=list)
    done: bool = False
    message: Optional[str] = Field(default=None, description="Short reasoning for the step.")


class MemoryEntry(BaseModel):
    """Item stored in the agent's sliding memory."""

    content: str
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
