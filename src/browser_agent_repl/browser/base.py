"""Browser session abstractions."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Optional

from ..models import ActionDescriptor


@dataclass
class PageElement:
    """Interactive element visible to the agent."""

    ref: int
    tag: str
    selector: str
    role: Optional[str] = None
    text: Optional[str] = None


@dataclass
class PageSnapshot:
    """Snapshot of the page state used for prompting the LLM."""

    url: Optional[str] = None
    title: Optional[str] = None
    elements: list[PageElement] = field(default_factory=list)


class BrowserActionError(RuntimeError):
    """Raised when executing a browser action fails."""


class BrowserSession(ABC):
    """Interface for an automation-capable browser session.

    A single instance is shared by every REPL branch for the lifetime of the
    session; ``stop`` is called exactly once when the REPL terminates.
    """

    @abstractmethod
    async def start(self) -> None:
        """Launch the browser session."""

    @abstractmethod
    async def stop(self) -> None:
        """Terminate the browser session."""

    @abstractmethod
    async def get_url(self) -> str:
        """Return the URL of the current page."""

    @abstractmethod
    async def save_screenshot(self, path: str) -> None:
        """Capture the current page to ``path``."""

    @abstractmethod
    async def find(self, selector: str) -> Any:
        """Return the first element matching ``selector`` (or ``None``)."""

    @abstractmethod
    async def find_all(self, selector: str) -> list[Any]:
        """Return every element matching ``selector``."""

    @abstractmethod
    async def execute(self, action: ActionDescriptor) -> None:
        """Execute a single agent action."""

    @abstractmethod
    async def snapshot(self) -> PageSnapshot:
        """Return the current state for context."""
