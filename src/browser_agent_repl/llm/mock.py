"""Mock LLM clients for testing and offline use."""

from __future__ import annotations

from collections import deque
from typing import Deque, Iterable

from .base import LLMClient


class ScriptedLLM(LLMClient):
    """Return replies from a predefined sequence."""

    def __init__(self, replies: Iterable[str]) -> None:
        self._replies: Deque[str] = deque(replies)
        self.prompts: list[str] = []

    async def complete(self, system: str, prompt: str) -> str:
        self.prompts.append(prompt)
        if not self._replies:
            raise RuntimeError("ScriptedLLM ran out of replies")
        return self._replies.popleft()
