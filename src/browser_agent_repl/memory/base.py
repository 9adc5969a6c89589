"""Memory storage abstractions for the agent."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List

from ..models import MemoryEntry


class MemoryStore(ABC):
    """Interface for storing and retrieving agent memory entries."""

    @abstractmethod
    def add(self, entry: MemoryEntry) -> None:
        """Persist a memory entry."""

    @abstractmethod
    def get(self) -> List[MemoryEntry]:
        """Return a list of stored memory entries."""

    @abstractmethod
    def clear(self) -> None:
        """Forget every stored entry."""


class SlidingWindowMemory(MemoryStore):
    """Keep only the most recent ``window`` entries."""

    def __init__(self, window: int = 3) -> None:
        self._entries: List[MemoryEntry] = []
        self._window = window

    def add(self, entry: MemoryEntry) -> None:
        self._entries.append(entry)
        self._prune()

    def get(self) -> List[MemoryEntry]:
        return list(self._entries)

    def clear(self) -> None:
        self._entries.clear()

    def _prune(self) -> None:
        if self._window <= 0:
            self._entries.clear()
            return
        overflow = len(self._entries) - self._window
        if overflow > 0:
            self._entries = self._entries[overflow:]
