"""Line input for the interactive prompt."""

from __future__ import annotations

import asyncio
import sys
import threading
from typing import Optional, Protocol, TextIO

from rich.console import Console
from rich.text import Text

PROMPT = "agent> "


class LineSource(Protocol):
    """Source of submitted lines plus the prompt shown for the next one."""

    async def readline(self) -> Optional[str]:
        """Return the next line, or ``None`` once input is exhausted."""

    def prompt(self) -> None:
        """Show the prompt for the next line."""


class ConsoleLineSource:
    """Read lines from a text stream on a daemon thread.

    Lines keep arriving while an operation is in flight, so the session can
    drop them instead of queueing them behind the operation.
    """

    def __init__(
        self,
        console: Console,
        stream: Optional[TextIO] = None,
        *,
        prompt: str = PROMPT,
    ) -> None:
        self._console = console
        self._stream = stream or sys.stdin
        self._prompt = Text(prompt, style="bold")
        self._queue: Optional[asyncio.Queue[Optional[str]]] = None
        self._thread: Optional[threading.Thread] = None

    async def readline(self) -> Optional[str]:
        if self._queue is None:
            self._queue = self._start_reader(asyncio.get_running_loop())
        return await self._queue.get()

    def prompt(self) -> None:
        self._console.print(self._prompt, end="")

    def _start_reader(self, loop: asyncio.AbstractEventLoop) -> asyncio.Queue[Optional[str]]:
        queue: asyncio.Queue[Optional[str]] = asyncio.Queue()

        def _publish(item: Optional[str]) -> bool:
            try:
                loop.call_soon_threadsafe(queue.put_nowait, item)
            except RuntimeError:
                # event loop already closed
                return False
            return True

        def _pump() -> None:
            for raw in iter(self._stream.readline, ""):
                if not _publish(raw.rstrip("\r\n")):
                    return
            _publish(None)

        self._thread = threading.Thread(target=_pump, name="repl-input", daemon=True)
        self._thread.start()
        return queue
