"""Single-line animated busy indicator."""

from __future__ import annotations

from typing import Optional

from rich.console import Console
from rich.status import Status

SPINNER = "dots"


class BusyIndicator:
    """Redraw a spinner frame in place until stopped.

    Wraps :class:`rich.status.Status`; the line is transient so stopping it
    leaves nothing behind on the terminal.
    """

    def __init__(self, console: Console, *, interval: float = 0.08) -> None:
        self._console = console
        self._interval = interval
        self._label = ""
        self._status: Optional[Status] = None

    @property
    def running(self) -> bool:
        return self._status is not None

    @property
    def label(self) -> str:
        return self._label

    def start(self, label: str) -> None:
        self._label = label
        if self._status is not None:
            self._status.update(label)
            return
        self._status = Status(
            label,
            console=self._console,
            spinner=SPINNER,
            spinner_style="cyan",
            refresh_per_second=1 / self._interval,
        )
        self._status.start()
        # draw the first frame now rather than on the first refresh tick
        self._status.update(label)

    def stop(self) -> None:
        if self._status is None:
            return
        status, self._status = self._status, None
        status.stop()
