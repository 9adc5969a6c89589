"""Classification of REPL input lines into commands."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Optional, Union

EXIT = ".exit"
EVAL_PREFIX = ":js "
URL = ":url"
SCREENSHOT_PREFIX = ":screenshot"


@dataclass(frozen=True)
class ExitCommand:
    pass


@dataclass(frozen=True)
class EvalCommand:
    code: str


@dataclass(frozen=True)
class UrlCommand:
    pass


@dataclass(frozen=True)
class ScreenshotCommand:
    path: str


@dataclass(frozen=True)
class AgentCommand:
    instruction: str


Command = Union[ExitCommand, EvalCommand, UrlCommand, ScreenshotCommand, AgentCommand]


def default_screenshot_path() -> str:
    return f"screenshot-{int(time.time() * 1000)}.png"


def parse_line(line: str) -> Optional[Command]:
    """Select the command for a trimmed input line.

    Returns ``None`` for an empty line. Checks run in priority order, so a line
    such as ``:screenshot`` never reaches the agent branch.
    """

    if not line:
        return None
    if line == EXIT:
        return ExitCommand()
    if line.startswith(EVAL_PREFIX):
        return EvalCommand(code=line[len(EVAL_PREFIX) :])
    if line == URL:
        return UrlCommand()
    if line.startswith(SCREENSHOT_PREFIX):
        tokens = line.split()
        path = tokens[1] if len(tokens) > 1 else default_screenshot_path()
        return ScreenshotCommand(path=path)
    return AgentCommand(instruction=line)
