"""Interactive session loop dispatching REPL lines to the browser and the agent."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Optional

from rich.console import Console, RenderableType
from rich.pretty import Pretty
from rich.text import Text

from ..agent.base import AgentExecutor
from ..browser.base import BrowserSession
from .commands import (
    AgentCommand,
    Command,
    EvalCommand,
    ExitCommand,
    ScreenshotCommand,
    UrlCommand,
    parse_line,
)
from .errors import classify_error, error_message, initialization_hint
from .evaluator import InlineEvaluator
from .formatting import render_result
from .io import LineSource
from .spinner import BusyIndicator

LOGGER = logging.getLogger(__name__)

THINKING_LABEL = "Thinking..."

ExceptionHandler = Callable[[asyncio.AbstractEventLoop, dict[str, Any]], object]


@dataclass
class SessionState:
    """Mutable state of one REPL invocation.

    ``owner`` identifies the agent run currently holding the single-flight
    slot so a run that was reset by a background failure cannot release a
    slot taken by a later run.
    """

    processing: bool = False
    active_indicator: Optional[BusyIndicator] = None
    owner: Optional[object] = None


class BackgroundFailureObserver:
    """Route exceptions nobody awaited to a callback while subscribed.

    Installs itself as the event loop's exception handler; contexts without
    an exception are passed to the handler that was installed before.
    """

    def __init__(self, on_failure: Callable[[BaseException], None]) -> None:
        self._on_failure = on_failure
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._previous: Optional[ExceptionHandler] = None

    @property
    def subscribed(self) -> bool:
        return self._loop is not None

    def subscribe(self, loop: asyncio.AbstractEventLoop) -> None:
        if self._loop is not None:
            raise RuntimeError("Background failure observer is already subscribed")
        self._previous = loop.get_exception_handler()
        loop.set_exception_handler(self._handle)
        self._loop = loop
        LOGGER.debug("Background failure observer subscribed")

    def unsubscribe(self) -> None:
        if self._loop is None:
            return
        self._loop.set_exception_handler(self._previous)
        self._loop = None
        self._previous = None
        LOGGER.debug("Background failure observer unsubscribed")

    def _handle(self, loop: asyncio.AbstractEventLoop, context: dict[str, Any]) -> None:
        exc = context.get("exception")
        if isinstance(exc, Exception):
            self._on_failure(exc)
        elif self._previous is not None:
            self._previous(loop, context)
        else:
            loop.default_exception_handler(context)


class AgentRepl:
    """Owns the prompt, the single-flight slot and the shared browser session."""

    def __init__(
        self,
        browser: BrowserSession,
        executor: AgentExecutor,
        lines: LineSource,
        *,
        console: Optional[Console] = None,
        error_console: Optional[Console] = None,
        evaluator: Optional[InlineEvaluator] = None,
        indicator_factory: Optional[Callable[[], BusyIndicator]] = None,
        banner: Iterable[RenderableType] = (),
    ) -> None:
        self._browser = browser
        self._executor = executor
        self._lines = lines
        self._console = console or Console()
        self._error_console = error_console or Console(stderr=True)
        self._evaluator = evaluator or InlineEvaluator(browser)
        self._indicator_factory = indicator_factory or (lambda: BusyIndicator(self._console))
        self._banner = list(banner)
        self._observer = BackgroundFailureObserver(self._on_background_failure)
        self._agent_tasks: set[asyncio.Task[None]] = set()
        self._closed = False
        self.state = SessionState()

    @property
    def observer(self) -> BackgroundFailureObserver:
        return self._observer

    async def initialize(self) -> bool:
        """Initialise the agent; on failure the browser is torn down."""

        try:
            await self._executor.initialize()
        except Exception as exc:
            message = error_message(exc)
            hint = initialization_hint(message)
            if hint:
                self._error_console.print(
                    Text(f"\nAgent initialization failed: {message}", style="red")
                )
                self._error_console.print(Text(f"{hint}\n", style="yellow"))
            else:
                self._error_console.print(
                    Text(f"\nFailed to initialize agent service: {message}\n", style="red")
                )
            await self._teardown()
            return False
        return True

    async def run(self) -> int:
        """Serve lines until ``.exit`` or end of input, then tear down."""

        for renderable in self._banner:
            self._console.print(renderable)
        self._observer.subscribe(asyncio.get_running_loop())
        try:
            self._lines.prompt()
            while True:
                line = await self._lines.readline()
                if line is None:
                    break
                if not await self.handle_line(line):
                    break
            if self._agent_tasks:
                await asyncio.gather(*self._agent_tasks, return_exceptions=True)
        finally:
            self._observer.unsubscribe()
            self._console.print(Text("\nClosing browser session...", style="dim"))
            await self._teardown()
        return 0

    async def handle_line(self, line: str) -> bool:
        """Dispatch one submitted line; return ``False`` when the loop should end."""

        text = line.strip()
        if not text:
            self._lines.prompt()
            return True
        if self.state.processing:
            LOGGER.debug("Dropping line submitted while busy")
            return True
        command = parse_line(text)
        if isinstance(command, ExitCommand):
            return False
        if isinstance(command, AgentCommand):
            self._start_agent(command.instruction)
            return True
        await self._run_inline(command)
        self._lines.prompt()
        return True

    async def _run_inline(self, command: Command) -> None:
        try:
            if isinstance(command, EvalCommand):
                result = await self._evaluator.evaluate(command.code)
                if result is not None:
                    self._console.print(Pretty(result))
            elif isinstance(command, UrlCommand):
                url = await self._browser.get_url()
                self._console.print(Text.assemble("Current URL: ", (url, "cyan")))
            elif isinstance(command, ScreenshotCommand):
                await self._browser.save_screenshot(command.path)
                self._console.print(Text.assemble("Screenshot saved: ", (command.path, "cyan")))
        except Exception as exc:
            self._error_console.print(Text(error_message(exc), style="red"))

    def _start_agent(self, instruction: str) -> None:
        ticket = object()
        indicator = self._indicator_factory()
        self.state.processing = True
        self.state.owner = ticket
        self.state.active_indicator = indicator
        indicator.start(THINKING_LABEL)
        task = asyncio.get_running_loop().create_task(
            self._run_agent(instruction, ticket, indicator)
        )
        self._agent_tasks.add(task)
        task.add_done_callback(self._agent_tasks.discard)

    async def _run_agent(self, instruction: str, ticket: object, indicator: BusyIndicator) -> None:
        try:
            try:
                result = await self._executor.run(instruction)
            finally:
                self._release_indicator(indicator)
        except Exception as exc:
            self._print_error(exc)
        else:
            self._console.print(render_result(result))
        finally:
            if self.state.owner is ticket:
                self.state.processing = False
                self.state.owner = None
        self._lines.prompt()

    def _release_indicator(self, indicator: BusyIndicator) -> None:
        indicator.stop()
        if self.state.active_indicator is indicator:
            self.state.active_indicator = None

    def _on_background_failure(self, exc: BaseException) -> None:
        LOGGER.debug("Background failure: %r", exc)
        if self.state.active_indicator is not None:
            self.state.active_indicator.stop()
            self.state.active_indicator = None
        self.state.processing = False
        self.state.owner = None
        self._error_console.print()
        self._print_error(exc)
        self._lines.prompt()

    def _print_error(self, exc: BaseException) -> None:
        self._error_console.print(Text(f"  Error: {error_message(exc)}", style="red"))
        for hint in classify_error(exc):
            self._error_console.print(Text(f"  {hint}", style="yellow"))

    async def _teardown(self) -> None:
        if self._closed:
            return
        self._closed = True
        await self._browser.stop()
