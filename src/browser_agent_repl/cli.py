"""Command line interface for browser-agent-repl."""

from __future__ import annotations

import asyncio
import logging
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as get_version
from pathlib import Path
from typing import Annotated, Any, Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.text import Text

from .config import AgentConfig, ReplConfig, load_config
from .factory import build_agent, build_browser, resolve_model
from .repl.errors import error_message
from .repl.io import ConsoleLineSource
from .repl.session import AgentRepl

app = typer.Typer(help="Drive a browser with natural-language instructions")


@app.callback()
def main(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable debug logging"),
    ] = False,
) -> None:
    """Configure logging before executing any command."""

    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


@app.command()
def version() -> None:
    """Print the package version."""

    try:
        typer.echo(get_version("browser-agent-repl"))
    except PackageNotFoundError:  # pragma: no cover - when running from source tree
        typer.echo("0.0.0")


@app.command()
def agent(
    browser: Annotated[
        Optional[str],
        typer.Argument(help="Browser to launch (chromium, firefox, webkit)."),
    ] = None,
    config_path: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="Path to YAML configuration."),
    ] = None,
    env_file: Annotated[
        Optional[Path],
        typer.Option("--env-file", help="Path to an .env file with default configuration values."),
    ] = None,
    provider: Annotated[
        Optional[str],
        typer.Option("--provider", help="LLM provider (ollama, anthropic, openai)."),
    ] = None,
    model: Annotated[
        Optional[str],
        typer.Option("--model", "-m", help="LLM model name (defaults depend on provider)."),
    ] = None,
    token: Annotated[
        Optional[str],
        typer.Option("--token", help="API key for the LLM provider."),
    ] = None,
    provider_url: Annotated[
        Optional[str],
        typer.Option("--provider-url", help="API endpoint URL for the LLM provider."),
    ] = None,
    max_steps: Annotated[
        Optional[int],
        typer.Option("--max-steps", help="Max agentic loop steps (1 = single-pass)."),
    ] = None,
    max_actions: Annotated[
        Optional[int],
        typer.Option("--max-actions", help="Max actions per LLM response."),
    ] = None,
    timeout: Annotated[
        Optional[int],
        typer.Option("--timeout", help="LLM request timeout in ms."),
    ] = None,
    toon_format: Annotated[
        Optional[str],
        typer.Option("--toon-format", help="Element encoding format (yaml-like or tabular)."),
    ] = None,
    context_window: Annotated[
        Optional[int],
        typer.Option("--context-window", help="Sliding window size for agentic memory."),
    ] = None,
    headless: Annotated[
        Optional[bool],
        typer.Option("--headless/--headed", help="Run the browser in headless mode (or headed)."),
    ] = None,
    url: Annotated[
        Optional[str],
        typer.Option("--url", help="Page to open before the prompt appears."),
    ] = None,
) -> None:
    """Run natural language browser automation via an LLM agent."""

    agent_overrides: dict[str, Any] = {
        key: value
        for key, value in {
            "provider": provider,
            "model": model,
            "token": token,
            "provider_url": provider_url,
            "max_steps": max_steps,
            "max_actions": max_actions,
            "timeout": timeout,
            "toon_format": toon_format,
            "context_window": context_window,
        }.items()
        if value is not None
    }
    browser_overrides: dict[str, Any] = {
        key: value
        for key, value in {"browser": browser, "headless": headless, "start_url": url}.items()
        if value is not None
    }
    overrides: dict[str, Any] = {}
    if agent_overrides:
        overrides["agent"] = agent_overrides
    if browser_overrides:
        overrides["browser"] = browser_overrides

    try:
        config = load_config(config_path, env_file=env_file, **overrides)
    except ValidationError as exc:
        raise typer.BadParameter(str(exc)) from exc

    code = asyncio.run(serve(config))
    if code:
        raise typer.Exit(code=code)


def build_banner(config: AgentConfig) -> list[Text]:
    return [
        Text("\n🤖 Browser Agent REPL\n", style="bold"),
        Text.assemble("  Provider: ", (config.provider, "cyan")),
        Text.assemble("  Model:    ", (resolve_model(config), "cyan")),
        Text.assemble(
            "  Steps:    ",
            (str(config.max_steps), "cyan"),
            "  Actions: ",
            (str(config.max_actions), "cyan"),
        ),
        Text(""),
        Text("  Commands:  :js <code>  :url  :screenshot <path>  .exit", style="dim"),
        Text(""),
    ]


async def serve(config: ReplConfig) -> int:
    """Start the browser, initialise the agent and run the interactive loop."""

    console = Console()
    error_console = Console(stderr=True)
    browser = build_browser(config.browser)
    try:
        await browser.start()
    except Exception as exc:
        error_console.print(Text(f"Failed to start browser session: {error_message(exc)}", style="red"))
        await browser.stop()
        return 1

    try:
        executor = build_agent(config.agent, browser)
    except Exception as exc:
        error_console.print(
            Text(f"Failed to initialize agent service: {error_message(exc)}", style="red")
        )
        await browser.stop()
        return 1
    repl = AgentRepl(
        browser,
        executor,
        ConsoleLineSource(console),
        console=console,
        error_console=error_console,
        banner=build_banner(config.agent),
    )
    try:
        if not await repl.initialize():
            return 1
        return await repl.run()
    finally:
        await executor.aclose()


if __name__ == "__main__":
    app()
