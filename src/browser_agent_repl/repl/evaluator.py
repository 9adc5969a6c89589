"""Inline evaluation of user snippets against the shared browser session.

Snippets run with the same privileges as the host process. They see three
names: ``browser`` (the session), ``find`` and ``find_all`` (element lookups
bound to it).
"""

from __future__ import annotations

import inspect
import textwrap
from typing import Any

from ..browser.base import BrowserSession

_FUNCTION_NAME = "__repl_snippet__"
_VERBATIM_PREFIXES = ("await", "return")


def build_source(code: str) -> str:
    """Wrap ``code`` as the body of an async function returning its value."""

    body = code.strip()
    if not body.startswith(_VERBATIM_PREFIXES):
        body = f"return {body}"
    return f"async def {_FUNCTION_NAME}(browser, find, find_all):\n" + textwrap.indent(body, "    ")


class InlineEvaluator:
    """Compile and await snippets; errors propagate to the caller."""

    def __init__(self, browser: BrowserSession) -> None:
        self._browser = browser

    async def evaluate(self, code: str) -> Any:
        namespace: dict[str, Any] = {}
        exec(compile(build_source(code), "<repl>", "exec"), namespace)
        function = namespace[_FUNCTION_NAME]
        result = await function(self._browser, self._browser.find, self._browser.find_all)
        if inspect.isawaitable(result):
            result = await result
        return result
