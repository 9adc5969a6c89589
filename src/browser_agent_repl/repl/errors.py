"""Turn caught errors into printable messages and remediation hints.

Hints are advisory and always printed after the original message. Structured
signals (exception types from httpx, asyncio and Playwright) are consulted
first; substring matching on the message is the fallback and will miss hints
when a collaborator rewords its errors.
"""

from __future__ import annotations

import httpx

AUTH_MARKERS = ("API", "key", "token", "auth")
NETWORK_MARKERS = ("fetch", "ECONNREFUSED", "network")
TIMEOUT_MARKERS = ("timed out", "Timeout")

AUTH_HINT = "Hint: Provide an API key via --token or the provider's env var (e.g. ANTHROPIC_API_KEY)"
NETWORK_HINT = "Hint: Check that your LLM provider is running and accessible"
TIMEOUT_HINT = "Hint: A command timed out. The page may still be loading, try again."

_NETWORK_TYPES: tuple[type[BaseException], ...] = (httpx.NetworkError, ConnectionError)
_TIMEOUT_TYPES: tuple[type[BaseException], ...] = (httpx.TimeoutException, TimeoutError)


def error_message(exc: BaseException) -> str:
    return str(exc) or type(exc).__name__


def initialization_hint(message: str) -> str | None:
    """Hint for failures raised while the agent is being set up."""

    if any(marker in message for marker in AUTH_MARKERS):
        return AUTH_HINT
    return None


def call_hints(message: str) -> list[str]:
    """Hints for a failed agent call, matched on the message text alone."""

    hints: list[str] = []
    if any(marker in message for marker in NETWORK_MARKERS):
        hints.append(NETWORK_HINT)
    if any(marker in message for marker in TIMEOUT_MARKERS):
        hints.append(TIMEOUT_HINT)
    return hints


def classify_error(exc: BaseException) -> list[str]:
    """Hints for ``exc`` from its type first, then from its message."""

    # httpx timeouts derive from TransportError, not NetworkError, so the checks are disjoint.
    network = isinstance(exc, _NETWORK_TYPES)
    timeout = isinstance(exc, _TIMEOUT_TYPES)
    text_hints = call_hints(error_message(exc))
    hints: list[str] = []
    if network or NETWORK_HINT in text_hints:
        hints.append(NETWORK_HINT)
    if timeout or TIMEOUT_HINT in text_hints:
        hints.append(TIMEOUT_HINT)
    return hints
