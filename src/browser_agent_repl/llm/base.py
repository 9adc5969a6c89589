"""Base classes and provider metadata for LLM integrations."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class ProviderDefaults:
    """Defaults applied when the user does not override a provider setting."""

    model: str
    base_url: str
    api_key_env: Optional[str] = None
    requires_key: bool = False


PROVIDER_DEFAULTS: dict[str, ProviderDefaults] = {
    "ollama": ProviderDefaults(model="qwen2.5:7b", base_url="http://localhost:11434/v1"),
    "openai": ProviderDefaults(
        model="gpt-4o-mini",
        base_url="https://api.openai.com/v1",
        api_key_env="OPENAI_API_KEY",
        requires_key=True,
    ),
    "anthropic": ProviderDefaults(
        model="claude-sonnet-4-5",
        base_url="https://api.anthropic.com",
        api_key_env="ANTHROPIC_API_KEY",
        requires_key=True,
    ),
}


class LLMResponseError(RuntimeError):
    """Raised when a provider returns a payload that cannot be used."""


class LLMClient(ABC):
    """Abstract interface for LLM providers."""

    @abstractmethod
    async def complete(self, system: str, prompt: str) -> str:
        """Return the raw text reply for ``prompt``.

        Implementations translate the system/user prompt pair into provider API
        calls. Parsing the reply into a plan is left to the caller.
        """

    async def aclose(self) -> None:
        """Release any network resources held by the client."""

