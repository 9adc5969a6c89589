"""Factories for constructing components from configuration."""

from __future__ import annotations

import os

from .agent.base import AgentConfigurationError
from .agent.service import BrowserAgent
from .browser.base import BrowserSession
from .browser.playwright_session import PlaywrightBrowserSession
from .config import AgentConfig, BrowserConfig
from .llm.anthropic_client import AnthropicLLM
from .llm.base import PROVIDER_DEFAULTS, LLMClient
from .llm.openai_client import OpenAIChatLLM


def resolve_model(config: AgentConfig) -> str:
    """Return the model that will be used for ``config``."""

    if config.model:
        return config.model
    defaults = PROVIDER_DEFAULTS.get(config.provider.lower())
    return defaults.model if defaults else "(provider default)"


def build_llm(config: AgentConfig) -> LLMClient:
    provider = config.provider.lower()
    defaults = PROVIDER_DEFAULTS.get(provider)
    if defaults is None:
        raise AgentConfigurationError(
            f"Unsupported LLM provider: {config.provider} "
            f"(expected one of {', '.join(PROVIDER_DEFAULTS)})"
        )
    api_key = config.token
    if not api_key and defaults.api_key_env:
        api_key = os.environ.get(defaults.api_key_env)
    if defaults.requires_key and not api_key:
        raise AgentConfigurationError(
            f"No API key configured for provider {provider}: "
            f"pass --token or set {defaults.api_key_env}"
        )
    model = config.model or defaults.model
    base_url = config.provider_url or defaults.base_url
    timeout = config.timeout / 1000
    if provider == "anthropic":
        return AnthropicLLM(model=model, base_url=base_url, api_key=api_key or "", timeout=timeout)
    return OpenAIChatLLM(model=model, base_url=base_url, api_key=api_key, timeout=timeout)


def build_browser(config: BrowserConfig) -> PlaywrightBrowserSession:
    return PlaywrightBrowserSession(config)


def build_agent(config: AgentConfig, browser: BrowserSession) -> BrowserAgent:
    return BrowserAgent(config, browser, llm_factory=build_llm)
