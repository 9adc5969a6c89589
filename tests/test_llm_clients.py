from __future__ import annotations

import json

import httpx
import pytest

from browser_agent_repl.agent.base import AgentConfigurationError
from browser_agent_repl.config import AgentConfig
from browser_agent_repl.factory import build_llm, resolve_model
from browser_agent_repl.llm.anthropic_client import AnthropicLLM
from browser_agent_repl.llm.base import LLMResponseError
from browser_agent_repl.llm.openai_client import OpenAIChatLLM


@pytest.mark.asyncio
async def test_openai_client_posts_chat_completion():
    seen: dict[str, object] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["auth"] = request.headers.get("Authorization")
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"choices": [{"message": {"content": '{"done": true}'}}]})

    client = OpenAIChatLLM(
        model="gpt-test",
        base_url="https://api.example.com/v1",
        api_key="secret",
        transport=httpx.MockTransport(handler),
    )
    try:
        reply = await client.complete("system text", "user text")
    finally:
        await client.aclose()

    assert reply == '{"done": true}'
    assert seen["path"] == "/v1/chat/completions"
    assert seen["auth"] == "Bearer secret"
    body = seen["body"]
    assert body["model"] == "gpt-test"
    assert body["messages"] == [
        {"role": "system", "content": "system text"},
        {"role": "user", "content": "user text"},
    ]


@pytest.mark.asyncio
async def test_openai_client_rejects_unexpected_payload():
    client = OpenAIChatLLM(
        model="gpt-test",
        base_url="http://localhost:11434/v1",
        transport=httpx.MockTransport(lambda request: httpx.Response(200, json={"choices": []})),
    )
    try:
        with pytest.raises(LLMResponseError):
            await client.complete("s", "p")
    finally:
        await client.aclose()


@pytest.mark.asyncio
async def test_anthropic_client_joins_text_blocks():
    seen: dict[str, object] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["key"] = request.headers.get("x-api-key")
        seen["version"] = request.headers.get("anthropic-version")
        seen["body"] = json.loads(request.content)
        return httpx.Response(
            200,
            json={"content": [{"type": "text", "text": '{"actions": [],'}, {"type": "text", "text": ' "done": true}'}]},
        )

    client = AnthropicLLM(
        model="claude-test",
        base_url="https://api.anthropic.com",
        api_key="sk-test",
        transport=httpx.MockTransport(handler),
    )
    try:
        reply = await client.complete("system text", "user text")
    finally:
        await client.aclose()

    assert reply == '{"actions": [], "done": true}'
    assert seen["path"] == "/v1/messages"
    assert seen["key"] == "sk-test"
    assert seen["version"] == "2023-06-01"
    assert seen["body"]["system"] == "system text"


@pytest.mark.asyncio
async def test_http_errors_propagate():
    client = OpenAIChatLLM(
        model="gpt-test",
        base_url="https://api.example.com/v1",
        transport=httpx.MockTransport(lambda request: httpx.Response(401, json={"error": "bad key"})),
    )
    try:
        with pytest.raises(httpx.HTTPStatusError):
            await client.complete("s", "p")
    finally:
        await client.aclose()


def test_build_llm_requires_key_for_hosted_providers(monkeypatch):
    monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)

    with pytest.raises(AgentConfigurationError, match="API key"):
        build_llm(AgentConfig(provider="anthropic"))


@pytest.mark.asyncio
async def test_build_llm_reads_key_from_provider_env(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "from-env")

    client = build_llm(AgentConfig(provider="openai"))
    await client.aclose()

    assert isinstance(client, OpenAIChatLLM)


@pytest.mark.asyncio
async def test_build_llm_ollama_needs_no_key():
    client = build_llm(AgentConfig(provider="ollama", token="ignored"))
    await client.aclose()

    assert isinstance(client, OpenAIChatLLM)


@pytest.mark.asyncio
async def test_build_llm_anthropic_with_token():
    client = build_llm(AgentConfig(provider="Anthropic", token="sk"))
    await client.aclose()

    assert isinstance(client, AnthropicLLM)


def test_build_llm_rejects_unknown_provider():
    with pytest.raises(AgentConfigurationError, match="Unsupported LLM provider"):
        build_llm(AgentConfig(provider="bard"))


def test_resolve_model():
    assert resolve_model(AgentConfig(model="custom")) == "custom"
    assert resolve_model(AgentConfig(provider="openai")) == "gpt-4o-mini"
    assert resolve_model(AgentConfig(provider="unknown")) == "(provider default)"
