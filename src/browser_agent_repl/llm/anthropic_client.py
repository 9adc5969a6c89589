"""LLM client for the Anthropic Messages API."""

from __future__ import annotations

from typing import Any, Optional

import httpx

from .base import LLMClient, LLMResponseError

ANTHROPIC_VERSION = "2023-06-01"


class AnthropicLLM(LLMClient):
    """Call the Anthropic ``/v1/messages`` endpoint."""

    def __init__(
        self,
        *,
        model: str,
        base_url: str,
        api_key: str,
        timeout: float = 30.0,
        max_tokens: int = 1024,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._model = model
        self._max_tokens = max_tokens
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            headers={
                "Content-Type": "application/json",
                "x-api-key": api_key,
                "anthropic-version": ANTHROPIC_VERSION,
            },
            transport=transport,
        )

    async def complete(self, system: str, prompt: str) -> str:
        payload: dict[str, Any] = {
            "model": self._model,
            "max_tokens": self._max_tokens,
            "system": system,
            "messages": [{"role": "user", "content": prompt}],
        }
        response = await self._client.post("/v1/messages", json=payload)
        response.raise_for_status()
        data = response.json()
        try:
            blocks = data["content"]
            return "".join(block["text"] for block in blocks if block.get("type") == "text")
        except (KeyError, TypeError) as exc:
            raise LLMResponseError(f"Unexpected response format: {data}") from exc

    async def aclose(self) -> None:
        await self._client.aclose()
