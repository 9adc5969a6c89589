"""LLM client for OpenAI-compatible chat completion endpoints."""

from __future__ import annotations

from typing import Any, Optional

import httpx

from .base import LLMClient, LLMResponseError


class OpenAIChatLLM(LLMClient):
    """Call an OpenAI-compatible chat completion API (OpenAI, Ollama)."""

    def __init__(
        self,
        *,
        model: str,
        base_url: str,
        api_key: Optional[str] = None,
        timeout: float = 30.0,
        temperature: float = 0.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._model = model
        self._temperature = temperature
        headers = {"Content-Type": "application/json"}
        if api_key:
            headers["Authorization"] = f"Bearer {api_key}"
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            headers=headers,
            transport=transport,
        )

    async def complete(self, system: str, prompt: str) -> str:
        payload: dict[str, Any] = {
            "model": self._model,
            "messages": [
                {"role": "system", "content": system},
                {"role": "user", "content": prompt},
            ],
            "temperature": self._temperature,
        }
        response = await self._client.post("/chat/completions", json=payload)
        response.raise_for_status()
        data = response.json()
        try:
            return data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as exc:
            raise LLMResponseError(f"Unexpected response format: {data}") from exc

    async def aclose(self) -> None:
        await self._client.aclose()
