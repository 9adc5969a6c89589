"""Utilities for parsing LLM responses into plans."""

from __future__ import annotations

import json
from typing import Any

from pydantic import ValidationError

from ..models import AgentPlan
from .base import LLMResponseError


def extract_json_object(text: str) -> dict[str, Any]:
    """Extract the first JSON object found in *text* and return it as a dict."""

    cleaned = text.strip()
    if cleaned.startswith("```"):
        cleaned = _strip_code_fence(cleaned)
    start = cleaned.find("{")
    end = cleaned.rfind("}")
    if start == -1 or end == -1 or end <= start:
        raise LLMResponseError("No JSON object found in LLM response")
    snippet = cleaned[start : end + 1]
    try:
        return json.loads(snippet)
    except json.JSONDecodeError as exc:
        raise LLMResponseError(f"Invalid JSON in LLM response: {exc}") from exc


def parse_plan(text: str) -> AgentPlan:
    """Parse raw LLM output into an :class:`AgentPlan`."""

    data = extract_json_object(text)
    try:
        return AgentPlan.model_validate(data)
    except ValidationError as exc:
        raise LLMResponseError(f"LLM response does not match the plan schema: {exc}") from exc


def _strip_code_fence(block: str) -> str:
    parts = block.split("```")
    if len(parts) >= 3:
        inner = parts[1]
        if inner.startswith("json"):
            inner = inner[len("json") :]
        return inner
    return block.strip("`")
